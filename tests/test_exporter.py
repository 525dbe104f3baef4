"""Tests for exporter module."""

import asyncio
import os
from datetime import datetime

import pytest
from pydub import AudioSegment

from conftest import FakeSynthesizer
from scriptcast.errors import InvalidFileNameError, SynthesisError
from scriptcast.exporter import default_file_name, export_recording, render_recording
from scriptcast.parser import parse_script


def test_default_file_name():
    assert default_file_name(datetime(2024, 3, 5, 7, 8, 9)) == "TTS_20240305070809"


def test_render_concatenates_in_order(sample_script, voices, tiny_mp3_bytes, capsys):
    """One synthesis call per segment, in source order."""
    segments = parse_script(sample_script, voices)
    synth = FakeSynthesizer(audio=tiny_mp3_bytes)
    audio = asyncio.run(render_recording(segments, synth))
    assert [text for text, _ in synth.calls] == ["1. Title", "hello", "hi", "note"]
    assert len(audio) >= 4 * 90
    assert "4/4" in capsys.readouterr().out


def test_render_stops_at_first_failure(sample_script, voices, tiny_mp3_bytes):
    segments = parse_script(sample_script, voices)
    synth = FakeSynthesizer(fail_at=1, audio=tiny_mp3_bytes)
    with pytest.raises(SynthesisError):
        asyncio.run(render_recording(segments, synth))
    assert len(synth.calls) == 2


def test_export_creates_file(tmp_path):
    """Output file exists and is >0 bytes."""
    path = export_recording(AudioSegment.silent(duration=500), str(tmp_path / "out"), "my take")
    assert path == os.path.join(str(tmp_path / "out"), "my take.mp3")
    assert os.path.getsize(path) > 0


def test_export_strips_extension(tmp_path):
    path = export_recording(AudioSegment.silent(duration=100), str(tmp_path), "take.mp3")
    assert path.endswith("take.mp3")
    assert not path.endswith(".mp3.mp3")


@pytest.mark.parametrize("name", ["", "   ", "a/b", "what?", "x:y", "tab\there"])
def test_export_rejects_invalid_names(tmp_path, name):
    with pytest.raises(InvalidFileNameError):
        export_recording(AudioSegment.silent(duration=100), str(tmp_path), name)
    assert os.listdir(tmp_path) == []
