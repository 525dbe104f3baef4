"""Tests for voices module."""

import pytest

from scriptcast.models import NO_VOICE, SpeakerRole
from scriptcast.voices import (
    GOOGLE_VOICES,
    build_assignment,
    default_assignment,
    find_voice,
    get_voices,
    languages,
)


def test_catalog_languages():
    assert languages() == ["korean", "english"]
    assert languages("edge") == ["korean", "english"]


def test_every_list_ends_with_none():
    for voices in GOOGLE_VOICES.values():
        assert voices[-1].id == NO_VOICE
        assert voices[-1].label == "None"


def test_language_code_matches_id():
    for voices in GOOGLE_VOICES.values():
        for voice in voices:
            if voice.id:
                assert voice.id.startswith(voice.language_code + "-")


def test_get_voices_unknown_language():
    assert get_voices("klingon") == []


def test_get_voices_returns_copy():
    voices = get_voices("english")
    voices.clear()
    assert get_voices("english")


def test_find_voice():
    assert find_voice("ko-KR-Standard-C").label == "Korean male C"
    assert find_voice("en-US-AriaNeural", "edge").language_code == "en-US"
    assert find_voice("en-US-AriaNeural", "google") is None
    assert find_voice("nope") is None


def test_default_assignment():
    voices = default_assignment()
    assert voices.voice_for(SpeakerRole.NARRATOR).startswith("ko-KR")
    for role in (SpeakerRole.A, SpeakerRole.B, SpeakerRole.C):
        assert voices.voice_for(role).startswith("en-US")


def test_build_assignment_overrides():
    voices = build_assignment(speaker_b="en-US-Standard-E", speaker_c="none")
    assert voices.speaker_b == "en-US-Standard-E"
    assert voices.speaker_c == NO_VOICE
    assert voices.narrator == default_assignment().narrator


def test_build_assignment_accepts_unlisted_voice(caplog):
    voices = build_assignment(narrator="ko-KR-Wavenet-A")
    assert voices.narrator == "ko-KR-Wavenet-A"
    assert "not in the google catalog" in caplog.text


def test_unknown_provider():
    with pytest.raises(ValueError):
        default_assignment("festival")
