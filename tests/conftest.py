"""Shared fixtures for scriptcast tests."""

import asyncio
import io

import pytest
from pydub import AudioSegment

from scriptcast.errors import PlaybackError, SynthesisError
from scriptcast.models import VoiceAssignment


SAMPLE_SCRIPT = "1. Title\nA: hello\nB: hi\nnote"


class FakeSynthesizer:
    """Returns b"audio:<text>" and records every request.

    fail_at: index of the call that raises (default SynthesisError).
    """

    def __init__(self, fail_at=None, error=None, audio=None):
        self.calls = []
        self.fail_at = fail_at
        self.error = error or SynthesisError("Voice not found")
        self.audio = audio
        self.before_return = None
        self.closed = False

    async def aclose(self):
        self.closed = True

    async def synthesize(self, text, voice_id):
        index = len(self.calls)
        self.calls.append((text, voice_id))
        await asyncio.sleep(0)
        if index == self.fail_at:
            raise self.error
        if self.before_return:
            self.before_return(index)
        if self.audio is not None:
            return self.audio
        return f"audio:{text}".encode()


class FakePlayer:
    """Finishes clips immediately, except the one at hold_at.

    The held clip waits for cancellation and reports it as not played.
    on_play(index) runs when a clip starts.
    """

    def __init__(self, hold_at=None, fail_at=None):
        self.played = []
        self.completed = []
        self.hold_at = hold_at
        self.fail_at = fail_at
        self.on_play = None
        self.stopped = 0

    def stop(self):
        self.stopped += 1

    async def play(self, audio_bytes, cancel_event):
        index = len(self.played)
        self.played.append(audio_bytes)
        if self.on_play:
            self.on_play(index)
        if index == self.fail_at:
            raise PlaybackError("device busy")
        if index == self.hold_at:
            await cancel_event.wait()
            return False
        await asyncio.sleep(0)
        self.completed.append(audio_bytes)
        return True


@pytest.fixture
def voices():
    return VoiceAssignment(narrator="vn", speaker_a="va", speaker_b="vb", speaker_c="vc")


@pytest.fixture
def sample_script():
    return SAMPLE_SCRIPT


@pytest.fixture
def tiny_mp3_bytes():
    """A 100ms silent MP3 (needs ffmpeg, like any pydub mp3 export)."""
    buf = io.BytesIO()
    AudioSegment.silent(duration=100).export(buf, format="mp3")
    return buf.getvalue()


@pytest.fixture
def tiny_wav_bytes():
    buf = io.BytesIO()
    AudioSegment.silent(duration=100).export(buf, format="wav")
    return buf.getvalue()
