"""Render a whole script into one MP3 recording."""

import logging
import os
from datetime import datetime

from pydub import AudioSegment

from scriptcast.config import validate_file_name
from scriptcast.constants import OUTPUT_BITRATE, RECORDING_PAUSE_MS, VERSION
from scriptcast.errors import InvalidFileNameError
from scriptcast.models import Segment
from scriptcast.player import decode_audio
from scriptcast.tts import Synthesizer

logger = logging.getLogger(__name__)


def default_file_name(now: datetime | None = None) -> str:
    """TTS_YYYYMMDDHHMMSS, from the local clock."""
    now = now or datetime.now()
    return f"TTS_{now.strftime('%Y%m%d%H%M%S')}"


async def render_recording(
    segments: list[Segment],
    synthesizer: Synthesizer,
    pause_ms: int = RECORDING_PAUSE_MS,
) -> AudioSegment:
    """Synthesize every segment in order and concatenate the clips.

    Stops at the first synthesis error; nothing is written in that case.
    """
    total = len(segments)
    result = AudioSegment.silent(duration=0)
    for i, seg in enumerate(segments):
        print(f"  Synthesizing segment {i + 1}/{total}: [{seg.speaker_role.value}] {seg.source_text[:40]}")
        audio = decode_audio(await synthesizer.synthesize(seg.source_text, seg.voice_id))
        if i and pause_ms:
            result += AudioSegment.silent(duration=pause_ms)
        result += audio
    return result


def export_recording(audio: AudioSegment, directory: str, file_name: str) -> str:
    """Write audio as directory/<file_name>.mp3. Returns the written path."""
    file_name = file_name.strip()
    if file_name.lower().endswith(".mp3"):
        file_name = file_name[:-4]
    if not validate_file_name(file_name):
        raise InvalidFileNameError(f"Invalid file name: {file_name!r}")

    os.makedirs(directory, exist_ok=True)
    output_path = os.path.join(directory, f"{file_name}.mp3")
    audio.export(
        output_path,
        format="mp3",
        bitrate=OUTPUT_BITRATE,
        tags={"title": file_name, "encoded_by": f"scriptcast {VERSION}"},
    )
    logger.info("Wrote %s (%.1fs)", output_path, len(audio) / 1000)
    return output_path
