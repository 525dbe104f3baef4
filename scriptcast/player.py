"""Cancellable audio playback through the ffmpeg player."""

import asyncio
import io
import logging
import os
import shutil
import subprocess
import tempfile

from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError
from pydub.utils import get_player_name

from scriptcast.constants import PLAYER_ARGS
from scriptcast.errors import PlaybackError

logger = logging.getLogger(__name__)


def decode_audio(audio_bytes: bytes, fmt: str = "mp3") -> AudioSegment:
    """Decode encoded audio, raising PlaybackError if it is not playable."""
    if not audio_bytes:
        raise PlaybackError("No audio data to play")
    try:
        return AudioSegment.from_file(io.BytesIO(audio_bytes), format=fmt)
    except (CouldntDecodeError, IndexError, OSError) as e:
        raise PlaybackError(f"Could not decode audio: {e}") from e


class AudioPlayer:
    """Plays one clip at a time; holds the output device only while playing."""

    def __init__(self, player: str | None = None, fmt: str = "mp3") -> None:
        self.player = player or get_player_name()
        self.fmt = fmt
        self._proc = None

    @property
    def playing(self) -> bool:
        return self._proc is not None and self._proc.returncode is None

    def stop(self) -> None:
        """Terminate the clip that is currently playing, if any."""
        if self.playing:
            try:
                self._proc.terminate()
            except ProcessLookupError:
                pass

    async def play(self, audio_bytes: bytes, cancel_event: asyncio.Event) -> bool:
        """Play a clip until it ends or cancel_event is set.

        Returns True if the clip played to the end, False if it was cancelled.
        """
        if cancel_event.is_set():
            return False
        if not shutil.which(self.player):
            raise PlaybackError(f"{self.player} is required but not found")

        audio = await asyncio.to_thread(decode_audio, audio_bytes, self.fmt)
        fd, path = tempfile.mkstemp(suffix=".wav")
        os.close(fd)
        try:
            await asyncio.to_thread(audio.export, path, format="wav")
            logger.debug("Playing %.1fs clip", len(audio) / 1000)
            return await self._run(path, cancel_event)
        finally:
            os.remove(path)

    async def _run(self, path: str, cancel_event: asyncio.Event) -> bool:
        try:
            self._proc = await asyncio.create_subprocess_exec(
                self.player, *PLAYER_ARGS, path,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise PlaybackError(f"Could not start {self.player}: {e}") from e

        finished = asyncio.ensure_future(self._proc.wait())
        cancelled = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait(
                {finished, cancelled},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            cancelled.cancel()
            if not finished.done():
                self.stop()
                await finished
            self._proc = None

        if finished not in done:
            logger.debug("Playback cancelled")
            return False
        returncode = finished.result()
        if returncode != 0:
            raise PlaybackError(f"{self.player} exited with status {returncode}")
        return True
