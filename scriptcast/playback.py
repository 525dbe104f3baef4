"""Sequential synthesize-then-play pipeline with highlight events and cancellation.

One segment is synthesized, highlighted and played before the next one is
requested. ``stop()`` is cooperative: it is checked before every synthesis
call, after every synthesis result, and raced against the end of each clip.
The first synthesis or playback error ends the session as FAILED and is
re-raised from the task returned by ``start()``.
"""

import asyncio
import logging
from typing import Callable

from scriptcast.errors import AlreadyRunningError, error_kind
from scriptcast.models import (
    NarratorMode,
    PlaybackSession,
    Segment,
    SessionState,
    SynthesizedSegment,
    VoiceAssignment,
)
from scriptcast.parser import parse_script_detailed
from scriptcast.player import AudioPlayer
from scriptcast.session import SessionTracker
from scriptcast.tts import Synthesizer

logger = logging.getLogger(__name__)

EVENT_HIGHLIGHT = "highlight"
EVENT_CLEAR_HIGHLIGHT = "clear_highlight"
EVENT_STATE_CHANGED = "state_changed"
EVENT_ERROR = "error"


class PlaybackController:
    def __init__(self, synthesizer: Synthesizer, player: AudioPlayer | None = None) -> None:
        self.synthesizer = synthesizer
        self.player = player or AudioPlayer()
        self.sessions = SessionTracker()
        self.last_outcome: SessionState | None = None
        self._cancel = asyncio.Event()
        self._task: asyncio.Task | None = None
        self._listeners: dict[str, list[Callable]] = {
            EVENT_HIGHLIGHT: [],
            EVENT_CLEAR_HIGHLIGHT: [],
            EVENT_STATE_CHANGED: [],
            EVENT_ERROR: [],
        }

    # --- subscriptions ---

    def on_highlight(self, callback: Callable[[int, int], None]) -> None:
        self._listeners[EVENT_HIGHLIGHT].append(callback)

    def on_clear_highlight(self, callback: Callable[[], None]) -> None:
        self._listeners[EVENT_CLEAR_HIGHLIGHT].append(callback)

    def on_state_changed(self, callback: Callable[[SessionState], None]) -> None:
        self._listeners[EVENT_STATE_CHANGED].append(callback)

    def on_error(self, callback: Callable[[str, str], None]) -> None:
        self._listeners[EVENT_ERROR].append(callback)

    def _emit(self, event: str, *args) -> None:
        for callback in list(self._listeners[event]):
            try:
                callback(*args)
            except Exception:
                logger.exception("%s listener failed", event)

    # --- observability ---

    @property
    def state(self) -> SessionState:
        return self.sessions.state

    @property
    def current_index(self) -> int:
        return self.sessions.current_index

    @property
    def running(self) -> bool:
        return self.sessions.running

    # --- control ---

    def start(
        self,
        text: str,
        voices: VoiceAssignment,
        mode: NarratorMode | str = NarratorMode.READ_ALL,
    ) -> asyncio.Task:
        """Parse a script and start playing it. Must be called inside an event loop.

        The session is RUNNING when this returns, so a ``stop()`` issued right
        after it prevents any synthesis call.
        """
        if self.running:
            raise AlreadyRunningError("Playback is already running")
        result = parse_script_detailed(text, voices, mode)
        if result.anomalies:
            logger.info("%d line(s) will not be spoken", len(result.anomalies))
        return self.start_segments(result.segments)

    def start_segments(self, segments: list[Segment]) -> asyncio.Task:
        loop = asyncio.get_running_loop()
        session = self.sessions.open(segments)
        self._cancel = asyncio.Event()
        logger.info("Playing %d segment(s)", len(session.segments))
        self._emit(EVENT_STATE_CHANGED, SessionState.RUNNING)
        self._task = loop.create_task(self._run(session))
        return self._task

    async def play(
        self,
        text: str,
        voices: VoiceAssignment,
        mode: NarratorMode | str = NarratorMode.READ_ALL,
    ) -> SessionState:
        """Start and wait for the session to end. Returns its final state."""
        return await self.start(text, voices, mode)

    def stop(self) -> None:
        """Request cancellation. No effect unless a session is running."""
        if not self.running or self._cancel.is_set():
            return
        logger.info("Stop requested at segment %d", self.current_index)
        self._cancel.set()

    # --- main loop ---

    async def _run(self, session: PlaybackSession) -> SessionState:
        try:
            while session.current_index < len(session.segments):
                segment = session.segments[session.current_index]
                if self._cancel.is_set():
                    self._finish(SessionState.CANCELLED)
                    break

                try:
                    audio = await self.synthesizer.synthesize(segment.source_text, segment.voice_id)
                except Exception as e:
                    self._fail(e)
                    raise
                if self._cancel.is_set():
                    # the in-flight request is not aborted, only its result dropped
                    self._finish(SessionState.CANCELLED)
                    break
                clip = SynthesizedSegment(segment, audio)

                logger.debug(
                    "Segment %d/%d [%s] %s",
                    session.current_index + 1, len(session.segments),
                    segment.speaker_role.value, segment.source_text[:50],
                )
                self._emit(EVENT_HIGHLIGHT, segment.source_start, segment.source_end)
                try:
                    played = await self.player.play(clip.audio_bytes, self._cancel)
                except Exception as e:
                    self._fail(e)
                    raise
                if not played:
                    self._finish(SessionState.CANCELLED)
                    break
                self.sessions.advance()
            else:
                self._finish(SessionState.COMPLETED)
        except asyncio.CancelledError:
            if session.state is SessionState.RUNNING:
                self._finish(SessionState.CANCELLED)
            raise
        finally:
            self._close(session)
        return session.state

    def _finish(self, state: SessionState) -> None:
        self.sessions.finish(state)
        self.last_outcome = state
        logger.info("Playback %s after %d segment(s)", state.value, self.current_index)
        self._emit(EVENT_STATE_CHANGED, state)

    def _fail(self, exc: BaseException) -> None:
        self._finish(SessionState.FAILED)
        kind = error_kind(exc)
        logger.error("Playback failed (%s): %s", kind, exc)
        self._emit(EVENT_ERROR, kind, str(exc))

    def _close(self, session: PlaybackSession) -> None:
        self._emit(EVENT_CLEAR_HIGHLIGHT)
        if self.sessions.session is not session:
            # a listener already started the next session; leave it alone
            logger.debug("Next session started before close, skipping reset")
            return
        self.sessions.reset()
        self._task = None
        self._emit(EVENT_STATE_CHANGED, SessionState.IDLE)
