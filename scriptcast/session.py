"""Playback session bookkeeping: state, position and the single-session rule."""

from scriptcast.errors import AlreadyRunningError
from scriptcast.models import PlaybackSession, Segment, SessionState

_FINAL_STATES = (SessionState.CANCELLED, SessionState.COMPLETED, SessionState.FAILED)


class SessionTracker:
    """Holds at most one session; a second start while running is rejected."""

    def __init__(self) -> None:
        self.session: PlaybackSession | None = None

    @property
    def state(self) -> SessionState:
        return self.session.state if self.session else SessionState.IDLE

    @property
    def current_index(self) -> int:
        return self.session.current_index if self.session else 0

    @property
    def running(self) -> bool:
        return self.state is SessionState.RUNNING

    def open(self, segments: list[Segment]) -> PlaybackSession:
        if self.running:
            raise AlreadyRunningError("Playback is already running")
        self.session = PlaybackSession(
            segments=list(segments),
            state=SessionState.RUNNING,
            current_index=0,
        )
        return self.session

    def advance(self) -> int:
        """Move to the next segment. The index never moves backwards."""
        self._require_running()
        self.session.current_index += 1
        return self.session.current_index

    def finish(self, state: SessionState) -> None:
        """Leave RUNNING for one of the final states."""
        if state not in _FINAL_STATES:
            raise ValueError(f"Not a final state: {state}")
        self._require_running()
        self.session.state = state

    def reset(self) -> None:
        self.session = None

    def _require_running(self) -> None:
        if not self.running:
            raise RuntimeError(f"No running session (state={self.state.value})")
