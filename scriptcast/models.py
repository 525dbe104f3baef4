"""Data models for script playback."""

import enum
from dataclasses import dataclass, field

NO_VOICE = ""


@dataclass(frozen=True)
class Voice:
    id: str
    language_code: str
    label: str


class NarratorMode(enum.Enum):
    READ_ALL = "read-all"
    TITLES_ONLY = "titles-only"
    SKIP = "skip"

    @classmethod
    def parse(cls, value: "str | NarratorMode") -> "NarratorMode":
        """Accept a member, its value ("titles-only") or its name ("TITLES_ONLY")."""
        if isinstance(value, cls):
            return value
        key = str(value).strip()
        for mode in cls:
            if key.lower() == mode.value or key.upper().replace("-", "_") == mode.name:
                return mode
        raise ValueError(f"Unknown narrator mode: {value!r}")


class SpeakerRole(enum.Enum):
    NARRATOR = "narrator"
    A = "A"
    B = "B"
    C = "C"


@dataclass
class VoiceAssignment:
    narrator: str = NO_VOICE
    speaker_a: str = NO_VOICE
    speaker_b: str = NO_VOICE
    speaker_c: str = NO_VOICE

    def voice_for(self, role: SpeakerRole) -> str:
        return {
            SpeakerRole.NARRATOR: self.narrator,
            SpeakerRole.A: self.speaker_a,
            SpeakerRole.B: self.speaker_b,
            SpeakerRole.C: self.speaker_c,
        }[role]


@dataclass(frozen=True)
class Segment:
    source_text: str           # text sent to synthesis, speaker prefix removed
    speaker_role: SpeakerRole
    voice_id: str
    source_start: int          # span of the trimmed source line in the script
    source_end: int


@dataclass
class SynthesizedSegment:
    segment: Segment
    audio_bytes: bytes


@dataclass(frozen=True)
class ParseAnomaly:
    line_number: int           # 1-based
    reason: str                # "no_voice" or "narrator_skipped"
    source_start: int
    source_end: int


@dataclass
class ParseResult:
    segments: list[Segment] = field(default_factory=list)
    anomalies: list[ParseAnomaly] = field(default_factory=list)


class SessionState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class PlaybackSession:
    segments: list[Segment]
    state: SessionState = SessionState.IDLE
    current_index: int = 0
