"""Split a multi-speaker script into voice-assigned segments."""

import logging
import re

from scriptcast.models import (
    NarratorMode,
    ParseAnomaly,
    ParseResult,
    Segment,
    SpeakerRole,
    VoiceAssignment,
)

logger = logging.getLogger(__name__)

# "A: hello" -> speaker A, content "hello". Case-sensitive, content required.
_SPEAKER_RE = re.compile(r"^([ABC]):\s*(.+)")

# "1. Chapter one" -> title line
_TITLE_RE = re.compile(r"^\d+\.")

_ROLES = {"A": SpeakerRole.A, "B": SpeakerRole.B, "C": SpeakerRole.C}


def is_title(line: str) -> bool:
    """True if the line starts with digits followed by a period."""
    return bool(_TITLE_RE.match(line.strip()))


def speaker_info(line: str) -> tuple[SpeakerRole, str] | None:
    """Return (role, content) for a speaker line, None for narrator text."""
    match = _SPEAKER_RE.match(line)
    if not match:
        return None
    return _ROLES[match.group(1)], match.group(2).strip()


def _iter_lines(text: str):
    """Yield (line_number, trimmed_line, start, end) for each non-blank line.

    start/end are offsets of the trimmed line inside text, tracked from the
    running position so duplicate lines keep their own spans.
    """
    offset = 0
    for number, raw in enumerate(text.split("\n"), start=1):
        stripped = raw.strip()
        if stripped:
            start = offset + (len(raw) - len(raw.lstrip()))
            yield number, stripped, start, start + len(stripped)
        offset += len(raw) + 1


def _narrator_content(line: str, mode: NarratorMode) -> str:
    if mode is NarratorMode.READ_ALL:
        return line
    if mode is NarratorMode.TITLES_ONLY and is_title(line):
        return line
    return ""


def parse_script_detailed(
    text: str,
    voices: VoiceAssignment,
    mode: NarratorMode | str = NarratorMode.READ_ALL,
) -> ParseResult:
    """Parse a script and also report the lines that were dropped.

    Never raises on malformed input: anything that does not match a speaker
    prefix is narrator text, and lines without a voice or skipped by the
    narrator mode are recorded as anomalies instead of being emitted.
    """
    mode = NarratorMode.parse(mode)
    result = ParseResult()

    for number, line, start, end in _iter_lines(text):
        info = speaker_info(line)
        if info:
            role, content = info
        else:
            role = SpeakerRole.NARRATOR
            content = _narrator_content(line, mode)
            if not content:
                result.anomalies.append(ParseAnomaly(number, "narrator_skipped", start, end))
                continue

        voice_id = voices.voice_for(role)
        if not voice_id:
            result.anomalies.append(ParseAnomaly(number, "no_voice", start, end))
            continue

        result.segments.append(Segment(
            source_text=content,
            speaker_role=role,
            voice_id=voice_id,
            source_start=start,
            source_end=end,
        ))

    if result.anomalies:
        logger.debug(
            "Dropped %d line(s): %s",
            len(result.anomalies),
            ", ".join(f"{a.line_number}:{a.reason}" for a in result.anomalies),
        )
    return result


def parse_script(
    text: str,
    voices: VoiceAssignment,
    mode: NarratorMode | str = NarratorMode.READ_ALL,
) -> list[Segment]:
    """Parse a script into ordered segments, silently dropping unvoiced lines."""
    return parse_script_detailed(text, voices, mode).segments
