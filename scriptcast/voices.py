"""Static voice catalog and default voice assignment."""

import logging

from scriptcast.constants import NARRATOR_VOICE, SPEAKER_VOICE
from scriptcast.models import NO_VOICE, Voice, VoiceAssignment

logger = logging.getLogger(__name__)

PROVIDER_GOOGLE = "google"
PROVIDER_EDGE = "edge"
PROVIDERS = (PROVIDER_GOOGLE, PROVIDER_EDGE)

# Hardcoded catalogs (avoids a network call at startup). Every list ends with
# the "None" entry so a role can be left unvoiced.
GOOGLE_VOICES = {
    "korean": [
        Voice("ko-KR-Standard-A", "ko-KR", "Korean female A"),
        Voice("ko-KR-Standard-B", "ko-KR", "Korean male B"),
        Voice("ko-KR-Standard-C", "ko-KR", "Korean male C"),
        Voice("ko-KR-Standard-D", "ko-KR", "Korean female D"),
        Voice(NO_VOICE, "", "None"),
    ],
    "english": [
        Voice("en-US-Standard-A", "en-US", "English male A"),
        Voice("en-US-Standard-B", "en-US", "English male B"),
        Voice("en-US-Standard-C", "en-US", "English female C"),
        Voice("en-US-Standard-D", "en-US", "English male D"),
        Voice("en-US-Standard-E", "en-US", "English female E"),
        Voice(NO_VOICE, "", "None"),
    ],
}

EDGE_VOICES = {
    "korean": [
        Voice("ko-KR-SunHiNeural", "ko-KR", "Korean female SunHi"),
        Voice("ko-KR-InJoonNeural", "ko-KR", "Korean male InJoon"),
        Voice(NO_VOICE, "", "None"),
    ],
    "english": [
        Voice("en-US-AriaNeural", "en-US", "English female Aria"),
        Voice("en-US-DavisNeural", "en-US", "English male Davis"),
        Voice("en-US-JennyNeural", "en-US", "English female Jenny"),
        Voice("en-US-TonyNeural", "en-US", "English male Tony"),
        Voice("en-GB-SoniaNeural", "en-GB", "British female Sonia"),
        Voice("en-GB-RyanNeural", "en-GB", "British male Ryan"),
        Voice(NO_VOICE, "", "None"),
    ],
}

_CATALOGS = {
    PROVIDER_GOOGLE: GOOGLE_VOICES,
    PROVIDER_EDGE: EDGE_VOICES,
}

# First real voice of each language per provider.
_DEFAULTS = {
    PROVIDER_GOOGLE: (NARRATOR_VOICE, SPEAKER_VOICE),
    PROVIDER_EDGE: ("ko-KR-SunHiNeural", "en-US-AriaNeural"),
}


def languages(provider: str = PROVIDER_GOOGLE) -> list[str]:
    return list(_catalog(provider))


def get_voices(language: str, provider: str = PROVIDER_GOOGLE) -> list[Voice]:
    """Return the voices for a language, or an empty list if it is unknown."""
    return list(_catalog(provider).get(language, []))


def find_voice(voice_id: str, provider: str | None = None) -> Voice | None:
    """Look a voice up by id across one provider's catalog, or all of them."""
    providers = [provider] if provider else list(_CATALOGS)
    for name in providers:
        for voices in _catalog(name).values():
            for voice in voices:
                if voice.id == voice_id:
                    return voice
    return None


def default_assignment(provider: str = PROVIDER_GOOGLE) -> VoiceAssignment:
    """Narrator reads in Korean, speakers A-C in English, as the UI defaults."""
    narrator, speaker = _DEFAULTS[_check_provider(provider)]
    return VoiceAssignment(
        narrator=narrator,
        speaker_a=speaker,
        speaker_b=speaker,
        speaker_c=speaker,
    )


def build_assignment(
    narrator: str | None = None,
    speaker_a: str | None = None,
    speaker_b: str | None = None,
    speaker_c: str | None = None,
    provider: str = PROVIDER_GOOGLE,
) -> VoiceAssignment:
    """Overlay explicit choices on the provider defaults.

    Pass "" (or "none") to leave a role unvoiced. Ids missing from the catalog
    are accepted but logged, since providers publish more voices than we list.
    """
    assignment = default_assignment(provider)
    overrides = {
        "narrator": narrator,
        "speaker_a": speaker_a,
        "speaker_b": speaker_b,
        "speaker_c": speaker_c,
    }
    for role, voice_id in overrides.items():
        if voice_id is None:
            continue
        if voice_id.strip().lower() == "none":
            voice_id = NO_VOICE
        if voice_id and find_voice(voice_id, provider) is None:
            logger.warning("Voice %s is not in the %s catalog", voice_id, provider)
        setattr(assignment, role, voice_id)
    return assignment


def _check_provider(provider: str) -> str:
    if provider not in _CATALOGS:
        raise ValueError(f"Unknown provider: {provider!r} (expected one of {', '.join(PROVIDERS)})")
    return provider


def _catalog(provider: str) -> dict[str, list[Voice]]:
    return _CATALOGS[_check_provider(provider)]
