"""Speech synthesis clients: Google Cloud TTS over HTTP, and edge-tts.

Every client exposes one coroutine, ``synthesize(text, voice_id) -> bytes``,
returning MP3 audio. Failures are mapped onto the error taxonomy in
``scriptcast.errors`` and raised immediately; nothing is retried.
"""

import asyncio
import base64
import binascii
import logging
import re
from typing import Protocol

import aiohttp
import edge_tts
import httpx
from edge_tts.exceptions import (
    NoAudioReceived,
    UnexpectedResponse,
    UnknownResponse,
    WebSocketError,
)

from scriptcast.config import ApiKeyProvider
from scriptcast.constants import (
    AUDIO_ENCODING,
    DEFAULT_LANGUAGE_CODE,
    EDGE_TTS_RATE,
    GOOGLE_TTS_TIMEOUT,
    GOOGLE_TTS_URL,
    PITCH,
    PREVIEW_TEXT_EN,
    PREVIEW_TEXT_KO,
    SPEAKING_RATE,
)
from scriptcast.errors import AuthenticationError, SynthesisError, TransportError
from scriptcast.voices import PROVIDER_EDGE, PROVIDER_GOOGLE, PROVIDERS

logger = logging.getLogger(__name__)

# "ko-KR-Standard-A" -> "ko-KR"
_LANGUAGE_RE = re.compile(r"^([a-z]{2,3}-[A-Z]{2})-")


class Synthesizer(Protocol):
    async def synthesize(self, text: str, voice_id: str) -> bytes:
        ...

    async def aclose(self) -> None:
        ...


def language_code_for(voice_id: str) -> str:
    """Derive the BCP-47 language code from a voice id's region prefix."""
    match = _LANGUAGE_RE.match(voice_id)
    return match.group(1) if match else DEFAULT_LANGUAGE_CODE


def _check_request(text: str, voice_id: str) -> None:
    if not text or not text.strip():
        raise ValueError("text must be non-empty")
    if not voice_id:
        raise ValueError("voice_id must be non-empty")


def _error_message(response: httpx.Response) -> tuple[str, list]:
    """Pull the provider's diagnostic text out of an error response."""
    try:
        data = response.json()
    except ValueError:
        return response.text.strip() or f"HTTP {response.status_code}", []
    if not isinstance(data, dict):
        return response.text.strip() or f"HTTP {response.status_code}", []
    error = data.get("error", {})
    if not isinstance(error, dict):
        return str(error), []
    message = error.get("message") or f"HTTP {response.status_code}"
    return message, error.get("details") or []


def _is_key_rejection(status_code: int, details: list) -> bool:
    if status_code in (401, 403):
        return True
    # Google answers 400 with reason API_KEY_INVALID for a malformed key.
    return any(
        isinstance(d, dict) and d.get("reason") == "API_KEY_INVALID"
        for d in details
    )


class GoogleCloudSynthesizer:
    """Google Cloud Text-to-Speech via the v1 REST endpoint and an API key."""

    def __init__(
        self,
        api_key_provider: ApiKeyProvider | None = None,
        client: httpx.AsyncClient | None = None,
        url: str = GOOGLE_TTS_URL,
        timeout: float = GOOGLE_TTS_TIMEOUT,
    ) -> None:
        self.api_key_provider = api_key_provider or ApiKeyProvider()
        self.client = client
        self.url = url
        self.timeout = timeout
        # an injected client belongs to the caller and is never closed here
        self._owns_client = client is None

    def _payload(self, text: str, voice_id: str) -> dict:
        return {
            "input": {"text": text},
            "voice": {
                "languageCode": language_code_for(voice_id),
                "name": voice_id,
            },
            "audioConfig": {
                "audioEncoding": AUDIO_ENCODING,
                "pitch": PITCH,
                "speakingRate": SPEAKING_RATE,
            },
        }

    async def _post(self, api_key: str, payload: dict) -> httpx.Response:
        if self.client is None:
            # one connection pool for the whole script, reused across segments
            self.client = httpx.AsyncClient(timeout=self.timeout)
        return await self.client.post(self.url, params={"key": api_key}, json=payload)

    async def aclose(self) -> None:
        """Close the HTTP client this synthesizer opened, if any."""
        if self._owns_client and self.client is not None:
            await self.client.aclose()
            self.client = None

    async def synthesize(self, text: str, voice_id: str) -> bytes:
        _check_request(text, voice_id)
        api_key = self.api_key_provider.get()
        if not api_key:
            raise AuthenticationError("No Google API key configured")

        logger.debug("Synthesizing %d chars with %s", len(text), voice_id)
        try:
            response = await self._post(api_key, self._payload(text, voice_id))
        except httpx.TransportError as e:
            raise TransportError(f"Could not reach the speech service: {e}") from e

        if not response.is_success:
            message, details = _error_message(response)
            if _is_key_rejection(response.status_code, details):
                raise AuthenticationError(message)
            raise SynthesisError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise SynthesisError("Speech service returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise SynthesisError("Speech service returned an unexpected body")
        content = data.get("audioContent")
        if not content:
            raise SynthesisError("Speech service returned no audio")
        try:
            return base64.b64decode(content, validate=True)
        except binascii.Error as e:
            raise SynthesisError("Speech service returned malformed audio") from e


class EdgeSynthesizer:
    """Microsoft Edge read-aloud voices via edge-tts. Needs no API key."""

    def __init__(self, rate: str = EDGE_TTS_RATE) -> None:
        self.rate = rate

    async def synthesize(self, text: str, voice_id: str) -> bytes:
        _check_request(text, voice_id)
        logger.debug("Synthesizing %d chars with %s", len(text), voice_id)
        audio = bytearray()
        try:
            communicate = edge_tts.Communicate(text, voice_id, rate=self.rate)
            async for chunk in communicate.stream():
                if chunk["type"] == "audio":
                    audio.extend(chunk["data"])
        except (WebSocketError, aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise TransportError(f"Could not reach the speech service: {e}") from e
        except (NoAudioReceived, UnexpectedResponse, UnknownResponse, ValueError) as e:
            raise SynthesisError(str(e) or type(e).__name__) from e

        if not audio:
            raise SynthesisError(f"No audio received for voice {voice_id}")
        return bytes(audio)

    async def aclose(self) -> None:
        pass


def make_synthesizer(
    provider: str = PROVIDER_GOOGLE,
    api_key_provider: ApiKeyProvider | None = None,
) -> Synthesizer:
    if provider == PROVIDER_GOOGLE:
        return GoogleCloudSynthesizer(api_key_provider=api_key_provider)
    if provider == PROVIDER_EDGE:
        return EdgeSynthesizer()
    raise ValueError(f"Unknown provider: {provider!r} (expected one of {', '.join(PROVIDERS)})")


def preview_text_for(voice_id: str) -> str:
    return PREVIEW_TEXT_KO if voice_id.startswith("ko-") else PREVIEW_TEXT_EN


async def preview_voice(synthesizer: Synthesizer, voice_id: str) -> bytes | None:
    """Synthesize the preview sentence for a voice. None for the empty voice."""
    if not voice_id:
        return None
    return await synthesizer.synthesize(preview_text_for(voice_id), voice_id)
