"""ElevenLabs text-to-speech engine."""

from __future__ import annotations

import logging

import httpx

from bookdigest.config.settings import ElevenLabsSettings, elevenlabs_settings
from bookdigest.domain.exceptions import ConfigError, ValidationError
from bookdigest.llm_infrastructure.http_client import client_scope, ensure_success, transport_error

logger = logging.getLogger(__name__)

SERVICE_NAME = "ElevenLabs"

DEFAULT_VOICE_SETTINGS = {
    "similarity_boost": 0.65,
    "stability": 0.4,
    "style": 0.3,
}


class ElevenLabsClient:
    """Async client for ``POST /text-to-speech/{voice}/stream``.

    The streamed response body is collected and returned as one ``bytes``.
    """

    def __init__(
        self,
        api_key: str | None,
        voice_id: str = "21m00Tcm4TlvDq8ikWAM",
        model_id: str = "eleven_multilingual_v2",
        output_format: str = "mp3_44100_128",
        base_url: str = "https://api.elevenlabs.io/v1",
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key or ""
        self.voice_id = voice_id
        self.model_id = model_id
        self.output_format = output_format
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: ElevenLabsSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> "ElevenLabsClient":
        settings = settings or elevenlabs_settings
        return cls(
            api_key=settings.api_key,
            voice_id=settings.voice_id,
            model_id=settings.model_id,
            output_format=settings.output_format,
            base_url=settings.base_url,
            timeout=settings.timeout,
            client=client,
        )

    async def synthesize(
        self,
        text: str,
        *,
        voice_id: str | None = None,
        model_id: str | None = None,
        output_format: str | None = None,
    ) -> bytes:
        if not self.api_key:
            raise ConfigError(
                "ELEVENLABS_API_KEY is not configured. Add it to your environment variables."
            )
        if not text or not text.strip():
            raise ValidationError("Cannot synthesize empty text.", field="text")

        voice = voice_id or self.voice_id
        payload = {
            "model_id": model_id or self.model_id,
            "output_format": output_format or self.output_format,
            "text": text,
            "voice_settings": dict(DEFAULT_VOICE_SETTINGS),
        }
        url = f"{self.base_url}/text-to-speech/{voice}/stream"
        headers = {"xi-api-key": self.api_key}

        async with client_scope(self._client, self.timeout) as client:
            try:
                async with client.stream(
                    "POST", url, json=payload, headers=headers, timeout=self.timeout
                ) as resp:
                    if not resp.is_success:
                        body = (await resp.aread()).decode("utf-8", errors="replace")
                        ensure_success(SERVICE_NAME, resp, body=body)
                    audio = bytearray()
                    async for chunk in resp.aiter_bytes():
                        audio.extend(chunk)
            except httpx.HTTPError as exc:
                raise transport_error(SERVICE_NAME, exc) from exc

        logger.info("Synthesized %d chars into %d bytes (voice=%s)", len(text), len(audio), voice)
        return bytes(audio)


__all__ = ["ElevenLabsClient", "DEFAULT_VOICE_SETTINGS"]
