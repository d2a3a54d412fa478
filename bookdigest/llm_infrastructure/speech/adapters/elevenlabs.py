"""ElevenLabs adapter registered in the speech registry."""

from __future__ import annotations

from typing import Any

from ..base import BaseSpeechSynthesizer, SpeechAudio, media_type_for
from ..engines.elevenlabs import ElevenLabsClient
from ..registry import register_speech_synthesizer


@register_speech_synthesizer("elevenlabs", version="v1")
class ElevenLabsSynthesizer(BaseSpeechSynthesizer):
    def __init__(
        self,
        engine: ElevenLabsClient | None = None,
        client: Any | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.engine = engine or ElevenLabsClient.from_settings(client=client)

    async def synthesize(
        self,
        text: str,
        *,
        voice_id: str | None = None,
        model_id: str | None = None,
        output_format: str | None = None,
    ) -> SpeechAudio:
        audio = await self.engine.synthesize(
            text, voice_id=voice_id, model_id=model_id, output_format=output_format
        )
        fmt = output_format or self.engine.output_format
        return SpeechAudio(
            audio=audio,
            voice_id=voice_id or self.engine.voice_id,
            model_id=model_id or self.engine.model_id,
            output_format=fmt,
            media_type=media_type_for(fmt),
        )


__all__ = ["ElevenLabsSynthesizer"]
