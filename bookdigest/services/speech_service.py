"""Speech service: single requests and long narrations."""

from __future__ import annotations

import logging

from bookdigest.config.settings import elevenlabs_settings
from bookdigest.domain.exceptions import ValidationError
from bookdigest.llm_infrastructure.speech import (
    CONCATENABLE_CODECS,
    BaseSpeechSynthesizer,
    SpeechAudio,
    codec_of,
    get_speech_synthesizer,
    media_type_for,
    split_for_speech,
)

logger = logging.getLogger(__name__)

NARRATION_FORMAT = "mp3_44100_128"


class SpeechService:
    """Wraps a speech synthesizer with request-size aware narration."""

    def __init__(
        self,
        synthesizer: BaseSpeechSynthesizer,
        max_chars_per_request: int = 4500,
    ) -> None:
        self._synth = synthesizer
        self.max_chars_per_request = max_chars_per_request

    @classmethod
    def from_settings(cls) -> "SpeechService":
        return cls(
            get_speech_synthesizer("elevenlabs"),
            max_chars_per_request=elevenlabs_settings.max_chars_per_request,
        )

    async def synthesize(
        self,
        text: str,
        *,
        voice_id: str | None = None,
        model_id: str | None = None,
        output_format: str | None = None,
    ) -> SpeechAudio:
        """One backend request; ``text`` is sent as-is."""
        return await self._synth.synthesize(
            text, voice_id=voice_id, model_id=model_id, output_format=output_format
        )

    async def narrate(
        self,
        text: str,
        *,
        voice_id: str | None = None,
        model_id: str | None = None,
        output_format: str | None = None,
    ) -> SpeechAudio:
        """Synthesize arbitrarily long text piece by piece and concatenate.

        Only formats whose pieces can be joined byte-wise are accepted: MP3
        frames are self-delimiting and PCM/u-law/A-law are headerless.
        Pieces are requested sequentially to stay within the backend's
        concurrency limits.
        """
        fmt = output_format or NARRATION_FORMAT
        if codec_of(fmt) not in CONCATENABLE_CODECS:
            raise ValidationError(
                f"Output format {fmt} cannot be used for long narration; "
                f"use one of: {', '.join(sorted(CONCATENABLE_CODECS))}",
                field="output_format",
            )
        pieces = split_for_speech(text, self.max_chars_per_request)
        if not pieces:
            raise ValidationError("Cannot synthesize empty text.", field="text")

        audio = bytearray()
        last: SpeechAudio | None = None
        for index, piece in enumerate(pieces):
            last = await self._synth.synthesize(
                piece, voice_id=voice_id, model_id=model_id, output_format=fmt
            )
            audio.extend(last.audio)
            logger.debug("Narration piece %d/%d: %d bytes", index + 1, len(pieces), len(last.audio))

        return SpeechAudio(
            audio=bytes(audio),
            voice_id=last.voice_id,
            model_id=last.model_id,
            output_format=fmt,
            media_type=media_type_for(fmt),
        )


__all__ = ["NARRATION_FORMAT", "SpeechService"]
