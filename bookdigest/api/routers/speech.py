"""Text-to-speech API."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field

from bookdigest.api.dependencies import get_speech_service
from bookdigest.api.errors import to_http_exception
from bookdigest.services.speech_service import SpeechService

router = APIRouter(prefix="/tts", tags=["Speech"])
logger = logging.getLogger(__name__)


class SpeechRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "text": "Deep work is the ability to focus without distraction.",
                "voice_id": "21m00Tcm4TlvDq8ikWAM",
            }
        }
    )

    text: str = Field(..., description="Text to speak")
    voice_id: str | None = Field(default=None, description="Overrides ELEVENLABS_VOICE_ID")
    model_id: str | None = Field(default=None, description="Overrides ELEVENLABS_MODEL_ID")
    output_format: str | None = Field(default=None, description="e.g. mp3_44100_128")


@router.post("")
async def synthesize(
    request: SpeechRequest,
    service: SpeechService = Depends(get_speech_service),
):
    """Synthesize speech and return the audio bytes.

    Text longer than one backend request is narrated piece by piece.
    """
    try:
        if len(request.text) > service.max_chars_per_request:
            audio = await service.narrate(
                request.text,
                voice_id=request.voice_id,
                model_id=request.model_id,
                output_format=request.output_format,
            )
        else:
            audio = await service.synthesize(
                request.text,
                voice_id=request.voice_id,
                model_id=request.model_id,
                output_format=request.output_format,
            )
    except Exception as exc:
        logger.error("Speech synthesis failed: %s", exc)
        raise to_http_exception(exc) from exc

    return Response(
        content=audio.audio,
        media_type=audio.media_type,
        headers={
            "Cache-Control": "no-store",
            "X-Voice-Id": audio.voice_id,
            "X-Model-Id": audio.model_id,
        },
    )


__all__ = ["router"]
