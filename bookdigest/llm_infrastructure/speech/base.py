"""Base classes for text-to-speech synthesizers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

_MEDIA_TYPES: dict[str, str] = {
    "mp3": "audio/mpeg",
    "pcm": "audio/pcm",
    "ulaw": "audio/basic",
    "alaw": "audio/basic",
    "opus": "audio/opus",
    "wav": "audio/wav",
}

# Headerless or self-delimiting encodings whose pieces can be concatenated.
CONCATENABLE_CODECS = frozenset({"mp3", "pcm", "ulaw", "alaw"})


def codec_of(output_format: str) -> str:
    """``mp3_44100_128`` -> ``mp3``."""
    return output_format.split("_", 1)[0].lower()


def media_type_for(output_format: str | None) -> str:
    if not output_format:
        return "audio/mpeg"
    return _MEDIA_TYPES.get(codec_of(output_format), "application/octet-stream")


@dataclass
class SpeechAudio:
    """Synthesized audio plus what produced it."""

    audio: bytes
    voice_id: str
    model_id: str
    output_format: str
    media_type: str = "audio/mpeg"


class BaseSpeechSynthesizer(ABC):
    """Common interface for speech backends."""

    def __init__(self, **kwargs: Any) -> None:
        self.config = kwargs

    @abstractmethod
    async def synthesize(
        self,
        text: str,
        *,
        voice_id: str | None = None,
        model_id: str | None = None,
        output_format: str | None = None,
    ) -> SpeechAudio:
        """Return the complete audio for ``text``."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(config={self.config})"


__all__ = [
    "BaseSpeechSynthesizer",
    "CONCATENABLE_CODECS",
    "SpeechAudio",
    "codec_of",
    "media_type_for",
]
