"""Text-to-speech engines and helpers."""

from .base import (
    CONCATENABLE_CODECS,
    BaseSpeechSynthesizer,
    SpeechAudio,
    codec_of,
    media_type_for,
)
from .registry import SpeechRegistry, get_speech_synthesizer, register_speech_synthesizer
from .text_split import split_for_speech

# Trigger adapter registration side effects
from . import adapters  # noqa: F401

__all__ = [
    "BaseSpeechSynthesizer",
    "CONCATENABLE_CODECS",
    "SpeechAudio",
    "codec_of",
    "media_type_for",
    "SpeechRegistry",
    "get_speech_synthesizer",
    "register_speech_synthesizer",
    "split_for_speech",
]
