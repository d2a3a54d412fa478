"""Speech adapters registered in the speech registry."""

from .elevenlabs import ElevenLabsSynthesizer

__all__ = ["ElevenLabsSynthesizer"]
