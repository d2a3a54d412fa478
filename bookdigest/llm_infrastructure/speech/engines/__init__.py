"""Concrete speech engine clients."""

from .elevenlabs import ElevenLabsClient

__all__ = ["ElevenLabsClient"]
