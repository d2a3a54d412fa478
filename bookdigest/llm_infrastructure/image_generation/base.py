"""Base class for image generation clients.

All image clients must implement the BaseImageClient interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class GeneratedImage:
    """Decoded image bytes returned by a generation backend."""

    data: bytes
    mime_type: str = "image/png"
    model: str = ""


class BaseImageClient(ABC):
    """Abstract base class for text-to-image clients."""

    def __init__(self, **kwargs: Any) -> None:
        self.config = kwargs

    @abstractmethod
    async def generate(self, prompt: str, *, size: str | None = None, **kwargs: Any) -> GeneratedImage:
        """Generate a single image for ``prompt``.

        Raises:
            ConfigError: If the backend credential is missing.
            UpstreamError: If the backend fails or returns no image bytes.
        """
        raise NotImplementedError

    def get_model_name(self) -> str:
        return self.config.get("model", "unknown")


def detect_mime_type(data: bytes) -> str:
    """Detect image MIME type from magic bytes."""
    if data[:8] == b"\x89PNG\r\n\x1a\n":
        return "image/png"
    if data[:2] == b"\xff\xd8":
        return "image/jpeg"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return "image/png"


__all__ = ["BaseImageClient", "GeneratedImage", "detect_mime_type"]
