"""Image generation client module.

Usage:
    from bookdigest.llm_infrastructure.image_generation import get_image_client

    client = get_image_client("openai_images", api_key="sk-...")
    image = await client.generate(prompt)
"""

from bookdigest.llm_infrastructure.image_generation.base import BaseImageClient, GeneratedImage
from bookdigest.llm_infrastructure.image_generation.registry import (
    ImageClientRegistry,
    get_image_client,
    register_image_client,
)

# Trigger client registration side effects
from bookdigest.llm_infrastructure.image_generation import clients  # noqa: F401

__all__ = [
    "BaseImageClient",
    "GeneratedImage",
    "ImageClientRegistry",
    "get_image_client",
    "register_image_client",
]
