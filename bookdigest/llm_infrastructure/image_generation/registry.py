"""Image client registry.

Follows the same registry pattern used by the LLM and speech packages.
"""

from __future__ import annotations

import logging
from typing import Any, Type

from bookdigest.llm_infrastructure.image_generation.base import BaseImageClient

logger = logging.getLogger(__name__)


class ImageClientRegistry:
    """Registry for image generation clients.

    Example:
        @register_image_client("openai_images", version="v1")
        class OpenAIImagesClient(BaseImageClient):
            ...

        client = get_image_client("openai_images", api_key="sk-...")
    """

    _registry: dict[str, dict[str, Type[BaseImageClient]]] = {}

    @classmethod
    def register(cls, name: str, client_cls: Type[BaseImageClient], version: str = "v1") -> None:
        cls._registry.setdefault(name, {})
        cls._registry[name][version] = client_cls
        logger.debug("Registered image client: %s (version=%s)", name, version)

    @classmethod
    def get(cls, name: str, version: str = "v1", **kwargs: Any) -> BaseImageClient:
        if name not in cls._registry:
            available = ", ".join(cls._registry.keys()) or "(none)"
            raise ValueError(f"Unknown image client '{name}'. Available: {available}")
        if version not in cls._registry[name]:
            versions = ", ".join(cls._registry[name].keys())
            raise ValueError(f"Unknown version '{version}' for '{name}'. Available: {versions}")
        return cls._registry[name][version](**kwargs)

    @classmethod
    def list_clients(cls) -> dict[str, list[str]]:
        return {name: list(versions.keys()) for name, versions in cls._registry.items()}


def register_image_client(name: str, version: str = "v1"):
    """Decorator to register an image client class."""
    def decorator(cls: Type[BaseImageClient]) -> Type[BaseImageClient]:
        ImageClientRegistry.register(name, cls, version=version)
        return cls
    return decorator


def get_image_client(name: str, version: str = "v1", **kwargs: Any) -> BaseImageClient:
    return ImageClientRegistry.get(name, version=version, **kwargs)


__all__ = ["ImageClientRegistry", "register_image_client", "get_image_client"]
