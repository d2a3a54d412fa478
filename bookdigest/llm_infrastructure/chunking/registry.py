"""Lookup of chunking strategies by name and version.

``SummarizationSettings.chunk_method`` names the strategy the summary
pipeline uses; engines register themselves when ``chunking.engines`` is
imported.
"""

from typing import Any, Type

from .base import BaseChunker, ChunkParams


class ChunkerRegistry:
    """Chunker classes keyed by strategy name, then version."""

    _registry: dict[str, dict[str, Type[BaseChunker]]] = {}

    @classmethod
    def register(
        cls,
        name: str,
        chunker_cls: Type[BaseChunker],
        version: str = "v1",
    ) -> None:
        versions = cls._registry.setdefault(name, {})
        if version in versions:
            raise ValueError(
                f"{versions[version].__name__} already provides chunker '{name}' ({version})"
            )
        versions[version] = chunker_cls

    @classmethod
    def get(
        cls,
        name: str,
        version: str = "v1",
        params: ChunkParams | None = None,
        **kwargs: Any,
    ) -> BaseChunker:
        """Build the chunker; ``params`` and keyword overrides are merged.

        Raises:
            ValueError: If no chunker is registered under ``name``/``version``.
        """
        versions = cls._registry.get(name)
        if not versions:
            known = ", ".join(sorted(cls._registry)) or "none"
            raise ValueError(f"No chunker named '{name}' (known: {known})")
        if version not in versions:
            raise ValueError(
                f"Chunker '{name}' has no version '{version}' (known: {', '.join(versions)})"
            )
        return versions[version](params=params, **kwargs)

    @classmethod
    def list_chunkers(cls) -> dict[str, list[str]]:
        return {name: list(versions) for name, versions in cls._registry.items()}

    @classmethod
    def is_registered(cls, name: str, version: str = "v1") -> bool:
        return version in cls._registry.get(name, {})


def register_chunker(name: str, version: str = "v1"):
    """Class decorator registering a chunking strategy."""
    def decorator(cls: Type[BaseChunker]) -> Type[BaseChunker]:
        ChunkerRegistry.register(name, cls, version=version)
        return cls
    return decorator


def get_chunker(
    name: str,
    version: str = "v1",
    params: ChunkParams | None = None,
    **kwargs: Any,
) -> BaseChunker:
    return ChunkerRegistry.get(name, version=version, params=params, **kwargs)
