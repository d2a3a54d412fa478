"""Summarizer lookup by name and version.

``get_summarizer("llm")`` returns the prompt-driven prose summarizer used by
the summary pipeline; alternatives register with ``@register_summarizer``.
"""

from __future__ import annotations

from typing import Any, Type

from .base import BaseSummarizer


class SummarizerRegistry:
    """Summarizer classes keyed by ``(name, version)``."""

    _summarizers: dict[tuple[str, str], Type[BaseSummarizer]] = {}

    @classmethod
    def register(
        cls, name: str, summarizer_cls: Type[BaseSummarizer], version: str = "v1"
    ) -> None:
        if (name, version) in cls._summarizers:
            raise ValueError(f"Summarizer {name}/{version} is registered twice")
        cls._summarizers[(name, version)] = summarizer_cls

    @classmethod
    def get(cls, name: str, version: str = "v1", **kwargs: Any) -> BaseSummarizer:
        summarizer_cls = cls._summarizers.get((name, version))
        if summarizer_cls is None:
            known = ", ".join(f"{n}/{v}" for n, v in sorted(cls._summarizers)) or "none"
            raise ValueError(f"No summarizer {name}/{version}; registered: {known}")
        kwargs.setdefault("alias", name)
        return summarizer_cls(**kwargs)

    @classmethod
    def list_methods(cls) -> dict[str, list[str]]:
        methods: dict[str, list[str]] = {}
        for name, version in sorted(cls._summarizers):
            methods.setdefault(name, []).append(version)
        return methods


def register_summarizer(name: str, version: str = "v1"):
    def decorator(cls: Type[BaseSummarizer]) -> Type[BaseSummarizer]:
        SummarizerRegistry.register(name, cls, version=version)
        return cls

    return decorator


def get_summarizer(name: str, version: str = "v1", **kwargs: Any) -> BaseSummarizer:
    return SummarizerRegistry.get(name, version=version, **kwargs)


__all__ = ["SummarizerRegistry", "register_summarizer", "get_summarizer"]
