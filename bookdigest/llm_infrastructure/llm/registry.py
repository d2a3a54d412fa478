"""Name/version lookup of chat backends.

Adapters register themselves on import (see ``adapters/__init__.py``), so
callers pick a backend from configuration: ``get_llm("openrouter")`` for
prose summaries, ``get_llm("openai")`` for JSON summaries.
"""

from __future__ import annotations

from typing import Any, Type

from .base import BaseLLM


class LLMRegistry:
    """Chat backends keyed by ``(name, version)``."""

    _backends: dict[tuple[str, str], Type[BaseLLM]] = {}

    @classmethod
    def register(cls, name: str, llm_cls: Type[BaseLLM], version: str = "v1") -> None:
        key = (name, version)
        if key in cls._backends:
            existing = cls._backends[key].__name__
            raise ValueError(f"Chat backend {name}/{version} is already provided by {existing}")
        cls._backends[key] = llm_cls

    @classmethod
    def get(cls, name: str, version: str = "v1", **kwargs: Any) -> BaseLLM:
        llm_cls = cls._backends.get((name, version))
        if llm_cls is None:
            known = ", ".join(f"{n}/{v}" for n, v in sorted(cls._backends)) or "none"
            raise ValueError(f"No chat backend {name}/{version}; registered: {known}")
        kwargs.setdefault("alias", name)
        return llm_cls(**kwargs)

    @classmethod
    def list_methods(cls) -> dict[str, list[str]]:
        methods: dict[str, list[str]] = {}
        for name, version in sorted(cls._backends):
            methods.setdefault(name, []).append(version)
        return methods


def register_llm(name: str, version: str = "v1"):
    """Class decorator adding a chat backend to the registry."""
    def decorator(cls: Type[BaseLLM]) -> Type[BaseLLM]:
        LLMRegistry.register(name, cls, version=version)
        return cls
    return decorator


def get_llm(name: str, version: str = "v1", **kwargs: Any) -> BaseLLM:
    return LLMRegistry.get(name, version=version, **kwargs)


__all__ = ["LLMRegistry", "register_llm", "get_llm"]
