"""Text-to-speech backends by name and version.

``SpeechService.from_settings`` asks for ``"elevenlabs"``; other voices
plug in with ``@register_speech_synthesizer``.
"""

from __future__ import annotations

from typing import Any, Type

from .base import BaseSpeechSynthesizer


class SpeechRegistry:
    """Synthesizer classes keyed by ``(name, version)``."""

    _voices: dict[tuple[str, str], Type[BaseSpeechSynthesizer]] = {}

    @classmethod
    def register(
        cls, name: str, synth_cls: Type[BaseSpeechSynthesizer], version: str = "v1"
    ) -> None:
        if (name, version) in cls._voices:
            raise ValueError(f"Speech backend {name}/{version} is already registered")
        cls._voices[(name, version)] = synth_cls

    @classmethod
    def get(cls, name: str, version: str = "v1", **kwargs: Any) -> BaseSpeechSynthesizer:
        synth_cls = cls._voices.get((name, version))
        if synth_cls is None:
            known = ", ".join(f"{n}/{v}" for n, v in sorted(cls._voices)) or "none"
            raise ValueError(f"No speech backend {name}/{version}; registered: {known}")
        kwargs.setdefault("alias", name)
        return synth_cls(**kwargs)

    @classmethod
    def list_methods(cls) -> dict[str, list[str]]:
        methods: dict[str, list[str]] = {}
        for name, version in sorted(cls._voices):
            methods.setdefault(name, []).append(version)
        return methods


def register_speech_synthesizer(name: str, version: str = "v1"):
    def decorator(cls: Type[BaseSpeechSynthesizer]) -> Type[BaseSpeechSynthesizer]:
        SpeechRegistry.register(name, cls, version=version)
        return cls
    return decorator


def get_speech_synthesizer(name: str, version: str = "v1", **kwargs: Any) -> BaseSpeechSynthesizer:
    return SpeechRegistry.get(name, version=version, **kwargs)


__all__ = ["SpeechRegistry", "register_speech_synthesizer", "get_speech_synthesizer"]
