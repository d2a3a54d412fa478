"""Base classes and response model for LLM engines."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable


@dataclass
class LLMResponse:
    """Normalized LLM response."""

    text: str
    model: str = ""
    finish_reason: str | None = None
    raw: dict[str, Any] | None = None

    @property
    def truncated(self) -> bool:
        """True when the backend stopped at its output token limit."""
        return self.finish_reason == "length"


class BaseLLM(ABC):
    """Common interface for all LLM implementations."""

    def __init__(self, **kwargs: Any) -> None:
        self.config = kwargs

    @property
    def default_model(self) -> str:
        """Model used when a call does not name one."""
        return str(self.config.get("model") or "")

    @abstractmethod
    async def generate(
        self,
        messages: Iterable[dict[str, str]],
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a response from messages."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(config={self.config})"


__all__ = ["BaseLLM", "LLMResponse"]
