"""Base classes for summarization."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class SummaryResult:
    """Normalized summarization result for one piece of text."""

    original_text: str
    summary: str
    provider: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def compression_ratio(self) -> float:
        return len(self.summary) / max(len(self.original_text), 1)


class BaseSummarizer(ABC):
    """Abstract base class for all summarization implementations."""

    def __init__(self, **kwargs: Any) -> None:
        self.config = kwargs

    @abstractmethod
    async def summarize(
        self,
        text: str,
        *,
        title: str | None = None,
        author: str | None = None,
        model: str | None = None,
        custom_prompt: str | None = None,
        part: tuple[int, int] | None = None,
        **kwargs: Any,
    ) -> SummaryResult:
        """Summarize input text.

        Args:
            text: Input text to summarize.
            title: Book title, when known.
            author: Book author, when known.
            model: Backend model override.
            custom_prompt: Caller-supplied instruction replacing the default prompt.
            part: ``(index, total)`` when ``text`` is one chunk of a longer document.
            **kwargs: Additional summarizer-specific options.
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(config={self.config})"


__all__ = ["BaseSummarizer", "SummaryResult"]
