"""JSON-mode summarizer producing the sectioned summary shape."""

from __future__ import annotations

import json
import logging
from typing import Any

from bookdigest.domain.exceptions import UpstreamError
from bookdigest.llm_infrastructure.llm import get_llm
from bookdigest.llm_infrastructure.llm.base import BaseLLM

from ..base import BaseSummarizer, SummaryResult
from ..registry import register_summarizer
from .llm import _header, _load_prompt

logger = logging.getLogger(__name__)


@register_summarizer("structured", version="v1")
class StructuredSummarizer(BaseSummarizer):
    """Asks the model for a JSON object and parses it.

    The parsed object is returned in ``metadata["payload"]``; shape checks
    are left to the caller.
    """

    def __init__(
        self,
        llm: BaseLLM | None = None,
        llm_method: str = "openai",
        llm_version: str = "v1",
        prompt_version: str = "v1",
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._prompt = _load_prompt("structured_summary", prompt_version)
        self._llm: BaseLLM = llm or get_llm(llm_method, version=llm_version)

    @property
    def default_model(self) -> str:
        return self._llm.default_model

    def build_messages(
        self,
        text: str,
        *,
        title: str | None = None,
        author: str | None = None,
    ) -> list[dict[str, str]]:
        user_content = self._prompt["user"].format(
            header=_header(title, author),
            book_text=text.strip(),
        ).strip()
        return [
            {"role": "system", "content": self._prompt["system"]},
            {"role": "user", "content": user_content},
        ]

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
        messages = self.build_messages(text, title=title, author=author)
        if model:
            kwargs["model"] = model
        kwargs.setdefault("response_format", {"type": "json_object"})
        response = await self._llm.generate(messages, **kwargs)

        try:
            payload = json.loads(response.text)
        except json.JSONDecodeError as exc:
            logger.error("Structured summary is not valid JSON: %s", exc)
            raise UpstreamError("Unable to parse summary response from the model.") from exc
        if not isinstance(payload, dict):
            raise UpstreamError("Structured summary response is not a JSON object.")

        return SummaryResult(
            original_text=text,
            summary=response.text,
            provider=response.model,
            metadata={"payload": payload},
        )


__all__ = ["StructuredSummarizer"]
