"""Whole-book structured summaries in a single JSON-mode request."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from bookdigest.config.settings import summarization_settings
from bookdigest.domain.exceptions import UpstreamError, ValidationError
from bookdigest.domain.models import Document
from bookdigest.llm_infrastructure.summarization import (
    BaseSummarizer,
    StructuredSummary,
    SummaryShape,
    ValidatedSummary,
    get_summarizer,
)
from bookdigest.llm_infrastructure.summarization.expansion import count_summary_words

from .summary_pipeline_service import SummaryOutcome

logger = logging.getLogger(__name__)

SHORT_SUMMARY_LIMIT = 200


def _clip_short_summary(payload: dict[str, Any]) -> None:
    short = payload.get("short_summary")
    if isinstance(short, str) and len(short) > SHORT_SUMMARY_LIMIT:
        payload["short_summary"] = short[: SHORT_SUMMARY_LIMIT - 3] + "..."


class StructuredSummaryService:
    """Produces the sectioned summary shape with a JSON-mode backend.

    The book is sent whole. Overlong short summaries are clipped to 200
    characters; anything else that does not fit the structured shape is
    rejected.
    """

    def __init__(
        self,
        summarizer: BaseSummarizer,
        default_model: str | None = None,
        provider_label: str = "OpenAI",
    ) -> None:
        self.summarizer = summarizer
        self.default_model = default_model or getattr(summarizer, "default_model", "")
        self.provider_label = provider_label

    @classmethod
    def from_settings(cls) -> "StructuredSummaryService":
        llm_method = summarization_settings.structured_llm
        summarizer = get_summarizer("structured", llm_method=llm_method)
        label = "OpenAI" if llm_method == "openai" else llm_method.capitalize()
        return cls(summarizer, provider_label=label)

    async def summarize(self, document: Document, *, model: str | None = None) -> SummaryOutcome:
        if not document.text or not document.text.strip():
            raise ValidationError("Document has no text to summarize", field="text")

        selected = model or self.default_model
        logger.info("Requesting structured summary of %s with %s", document.title or "document", selected)
        result = await self.summarizer.summarize(
            document.text,
            title=document.title,
            author=document.author,
            model=model,
        )
        payload = dict(result.metadata["payload"])
        payload["ai_provider"] = f"{self.provider_label} ({result.provider or selected})"
        _clip_short_summary(payload)

        try:
            parsed = StructuredSummary.model_validate(payload)
        except PydanticValidationError as exc:
            logger.warning("Structured summary failed validation: %s", exc.error_count())
            raise UpstreamError(
                "Model output does not match the structured summary format",
                details={"errors": [err.get("msg", "") for err in exc.errors()]},
            ) from exc

        data = parsed.model_dump(exclude_none=True)
        words = count_summary_words(data)
        return SummaryOutcome(
            summary=ValidatedSummary(shape=SummaryShape.STRUCTURED, data=data, model=parsed),
            chunk_count=1,
            word_count=words,
        )


__all__ = ["StructuredSummaryService"]
