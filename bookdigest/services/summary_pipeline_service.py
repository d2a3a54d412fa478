"""End-to-end summary pipeline: chunk, summarize, merge, validate."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from bookdigest.config.settings import openrouter_settings, summarization_settings
from bookdigest.domain.exceptions import DigestError, UpstreamError, ValidationError
from bookdigest.domain.models import Document
from bookdigest.llm_infrastructure.chunking import BaseChunker, get_chunker, merge_chunks
from bookdigest.llm_infrastructure.summarization import (
    BaseSummarizer,
    ValidatedSummary,
    get_summarizer,
    validate_summary,
)
from bookdigest.llm_infrastructure.text_quality import count_words

logger = logging.getLogger(__name__)


@dataclass
class SummaryOutcome:
    summary: ValidatedSummary
    chunk_count: int
    failed_chunks: list[int] = field(default_factory=list)
    word_count: int = 0


class SummaryPipelineService:
    """Summarizes a document chunk by chunk with bounded concurrency.

    A failed chunk is logged and left out of the merged text. The pipeline
    only fails when every chunk fails; nothing is retried.
    """

    def __init__(
        self,
        chunker: BaseChunker,
        summarizer: BaseSummarizer,
        default_model: str = "openai/gpt-4o",
        concurrency: int = 4,
        provider_label: str = "OpenRouter",
    ) -> None:
        self.chunker = chunker
        self.summarizer = summarizer
        self.default_model = default_model
        self.concurrency = max(1, concurrency)
        self.provider_label = provider_label

    @classmethod
    def from_settings(cls) -> "SummaryPipelineService":
        chunker = get_chunker(
            summarization_settings.chunk_method,
            chunk_size=summarization_settings.chunk_size,
            chunk_overlap=summarization_settings.chunk_overlap,
            max_chunks=summarization_settings.max_chunks,
        )
        summarizer = get_summarizer("llm", prompt_version=summarization_settings.prompt_version)
        return cls(
            chunker,
            summarizer,
            default_model=openrouter_settings.default_model,
            concurrency=summarization_settings.concurrency,
        )

    async def summarize(
        self,
        document: Document,
        *,
        model: str | None = None,
        custom_prompt: str | None = None,
    ) -> SummaryOutcome:
        if not document.text or not document.text.strip():
            raise ValidationError("Document has no text to summarize", field="text")

        selected = model or self.default_model
        chunks = self.chunker.chunk(document.text, doc_id=document.filename or "")
        total = len(chunks)
        semaphore = asyncio.Semaphore(self.concurrency)
        logger.info("Summarizing %s in %d chunk(s) with %s", document.title or "document", total, selected)

        async def run(index: int, text: str) -> str:
            async with semaphore:
                result = await self.summarizer.summarize(
                    text,
                    title=document.title,
                    author=document.author,
                    model=selected,
                    custom_prompt=custom_prompt,
                    part=(index, total),
                )
                return result.summary

        results: list[Any] = await asyncio.gather(
            *(run(chunk.chunk_index, chunk.text) for chunk in chunks),
            return_exceptions=True,
        )

        outputs: list[str | None] = []
        failed: list[int] = []
        first_error: BaseException | None = None
        for index, result in enumerate(results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning("Chunk %d/%d failed: %s", index + 1, total, result)
                failed.append(index)
                first_error = first_error or result
                outputs.append(None)
            else:
                outputs.append(result)

        if len(failed) == total:
            if isinstance(first_error, DigestError):
                raise first_error
            raise UpstreamError(f"Every chunk failed to summarize: {first_error}") from first_error

        merged = merge_chunks(outputs)
        if not merged:
            raise UpstreamError("The model returned only empty summaries")
        payload = {"raw_text": merged, "ai_provider": f"{self.provider_label} ({selected})"}
        validated = validate_summary(payload)
        return SummaryOutcome(
            summary=validated,
            chunk_count=total,
            failed_chunks=failed,
            word_count=count_words(merged),
        )


__all__ = ["SummaryOutcome", "SummaryPipelineService"]
