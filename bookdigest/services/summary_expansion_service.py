"""Growing an existing summary until it reaches a target word count."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from bookdigest.config.settings import openrouter_settings, summarization_settings
from bookdigest.domain.exceptions import UpstreamError, ValidationError
from bookdigest.llm_infrastructure.llm import BaseLLM, get_llm
from bookdigest.llm_infrastructure.summarization import SummaryShape, validate_summary
from bookdigest.llm_infrastructure.summarization.expansion import (
    ExpansionTarget,
    apply_expansion,
    build_raw_expansion_messages,
    build_section_messages,
    count_summary_words,
    find_sections_to_expand,
    is_raw_text,
    join_continuation,
    load_expansion_prompts,
)

logger = logging.getLogger(__name__)

# Sections queued again once the first pass is used up.
_REFILL_BATCH = 5


@dataclass
class ExpansionOutcome:
    summary: dict[str, Any]
    shape: SummaryShape
    word_count_before: int
    word_count: int
    target_word_count: int
    expanded_sections: int = 0

    @property
    def reached_target(self) -> bool:
        return self.word_count >= self.target_word_count


class SummaryExpansionService:
    """Expands short summaries with follow-up model calls.

    Raw-text summaries are rewritten in a single request; a failure there
    propagates. Structured summaries are grown section by section and a
    failed section is logged and skipped. Replies cut off at the token limit
    are continued up to ``max_continuations`` times.
    """

    def __init__(
        self,
        llm: BaseLLM,
        default_model: str | None = None,
        min_word_count: int = 10_000,
        max_attempts: int = 15,
        max_continuations: int = 3,
        reference_chars: int = 5000,
        section_delay: float = 0.5,
        provider_label: str = "OpenRouter",
        prompt_version: str = "v1",
    ) -> None:
        self.llm = llm
        self.default_model = default_model or llm.default_model
        self.min_word_count = min_word_count
        self.max_attempts = max(0, max_attempts)
        self.max_continuations = max(0, max_continuations)
        self.reference_chars = reference_chars
        self.section_delay = section_delay
        self.provider_label = provider_label
        self.prompts = load_expansion_prompts(prompt_version)

    @classmethod
    def from_settings(cls) -> "SummaryExpansionService":
        return cls(
            get_llm("openrouter"),
            default_model=openrouter_settings.default_model,
            min_word_count=summarization_settings.min_word_count,
            max_attempts=summarization_settings.max_expansion_attempts,
            max_continuations=summarization_settings.max_continuations,
            reference_chars=summarization_settings.reference_chars,
            section_delay=summarization_settings.section_delay,
        )

    async def complete(self, messages: list[dict[str, str]], model: str) -> str:
        """One reply, continued while the backend reports it was truncated."""
        response = await self.llm.generate(messages, model=model)
        text = response.text.strip()
        rounds = 0
        while response.truncated and rounds < self.max_continuations:
            rounds += 1
            logger.info("Reply hit the token limit, requesting continuation %d", rounds)
            follow_up = [
                *messages,
                {"role": "assistant", "content": text},
                {"role": "user", "content": self.prompts["continuation"].strip()},
            ]
            response = await self.llm.generate(follow_up, model=model)
            text = join_continuation(text, response.text)
        if response.truncated:
            logger.warning("Reply still truncated after %d continuation(s)", rounds)
        return text

    async def expand(
        self,
        summary: Any,
        original_text: str,
        *,
        title: str | None = None,
        author: str | None = None,
        model: str | None = None,
        target_word_count: int | None = None,
    ) -> ExpansionOutcome:
        if not original_text or not original_text.strip():
            raise ValidationError("Summary and original text are required.", field="originalText")
        validated = validate_summary(summary)
        data = validated.data
        target = max(1, target_word_count or self.min_word_count)
        selected = model or self.default_model
        before = count_summary_words(data)

        if before >= target:
            logger.info("Summary already has %d words (target %d)", before, target)
            return ExpansionOutcome(data, validated.shape, before, before, target)

        logger.info("Expanding summary from %d to %d words with %s", before, target, selected)
        if is_raw_text(data):
            expanded = await self._expand_raw_text(data, original_text, before, target, selected)
            sections = 0
        else:
            expanded, sections = await self._expand_sections(
                data, original_text, target, selected, title=title, author=author
            )

        try:
            result = validate_summary(expanded)
            expanded, shape = result.data, result.shape
        except ValidationError as exc:
            logger.warning("Expanded summary no longer validates, returning it unchanged: %s", exc)
            shape = validated.shape

        after = count_summary_words(expanded)
        logger.info("Expansion finished at %d words (%d added)", after, after - before)
        return ExpansionOutcome(expanded, shape, before, after, target, sections)

    async def _expand_raw_text(
        self,
        data: dict[str, Any],
        original_text: str,
        current: int,
        target: int,
        model: str,
    ) -> dict[str, Any]:
        messages = build_raw_expansion_messages(
            self.prompts,
            data["raw_text"],
            original_text,
            current_words=current,
            target_words=target,
            reference_chars=self.reference_chars,
        )
        text = await self.complete(messages, model)
        if not text:
            raise UpstreamError("OpenRouter did not return any expanded summary content.")
        return {
            "raw_text": text,
            "ai_provider": data.get("ai_provider") or f"{self.provider_label} ({model})",
        }

    async def _expand_sections(
        self,
        data: dict[str, Any],
        original_text: str,
        target: int,
        model: str,
        *,
        title: str | None,
        author: str | None,
    ) -> tuple[dict[str, Any], int]:
        current = data
        queue: list[ExpansionTarget] = find_sections_to_expand(current, target)
        expanded = 0

        for attempt in range(self.max_attempts):
            if count_summary_words(current) >= target:
                break
            if attempt >= len(queue):
                refill = find_sections_to_expand(current, target)
                if not refill:
                    break
                queue.extend(refill[:_REFILL_BATCH])
            section = queue[attempt]
            label = section.describe(current)
            messages = build_section_messages(
                self.prompts,
                current,
                section,
                original_text,
                title=title,
                author=author,
                reference_chars=self.reference_chars,
            )
            try:
                text = await self.complete(messages, model)
                if not text:
                    raise UpstreamError("OpenRouter did not return expanded content.")
            except UpstreamError as exc:
                logger.warning("Could not expand %s: %s", label, exc)
                continue
            current = apply_expansion(current, section, text)
            expanded += 1
            logger.info("Expanded %s, summary now %d words", label, count_summary_words(current))
            if self.section_delay > 0:
                await asyncio.sleep(self.section_delay)

        return current, expanded


__all__ = ["ExpansionOutcome", "SummaryExpansionService"]
