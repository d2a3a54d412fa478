"""Tests for the summarizer adapters and the prose and structured summary services."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bookdigest.domain.exceptions import UpstreamError, ValidationError  # noqa: E402
from bookdigest.domain.models import Document  # noqa: E402
from bookdigest.llm_infrastructure.chunking import get_chunker  # noqa: E402
from bookdigest.llm_infrastructure.llm.base import BaseLLM, LLMResponse  # noqa: E402
from bookdigest.llm_infrastructure.summarization import (  # noqa: E402
    BaseSummarizer,
    SummaryResult,
    SummarizerRegistry,
    SummaryShape,
    get_summarizer,
    register_summarizer,
)
from bookdigest.services.structured_summary_service import StructuredSummaryService  # noqa: E402
from bookdigest.services.summary_pipeline_service import SummaryPipelineService  # noqa: E402


class _StubLLM(BaseLLM):
    def __init__(self, reply: str = "stub summary", **kwargs) -> None:
        super().__init__(**kwargs)
        self.reply = reply
        self.calls: list[tuple[list[dict[str, str]], dict]] = []

    async def generate(self, messages, **kwargs):
        messages = list(messages)
        self.calls.append((messages, kwargs))
        return LLMResponse(text=self.reply, model=kwargs.get("model", "stub-model"))


class _ScriptedSummarizer(BaseSummarizer):
    """Returns a canned answer per chunk index, raising for exceptions."""

    def __init__(self, answers) -> None:
        super().__init__()
        self.answers = answers
        self.parts: list[tuple[int, int]] = []

    async def summarize(self, text, *, title=None, author=None, model=None, custom_prompt=None, part=None, **kwargs):
        self.parts.append(part)
        answer = self.answers[part[0]]
        if isinstance(answer, Exception):
            raise answer
        return SummaryResult(original_text=text, summary=answer, provider=model or "")


def _pipeline(answers, chunk_size=10, concurrency=2):
    chunker = get_chunker("sliding_window", chunk_size=chunk_size, chunk_overlap=0)
    summarizer = _ScriptedSummarizer(answers)
    service = SummaryPipelineService(chunker, summarizer, default_model="test/model", concurrency=concurrency)
    return service, summarizer


# --- summarizer adapter ---


def test_default_prompt_has_system_and_user_messages():
    summarizer = get_summarizer("llm", llm=_StubLLM())
    messages = summarizer.build_messages(
        "chunk body", title="Deep Work", author="Cal Newport", part=(1, 3)
    )

    assert [m["role"] for m in messages] == ["system", "user"]
    assert "book analyst" in messages[0]["content"]
    user = messages[1]["content"]
    assert "Title: Deep Work" in user
    assert "Author: Cal Newport" in user
    assert "(part 2 of 3)" in user
    assert user.endswith("chunk body")


def test_single_part_has_no_part_label():
    summarizer = get_summarizer("llm", llm=_StubLLM())
    user = summarizer.build_messages("body", part=(0, 1))[1]["content"]
    assert "part 1 of 1" not in user


def test_custom_prompt_is_single_user_message():
    summarizer = get_summarizer("llm", llm=_StubLLM())
    messages = summarizer.build_messages("body", custom_prompt="Summarize as haiku.")

    assert len(messages) == 1
    assert messages[0]["role"] == "user"
    assert messages[0]["content"].startswith("Summarize as haiku.")
    assert "Do NOT return" in messages[0]["content"]
    assert messages[0]["content"].endswith("body")


@pytest.mark.asyncio
async def test_summarizer_passes_model_to_llm():
    llm = _StubLLM(reply="prose")
    summarizer = get_summarizer("llm", llm=llm)
    result = await summarizer.summarize("text", model="anthropic/claude-3.5-sonnet")

    assert result.summary == "prose"
    assert result.provider == "anthropic/claude-3.5-sonnet"
    assert llm.calls[0][1] == {"model": "anthropic/claude-3.5-sonnet"}


def test_unknown_prompt_version_raises():
    with pytest.raises(FileNotFoundError):
        get_summarizer("llm", llm=_StubLLM(), prompt_version="v999")


# --- pipeline ---


@pytest.mark.asyncio
async def test_pipeline_merges_chunk_summaries_in_order():
    service, summarizer = _pipeline(["first", "second", "third"])
    outcome = await service.summarize(Document(text="a" * 25, title="T"))

    assert outcome.chunk_count == 3
    assert outcome.failed_chunks == []
    assert outcome.summary.shape == SummaryShape.RAW_TEXT
    assert outcome.summary.data == {
        "raw_text": "first\n\nsecond\n\nthird",
        "ai_provider": "OpenRouter (test/model)",
    }
    assert outcome.word_count == 3
    assert sorted(summarizer.parts) == [(0, 3), (1, 3), (2, 3)]


@pytest.mark.asyncio
async def test_pipeline_uses_requested_model_in_provider_label():
    service, _ = _pipeline(["only"])
    outcome = await service.summarize(Document(text="short"), model="google/gemini-pro")
    assert outcome.summary.data["ai_provider"] == "OpenRouter (google/gemini-pro)"


@pytest.mark.asyncio
async def test_pipeline_omits_failed_chunks():
    service, _ = _pipeline(["first", UpstreamError("boom", status_code=500), "third"])
    outcome = await service.summarize(Document(text="b" * 25))

    assert outcome.failed_chunks == [1]
    assert outcome.summary.data["raw_text"] == "first\n\nthird"


@pytest.mark.asyncio
async def test_pipeline_raises_first_error_when_every_chunk_fails():
    first = UpstreamError("first failure", status_code=429)
    service, _ = _pipeline([first, UpstreamError("second failure")])

    with pytest.raises(UpstreamError) as exc_info:
        await service.summarize(Document(text="c" * 15))
    assert exc_info.value is first


@pytest.mark.asyncio
async def test_pipeline_wraps_unexpected_errors():
    service, _ = _pipeline([RuntimeError("kaboom")])
    with pytest.raises(UpstreamError, match="kaboom"):
        await service.summarize(Document(text="short"))


@pytest.mark.asyncio
async def test_pipeline_rejects_empty_text():
    service, summarizer = _pipeline([])
    with pytest.raises(ValidationError):
        await service.summarize(Document(text="   "))
    assert summarizer.parts == []


@pytest.mark.asyncio
async def test_pipeline_rejects_all_empty_outputs():
    service, _ = _pipeline(["  ", ""])
    with pytest.raises(UpstreamError, match="empty"):
        await service.summarize(Document(text="d" * 15))


@pytest.mark.asyncio
async def test_pipeline_with_real_summarizer_adapter():
    llm = _StubLLM(reply="A chunk summary.")
    chunker = get_chunker("sliding_window", chunk_size=50, chunk_overlap=5)
    service = SummaryPipelineService(chunker, get_summarizer("llm", llm=llm), default_model="m")

    outcome = await service.summarize(Document(text="word " * 30, title="Title", author="Author"))

    assert outcome.chunk_count == len(llm.calls)
    assert all(call[1]["model"] == "m" for call in llm.calls)
    assert "Title: Title" in llm.calls[0][0][1]["content"]


# --- structured summaries ---


def _structured_payload(**overrides):
    payload = {
        "short_summary": "A book about focusing deeply in a distracted world.",
        "quick_summary": "Deep work is rare and valuable. This book explains how to cultivate it.",
        "key_ideas": [
            {"title": "Valuable", "text": "Hard to replicate."},
            {"title": "Rare", "text": "Most people are distracted."},
            {"title": "Meaningful", "text": "Focus is satisfying."},
        ],
        "chapters": [{"title": "Part 1", "summary": "The idea."}],
        "actionable_insights": ["Schedule", "Quit social media", "Embrace boredom"],
        "quotes": ["One", "Two", "Three"],
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_structured_summarizer_requests_json_object():
    llm = _StubLLM(reply=json.dumps({"short_summary": "x"}))
    summarizer = get_summarizer("structured", llm=llm)

    result = await summarizer.summarize("Book text.", title="Deep Work", model="gpt-4o-mini")

    messages, kwargs = llm.calls[0]
    assert kwargs == {"model": "gpt-4o-mini", "response_format": {"type": "json_object"}}
    assert messages[0]["role"] == "system"
    assert '"short_summary"' in messages[0]["content"]
    assert messages[1]["content"].startswith("Title: Deep Work")
    assert messages[1]["content"].endswith("Book text.")
    assert result.metadata["payload"] == {"short_summary": "x"}


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", ["not json at all", "[1, 2, 3]"])
async def test_structured_summarizer_rejects_non_object_replies(reply):
    summarizer = get_summarizer("structured", llm=_StubLLM(reply=reply))

    with pytest.raises(UpstreamError):
        await summarizer.summarize("Book text.")


@pytest.mark.asyncio
async def test_structured_service_clips_and_labels():
    long_short = "Focus matters. " * 20
    llm = _StubLLM(reply=json.dumps(_structured_payload(short_summary=long_short)))
    service = StructuredSummaryService(get_summarizer("structured", llm=llm))

    outcome = await service.summarize(Document(text="Book text.", title="Deep Work"))

    data = outcome.summary.data
    assert outcome.summary.shape == SummaryShape.STRUCTURED
    assert data["short_summary"] == long_short[:197] + "..."
    assert data["ai_provider"] == "OpenAI (stub-model)"
    assert outcome.chunk_count == 1
    assert outcome.word_count > 0


@pytest.mark.asyncio
async def test_structured_service_rejects_incomplete_summary():
    llm = _StubLLM(reply=json.dumps(_structured_payload(quotes=["only one"])))
    service = StructuredSummaryService(get_summarizer("structured", llm=llm))

    with pytest.raises(UpstreamError, match="structured summary format"):
        await service.summarize(Document(text="Book text."))


@pytest.mark.asyncio
async def test_structured_service_rejects_empty_text():
    llm = _StubLLM()
    service = StructuredSummaryService(get_summarizer("structured", llm=llm))

    with pytest.raises(ValidationError):
        await service.summarize(Document(text="  "))
    assert llm.calls == []


# --- registry ---


def test_summarizer_registry_lists_prose_and_structured():
    methods = SummarizerRegistry.list_methods()
    assert methods["llm"] == ["v1"]
    assert methods["structured"] == ["v1"]


def test_unknown_summarizer_lists_registered_ones():
    with pytest.raises(ValueError, match=r"No summarizer bullet/v1; registered: .*llm/v1"):
        get_summarizer("bullet")


def test_duplicate_summarizer_registration_raises():
    with pytest.raises(ValueError, match="llm/v1 is registered twice"):

        @register_summarizer("llm", version="v1")
        class _Duplicate(BaseSummarizer):
            async def summarize(self, text, **kwargs):
                return SummaryResult(original_text=text, summary=text)
