"""Tests for the summary validation cascade and section extraction."""

from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bookdigest.domain.exceptions import ValidationError
from bookdigest.llm_infrastructure.summarization import (
    NARRATION_SECTIONS,
    StructuredSummary,
    SummaryShape,
    extract_section_text,
    validate_summary,
)
from bookdigest.llm_infrastructure.summarization.validation import parse_structured


def structured_payload(**overrides):
    payload = {
        "ai_provider": "OpenRouter (openai/gpt-4o)",
        "short_summary": "A book about focusing deeply in a distracted world.",
        "quick_summary": "Deep work is rare and valuable. This book explains how to cultivate it.",
        "key_ideas": [
            {"title": "Deep work is valuable", "text": "It produces results that are hard to replicate."},
            {"title": "Deep work is rare", "text": "Most knowledge workers are constantly distracted."},
            {"title": "Deep work is meaningful", "text": "Focus leads to a satisfying working life."},
        ],
        "chapters": [{"title": "Part 1", "summary": "Why deep work matters."}],
        "actionable_insights": ["Schedule focus blocks", "Quit social media", "Embrace boredom"],
        "quotes": ["Clarity about what matters...", "Who you are...", "To produce at your peak..."],
    }
    payload.update(overrides)
    return payload


# --- cascade ---


def test_raw_text_payload_matches_first():
    result = validate_summary({"raw_text": "Plain prose summary.", "ai_provider": "X"})
    assert result.shape == SummaryShape.RAW_TEXT
    assert result.is_raw_text
    assert result.data == {"raw_text": "Plain prose summary.", "ai_provider": "X"}


def test_raw_text_wins_even_with_structured_fields():
    payload = structured_payload(raw_text="prose")
    assert validate_summary(payload).shape == SummaryShape.RAW_TEXT


def test_structured_payload():
    result = validate_summary(structured_payload())
    assert result.shape == SummaryShape.STRUCTURED
    assert isinstance(result.model, StructuredSummary)
    assert len(result.data["key_ideas"]) == 3


def test_structured_with_too_few_key_ideas_falls_to_flexible():
    payload = structured_payload(key_ideas=[{"title": "Only", "text": "one"}])
    result = validate_summary(payload)
    assert result.shape == SummaryShape.FLEXIBLE
    assert result.data["key_ideas"] == [{"title": "Only", "text": "one"}]


def test_short_summary_length_bounds():
    assert validate_summary(structured_payload(short_summary="too short")).shape == SummaryShape.FLEXIBLE
    assert validate_summary(structured_payload(short_summary="x" * 201)).shape == SummaryShape.FLEXIBLE
    assert validate_summary(structured_payload(short_summary="x" * 200)).shape == SummaryShape.STRUCTURED


def test_arbitrary_object_is_flexible():
    result = validate_summary({"headline": "Anything", "bullets": [1, 2]})
    assert result.shape == SummaryShape.FLEXIBLE
    assert result.data == {"headline": "Anything", "bullets": [1, 2]}


def test_empty_raw_text_is_not_raw_text():
    assert validate_summary({"raw_text": ""}).shape == SummaryShape.FLEXIBLE


@pytest.mark.parametrize("payload", [["a", "b"], "just a string", 42, None])
def test_non_objects_are_rejected(payload):
    with pytest.raises(ValidationError):
        validate_summary(payload)


def test_rejection_reports_only_raw_text_errors():
    with pytest.raises(ValidationError) as exc_info:
        validate_summary(["not", "an", "object"])

    errors = exc_info.value.details["errors"]
    assert errors
    # Structured-shape fields never show up in the report.
    locs = {tuple(err["loc"]) for err in errors}
    assert not any("short_summary" in loc or "key_ideas" in loc for loc in locs)
    assert all(set(err) == {"loc", "msg", "type"} for err in errors)


def test_parse_structured():
    assert parse_structured(structured_payload()) is not None
    assert parse_structured({"raw_text": "x"}) is None


# --- section extraction ---


def test_raw_text_summary_narrates_raw_text_for_any_section():
    summary = {"raw_text": "The whole summary."}
    for section in NARRATION_SECTIONS:
        assert extract_section_text(summary, section) == "The whole summary."


def test_quick_and_short_summary_sections():
    summary = structured_payload()
    assert extract_section_text(summary, "quick_summary") == summary["quick_summary"]
    assert extract_section_text(summary, "short_summary") == summary["short_summary"]


def test_key_ideas_and_chapters_sections():
    summary = structured_payload()
    ideas = extract_section_text(summary, "key_ideas")
    assert ideas.splitlines()[0] == "Deep work is valuable: It produces results that are hard to replicate."
    assert extract_section_text(summary, "chapters") == "Part 1: Why deep work matters."


def test_list_sections_join_lines():
    summary = structured_payload()
    assert extract_section_text(summary, "quotes").count("\n") == 2


def test_full_summary_includes_title_and_numbered_sections():
    text = extract_section_text(structured_payload(), "full_summary", title="Deep Work")
    assert text.startswith("Title: Deep Work")
    assert "Key Ideas\n1. Deep work is valuable." in text
    assert "Insights\n1. Schedule focus blocks" in text


def test_ai_provider_section_defaults_to_unknown():
    summary = structured_payload(ai_provider=None)
    assert extract_section_text(summary, "ai_provider") == "Unknown"


def test_invalid_section_rejected():
    with pytest.raises(ValidationError, match="Invalid section"):
        extract_section_text(structured_payload(), "epilogue")


def test_missing_summary_rejected():
    with pytest.raises(ValidationError):
        extract_section_text(None, "quick_summary")


def test_flexible_summary_rejected():
    with pytest.raises(ValidationError, match="summary format"):
        extract_section_text({"headline": "x"}, "quick_summary")
