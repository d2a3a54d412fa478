"""Pydantic schemas for the accepted summary shapes.

Three shapes are accepted, tried in this order by ``validation.validate_summary``:

* raw-text: plain prose returned by a model (``raw_text``)
* structured: the sectioned summary (short/quick summary, key ideas, ...)
* flexible: any JSON object produced by a caller-defined prompt
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, Field, RootModel, StringConstraints

LongText = Annotated[str, StringConstraints(min_length=1, max_length=50_000)]


class RawTextSummary(BaseModel):
    """Unstructured model output."""

    raw_text: str = Field(..., min_length=1, description="Plain text produced by the model")
    ai_provider: str | None = Field(default=None, description="Which backend produced it")


class SummarySection(BaseModel):
    """One key idea."""

    title: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1, max_length=100_000)


class ChapterSummary(BaseModel):
    """Summary of one chapter."""

    title: str = Field(..., min_length=1)
    summary: str = Field(..., min_length=1, max_length=100_000)


class StructuredSummary(BaseModel):
    """Sectioned summary used by the reader UI and narration."""

    ai_provider: str | None = Field(default=None, description="Which backend produced it")
    short_summary: str = Field(
        ..., min_length=20, max_length=200, description="1-2 sentences for book cards"
    )
    quick_summary: str = Field(..., min_length=40, max_length=50_000)
    key_ideas: list[SummarySection] = Field(..., min_length=3)
    chapters: list[ChapterSummary] = Field(..., min_length=1)
    actionable_insights: list[LongText] = Field(..., min_length=3)
    quotes: list[LongText] = Field(..., min_length=3)


class FlexibleSummary(RootModel[dict[str, Any]]):
    """Any JSON object (arrays and scalars are rejected)."""


__all__ = [
    "RawTextSummary",
    "SummarySection",
    "ChapterSummary",
    "StructuredSummary",
    "FlexibleSummary",
]
