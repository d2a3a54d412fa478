"""Summary generation, validation and section extraction."""

from .base import BaseSummarizer, SummaryResult
from .registry import SummarizerRegistry, register_summarizer, get_summarizer
from .schemas import (
    ChapterSummary,
    FlexibleSummary,
    RawTextSummary,
    StructuredSummary,
    SummarySection,
)
from .sections import NARRATION_SECTIONS, extract_section_text
from .validation import SummaryShape, ValidatedSummary, validate_summary

# Import adapters to trigger registration
from . import adapters  # noqa: F401

__all__ = [
    "BaseSummarizer",
    "SummaryResult",
    "SummarizerRegistry",
    "register_summarizer",
    "get_summarizer",
    "ChapterSummary",
    "FlexibleSummary",
    "RawTextSummary",
    "StructuredSummary",
    "SummarySection",
    "NARRATION_SECTIONS",
    "extract_section_text",
    "SummaryShape",
    "ValidatedSummary",
    "validate_summary",
]
