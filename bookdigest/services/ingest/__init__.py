"""Ingest service helpers."""

from .document_analysis import DocumentAnalysisService, FileWordCount, WordCountReport
from .text_extraction import extract_text

__all__ = [
    "DocumentAnalysisService",
    "FileWordCount",
    "WordCountReport",
    "extract_text",
]
