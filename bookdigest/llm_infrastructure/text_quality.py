"""Lightweight text quality heuristics for extracted document text."""

from __future__ import annotations

import re
from pathlib import PurePath

_WHITESPACE_RE = re.compile(r"\s+")
# Latin-1 supplement through Greek extended, plus the CJK/Hangul block range.
_WORD_CHAR_RE = re.compile(r"[\w\u00C0-\u1FFF\u2C00-\uD7FF]")

LOW_YIELD_WARNING = (
    "Low word count detected. This PDF may be image-based (scanned). "
    "OCR not available."
)


def count_words(text: str | None) -> int:
    """Count whitespace-separated tokens that contain a word character.

    Punctuation-only tokens ("--", "...", "•") are ignored.
    """
    if not text:
        return 0
    normalized = _WHITESPACE_RE.sub(" ", text).strip()
    if not normalized:
        return 0
    return sum(1 for token in normalized.split(" ") if _WORD_CHAR_RE.search(token))


def is_low_yield_extraction(
    word_count: int,
    filename: str | None,
    byte_size: int | None,
    *,
    low_word_threshold: int = 100,
    large_file_bytes: int = 100_000,
    image_capable_extensions: tuple[str, ...] | list[str] = (".pdf",),
) -> bool:
    """True when a large page-image-capable file produced almost no text."""
    if not filename or byte_size is None:
        return False
    extension = PurePath(filename).suffix.lower()
    allowed = {ext.lower() for ext in image_capable_extensions}
    return (
        extension in allowed
        and word_count < low_word_threshold
        and byte_size > large_file_bytes
    )


__all__ = ["LOW_YIELD_WARNING", "count_words", "is_low_yield_extraction"]
