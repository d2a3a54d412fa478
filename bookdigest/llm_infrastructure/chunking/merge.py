"""Joining per-chunk model outputs back into one text."""

from __future__ import annotations

from typing import Iterable

CHUNK_SEPARATOR = "\n\n"


def merge_chunks(outputs: Iterable[str | None]) -> str:
    """Trim each output, drop empty or failed (``None``) ones, join in order."""
    parts = [text.strip() for text in outputs if text is not None]
    return CHUNK_SEPARATOR.join(part for part in parts if part)


def strip_overlap(
    existing: str,
    addition: str,
    window: int = 8000,
    min_overlap: int = 80,
) -> str:
    """Drop the start of ``addition`` that repeats the end of ``existing``.

    Models asked to "continue" a long answer often restate the last few
    sentences. Only the final ``window`` characters of ``existing`` are
    searched, and repeats shorter than ``min_overlap`` are kept as-is.
    """
    if not existing or not addition:
        return addition

    tail = existing[-window:]
    longest = min(len(tail), len(addition))
    for size in range(longest, min_overlap - 1, -1):
        if tail.endswith(addition[:size]):
            return addition[size:]
    return addition


__all__ = ["CHUNK_SEPARATOR", "merge_chunks", "strip_overlap"]
