"""Splitting long narration text into request-sized pieces."""

from __future__ import annotations

import re

_PARAGRAPH_RE = re.compile(r"\n{2,}")
_SENTENCE_RE = re.compile(r"(?<=[.!?])\s+")


def _hard_slices(text: str, max_chars: int) -> list[str]:
    pieces = (text[i:i + max_chars].strip() for i in range(0, len(text), max_chars))
    return [p for p in pieces if p]


def _split_paragraph(paragraph: str, max_chars: int) -> list[str]:
    """Pack sentences into pieces; a sentence longer than the limit is sliced."""
    pieces: list[str] = []
    buf = ""
    for sentence in _SENTENCE_RE.split(paragraph):
        if not sentence:
            continue
        if len(sentence) > max_chars:
            if buf:
                pieces.append(buf)
                buf = ""
            pieces.extend(_hard_slices(sentence, max_chars))
        elif not buf:
            buf = sentence
        elif len(buf) + 1 + len(sentence) <= max_chars:
            buf = f"{buf} {sentence}"
        else:
            pieces.append(buf)
            buf = sentence
    if buf.strip():
        pieces.append(buf.strip())
    return pieces


def split_for_speech(text: str, max_chars: int = 4500) -> list[str]:
    """Split ``text`` into pieces of at most ``max_chars`` characters.

    Paragraphs are packed together first, oversized paragraphs fall back to
    sentence boundaries, and oversized sentences are sliced.
    """
    max_chars = max(1, max_chars)
    cleaned = text.replace("\r\n", "\n").strip()
    if not cleaned:
        return []
    if len(cleaned) <= max_chars:
        return [cleaned]

    pieces: list[str] = []
    current = ""
    for paragraph in (p.strip() for p in _PARAGRAPH_RE.split(cleaned)):
        if not paragraph:
            continue
        if len(paragraph) > max_chars:
            if current:
                pieces.append(current)
                current = ""
            pieces.extend(_split_paragraph(paragraph, max_chars))
        elif not current:
            current = paragraph
        elif len(current) + 2 + len(paragraph) <= max_chars:
            current = f"{current}\n\n{paragraph}"
        else:
            pieces.append(current)
            current = paragraph
    if current:
        pieces.append(current)
    return pieces


__all__ = ["split_for_speech"]
