"""Sliding-window character chunker used ahead of per-chunk model calls."""

from typing import Any

from ..base import BaseChunker, ChunkedDocument, ChunkParams
from ..registry import register_chunker


def _windows(text: str, params: ChunkParams) -> list[tuple[int, int]]:
    """Return ``(start, end)`` offsets of every window for ``text``."""
    text_len = len(text)
    if text_len == 0:
        return []
    if text_len <= params.chunk_size:
        return [(0, text_len)]

    spans: list[tuple[int, int]] = []
    pos = 0
    while pos < text_len:
        end = min(pos + params.chunk_size, text_len)
        spans.append((pos, end))
        if end >= text_len:
            break
        if params.max_chunks is not None and len(spans) >= params.max_chunks:
            break
        pos += params.step
    return spans


def chunk_text(
    text: str,
    chunk_size: int = 4000,
    overlap: int = 250,
    max_chunks: int | None = None,
) -> list[str]:
    """Split ``text`` into overlapping windows.

    Deterministic and side-effect free. Out-of-range arguments are clamped
    (size >= 1, 0 <= overlap < size, max_chunks >= 1) rather than rejected.
    Text beyond ``max_chunks`` windows is silently dropped.
    """
    params = ChunkParams(
        chunk_size=chunk_size,
        chunk_overlap=overlap,
        max_chunks=max_chunks,
    ).normalized()
    return [text[start:end] for start, end in _windows(text, params)]


@register_chunker("sliding_window", version="v1")
class SlidingWindowChunker(BaseChunker):
    """Fixed-size character windows that advance by ``chunk_size - overlap``.

    Example:
        ```python
        chunker = SlidingWindowChunker(chunk_size=4000, chunk_overlap=250)
        chunks = chunker.chunk(book_text, doc_id="book-42")
        ```
    """

    def chunk(
        self,
        text: str,
        doc_id: str = "",
        metadata: dict[str, Any] | None = None,
    ) -> list[ChunkedDocument]:
        metadata = metadata or {}
        return [
            ChunkedDocument(
                text=text[start:end],
                chunk_index=index,
                start_offset=start,
                end_offset=end,
                source_doc_id=doc_id,
                metadata=metadata.copy(),
            )
            for index, (start, end) in enumerate(_windows(text, self.params))
        ]


__all__ = ["SlidingWindowChunker", "chunk_text"]
