"""Chunking engine implementations.

Available engines:
- sliding_window: fixed character windows with overlap and an optional chunk cap
"""

from .sliding_window import SlidingWindowChunker, chunk_text

__all__ = [
    "SlidingWindowChunker",
    "chunk_text",
]
