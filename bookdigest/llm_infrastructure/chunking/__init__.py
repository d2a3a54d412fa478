"""Chunking module for splitting long documents ahead of model calls.

Usage:
    from bookdigest.llm_infrastructure.chunking import get_chunker, merge_chunks

    chunker = get_chunker("sliding_window", chunk_size=4000, chunk_overlap=250)
    chunks = chunker.chunk(book_text, doc_id="book-42")
    merged = merge_chunks(outputs)
"""

from .base import BaseChunker, ChunkParams, ChunkedDocument
from .merge import merge_chunks, strip_overlap
from .registry import ChunkerRegistry, register_chunker, get_chunker

# Import engines to register them
from . import engines
from .engines import chunk_text

__all__ = [
    "BaseChunker",
    "ChunkParams",
    "ChunkedDocument",
    "ChunkerRegistry",
    "register_chunker",
    "get_chunker",
    "chunk_text",
    "merge_chunks",
    "strip_overlap",
]
