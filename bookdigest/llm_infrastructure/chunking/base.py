"""Base classes for text chunking."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ChunkParams:
    """Parameters for chunking configuration.

    Attributes:
        chunk_size: Window size in characters. Clamped to at least 1.
        chunk_overlap: Characters shared by consecutive chunks. Clamped to
            ``[0, chunk_size - 1]``.
        max_chunks: Hard cap on emitted chunks; the remaining tail is dropped.
            ``None`` means unbounded.
    """

    chunk_size: int = 4000
    chunk_overlap: int = 250
    max_chunks: int | None = None

    def normalized(self) -> "ChunkParams":
        """Return a copy with every value clamped into its legal range."""
        size = max(1, int(self.chunk_size))
        overlap = min(max(0, int(self.chunk_overlap)), size - 1)
        max_chunks = None if self.max_chunks is None else max(1, int(self.max_chunks))
        return ChunkParams(chunk_size=size, chunk_overlap=overlap, max_chunks=max_chunks)

    @property
    def step(self) -> int:
        return max(1, self.chunk_size - self.chunk_overlap)


@dataclass
class ChunkedDocument:
    """A single chunk from a document.

    Attributes:
        text: The chunk text content.
        chunk_index: Index of this chunk within the source document (0-based).
        start_offset: Start character offset in the original document.
        end_offset: End character offset in the original document.
        source_doc_id: ID of the source document (for reference).
        chunk_id: Unique ID for this chunk (usually "{source_doc_id}_{chunk_index}").
        metadata: Additional metadata (preserved from source or added during chunking).
    """

    text: str
    chunk_index: int
    start_offset: int
    end_offset: int
    source_doc_id: str = ""
    chunk_id: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.chunk_id and self.source_doc_id:
            self.chunk_id = f"{self.source_doc_id}_{self.chunk_index}"

    def __repr__(self) -> str:
        preview = self.text[:50] + "..." if len(self.text) > 50 else self.text
        return (
            f"ChunkedDocument(chunk_id={self.chunk_id!r}, "
            f"index={self.chunk_index}, "
            f"offset={self.start_offset}-{self.end_offset}, "
            f"text={preview!r})"
        )


class BaseChunker(ABC):
    """Base class for all text chunking methods.

    Subclasses implement ``chunk()`` and register themselves with
    ``@register_chunker``.
    """

    def __init__(self, params: ChunkParams | None = None, **kwargs: Any) -> None:
        params = params or ChunkParams()
        self.params = ChunkParams(
            chunk_size=kwargs.get("chunk_size", params.chunk_size),
            chunk_overlap=kwargs.get("chunk_overlap", params.chunk_overlap),
            max_chunks=kwargs.get("max_chunks", params.max_chunks),
        ).normalized()
        self.config = kwargs

    @abstractmethod
    def chunk(
        self,
        text: str,
        doc_id: str = "",
        metadata: dict[str, Any] | None = None,
    ) -> list[ChunkedDocument]:
        """Split text into chunks.

        Args:
            text: Input text to chunk.
            doc_id: Source document ID (for reference in chunks).
            metadata: Additional metadata to include in each chunk.

        Returns:
            List of ChunkedDocument instances.
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(params={self.params})"
