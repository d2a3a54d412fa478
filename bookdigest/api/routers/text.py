"""Text utilities API: chunking, merging and word counts."""

import base64
import binascii
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, model_validator

from bookdigest.api.dependencies import get_document_analysis_service
from bookdigest.domain.models import Document
from bookdigest.llm_infrastructure.chunking import chunk_text, merge_chunks
from bookdigest.services.ingest import DocumentAnalysisService

router = APIRouter(prefix="/text", tags=["Text"])


# ─── Request/Response Models ───


class ChunkRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "text": "Chapter 1. It was a bright cold day in April...",
                "chunk_size": 4000,
                "overlap": 250,
            }
        }
    )

    text: str = Field(..., description="Text to split")
    chunk_size: int = Field(default=4000, description="Window size in characters")
    overlap: int = Field(default=250, description="Characters shared by consecutive chunks")
    max_chunks: int | None = Field(default=None, description="Cap on the number of chunks")


class ChunkResponse(BaseModel):
    chunks: list[str]
    count: int


class MergeRequest(BaseModel):
    outputs: list[str | None] = Field(
        ..., description="Per-chunk outputs in order; null marks a failed chunk"
    )


class MergeResponse(BaseModel):
    text: str


class WordCountDocument(BaseModel):
    """One document, given either as extracted text or as base64 file content."""

    filename: str = Field(..., description="Original file name")
    text: str | None = Field(default=None, description="Already extracted text")
    content_base64: str | None = Field(default=None, description="Raw file bytes, base64")
    byte_size: int | None = Field(default=None, ge=0, description="Original file size")

    @model_validator(mode="after")
    def validate_one_source(self) -> "WordCountDocument":
        if (self.text is None) == (self.content_base64 is None):
            raise ValueError("Provide exactly one of text or content_base64")
        return self


class WordCountRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "documents": [
                    {"filename": "Deep Work - Cal Newport.txt", "text": "Deep work is..."}
                ]
            }
        }
    )

    documents: list[WordCountDocument] = Field(..., min_length=1)


class FileWordCountResponse(BaseModel):
    filename: str
    words: int
    warning: str | None = None


class WordCountResponse(BaseModel):
    total_words: int
    files: list[FileWordCountResponse]


# ─── Endpoints ───


@router.post("/chunk", response_model=ChunkResponse)
async def chunk(request: ChunkRequest):
    """Split text into overlapping windows."""
    chunks = chunk_text(
        request.text,
        chunk_size=request.chunk_size,
        overlap=request.overlap,
        max_chunks=request.max_chunks,
    )
    return ChunkResponse(chunks=chunks, count=len(chunks))


@router.post("/merge", response_model=MergeResponse)
async def merge(request: MergeRequest):
    """Join per-chunk outputs, skipping empty and failed ones."""
    return MergeResponse(text=merge_chunks(request.outputs))


@router.post("/word-count", response_model=WordCountResponse)
async def word_count(
    request: WordCountRequest,
    service: DocumentAnalysisService = Depends(get_document_analysis_service),
):
    """Count words per document and flag likely image-only PDFs."""
    files: list[FileWordCountResponse] = []
    total = 0
    for item in request.documents:
        if item.text is not None:
            result = service.analyze_document(
                Document(
                    text=item.text,
                    filename=item.filename,
                    byte_size=item.byte_size
                    if item.byte_size is not None
                    else len(item.text.encode("utf-8")),
                )
            )
            total += result.words
            files.append(FileWordCountResponse(**asdict(result)))
            continue

        try:
            data = base64.b64decode(item.content_base64 or "", validate=True)
        except (binascii.Error, ValueError) as exc:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid base64 content for {item.filename}",
            ) from exc
        report = service.analyze_files([(item.filename, data)])
        total += report.total_words
        files.extend(FileWordCountResponse(**asdict(r)) for r in report.files)

    return WordCountResponse(total_words=total, files=files)


__all__ = ["router"]
