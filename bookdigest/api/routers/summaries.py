"""Summary API: validation, generation and persistence of book summaries."""

import logging
from typing import Any, Literal

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, ConfigDict, Field

from bookdigest.api.dependencies import (
    get_book_repository,
    get_current_principal,
    get_structured_summary_service,
    get_summary_expansion_service,
    get_summary_pipeline_service,
)
from bookdigest.api.errors import to_http_exception
from bookdigest.domain.exceptions import AuthorizationError, NotFoundError, ValidationError
from bookdigest.domain.models import Document, Principal
from bookdigest.llm_infrastructure.summarization import validate_summary
from bookdigest.services.ports import BookRepository
from bookdigest.services.structured_summary_service import StructuredSummaryService
from bookdigest.services.summary_expansion_service import SummaryExpansionService
from bookdigest.services.summary_pipeline_service import SummaryPipelineService

router = APIRouter(tags=["Summaries"])
logger = logging.getLogger(__name__)


# ─── Request/Response Models ───


class SummaryValidationResponse(BaseModel):
    shape: str = Field(..., description="raw_text, structured or flexible")
    summary: dict[str, Any]


class SummarizeRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "text": "Chapter 1. Deep work is the ability to focus...",
                "filename": "Deep Work - Cal Newport.pdf",
                "model": "openai/gpt-4o",
            }
        }
    )

    text: str = Field(..., description="Extracted book text")
    filename: str | None = Field(default=None, description="Used to infer title/author")
    title: str | None = None
    author: str | None = None
    model: str | None = Field(default=None, description="OpenRouter model id")
    custom_prompt: str | None = Field(default=None, description="Replaces the default prompt")
    format: Literal["raw_text", "structured"] = Field(
        default="raw_text",
        description="raw_text: chunked prose summary; structured: one JSON-mode request",
    )


class SummarizeResponse(BaseModel):
    shape: str
    summary: dict[str, Any]
    title: str | None = None
    author: str | None = None
    chunk_count: int
    failed_chunks: list[int] = Field(default_factory=list)
    word_count: int


class SaveSummaryResponse(BaseModel):
    book_id: str
    shape: str


class ExpandSummaryRequest(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "summary": {"raw_text": "Deep work is the ability to focus..."},
                "originalText": "Chapter 1. Deep work is...",
                "targetWordCount": 5000,
            }
        },
    )

    summary: Any = Field(default=None, description="Summary in any accepted shape")
    original_text: str | None = Field(default=None, alias="originalText")
    title: str | None = None
    author: str | None = None
    model: str | None = Field(default=None, description="OpenRouter model id")
    target_word_count: int | None = Field(default=None, alias="targetWordCount", gt=0)


class ExpandSummaryResponse(BaseModel):
    shape: str
    summary: dict[str, Any]
    word_count_before: int
    word_count: int
    target_word_count: int
    expanded_sections: int


# ─── Endpoints ───


@router.post("/summaries/validate", response_model=SummaryValidationResponse)
async def validate(payload: Any = Body(...)):
    """Check a summary payload against the accepted shapes."""
    try:
        result = validate_summary(payload)
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return SummaryValidationResponse(shape=result.shape.value, summary=result.data)


@router.post("/summarize", response_model=SummarizeResponse)
async def summarize(
    request: SummarizeRequest,
    service: SummaryPipelineService = Depends(get_summary_pipeline_service),
    structured: StructuredSummaryService = Depends(get_structured_summary_service),
):
    """Summarize a document and return the validated summary.

    ``raw_text`` summaries are built chunk by chunk; ``structured`` ones come
    from a single JSON-mode request over the whole text.
    """
    if request.filename:
        document = Document.from_upload(
            request.text, request.filename, title=request.title, author=request.author
        )
    else:
        document = Document(text=request.text, title=request.title, author=request.author)

    try:
        if request.format == "structured":
            if request.custom_prompt:
                raise ValidationError(
                    "Custom prompts are only supported for raw_text summaries", field="custom_prompt"
                )
            outcome = await structured.summarize(document, model=request.model)
        else:
            outcome = await service.summarize(
                document, model=request.model, custom_prompt=request.custom_prompt
            )
    except Exception as exc:
        logger.error("Summary generation failed for %s: %s", document.title or "document", exc)
        raise to_http_exception(exc) from exc

    return SummarizeResponse(
        shape=outcome.summary.shape.value,
        summary=outcome.summary.data,
        title=document.title,
        author=document.author,
        chunk_count=outcome.chunk_count,
        failed_chunks=outcome.failed_chunks,
        word_count=outcome.word_count,
    )


@router.post("/summarize/expand", response_model=ExpandSummaryResponse)
async def expand_summary(
    request: ExpandSummaryRequest,
    principal: Principal | None = Depends(get_current_principal),
    service: SummaryExpansionService = Depends(get_summary_expansion_service),
):
    """Grow a summary towards a target word count (10,000 by default)."""
    try:
        if principal is None:
            raise AuthorizationError("You must be logged in to expand summaries.", unauthenticated=True)
        if not request.summary or not request.original_text:
            raise ValidationError("Summary and original text are required.")
        outcome = await service.expand(
            request.summary,
            request.original_text,
            title=request.title,
            author=request.author,
            model=request.model,
            target_word_count=request.target_word_count,
        )
    except Exception as exc:
        logger.error("Summary expansion failed: %s", exc)
        raise to_http_exception(exc) from exc

    return ExpandSummaryResponse(
        shape=outcome.shape.value,
        summary=outcome.summary,
        word_count_before=outcome.word_count_before,
        word_count=outcome.word_count,
        target_word_count=outcome.target_word_count,
        expanded_sections=outcome.expanded_sections,
    )


@router.put("/books/{book_id}/summary", response_model=SaveSummaryResponse)
async def save_summary(
    book_id: str,
    payload: Any = Body(...),
    principal: Principal | None = Depends(get_current_principal),
    repository: BookRepository = Depends(get_book_repository),
):
    """Validate an uploaded summary and store it on the book (editors only)."""
    try:
        if principal is None:
            raise AuthorizationError("You must be logged in to upload summaries.", unauthenticated=True)
        if not principal.is_editor:
            raise AuthorizationError("Only editors can upload summaries.")
        result = validate_summary(payload)
        if await repository.get_book(book_id) is None:
            raise NotFoundError(f"Book not found: {book_id}")
        await repository.save_summary(book_id, result.data)
    except Exception as exc:
        raise to_http_exception(exc) from exc

    logger.info("Saved %s summary for %s", result.shape.value, book_id)
    return SaveSummaryResponse(book_id=book_id, shape=result.shape.value)


__all__ = ["router"]
