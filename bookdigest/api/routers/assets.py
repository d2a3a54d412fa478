"""Derived-asset API: cover regeneration, narration and Drive export."""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from bookdigest.api.dependencies import (
    get_asset_dispatcher,
    get_book_repository,
    get_current_principal,
    get_drive_uploader,
    require_dispatch_secret,
)
from bookdigest.api.errors import to_http_exception
from bookdigest.domain.models import DispatchResult, JobKind, Principal
from bookdigest.services.dispatch import AssetDispatcher
from bookdigest.services.ports import BookRepository
from bookdigest.services.storage import DriveUploader

router = APIRouter(tags=["Assets"])
logger = logging.getLogger(__name__)


# ─── Request/Response Models ───


class RegenerateCoverRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={"example": {"feedback": "Use a darker palette and a lighthouse icon."}}
    )

    feedback: str | None = Field(default=None, description="Corrections applied to the prompt")


class NarrateRequest(BaseModel):
    section: str = Field(default="quick_summary", description="Summary section to narrate")
    force: bool = Field(default=True, description="Regenerate even when audio is cached")


class DispatchResponse(BaseModel):
    status: str
    job_id: str
    job_kind: str
    message: str

    @classmethod
    def from_result(cls, result: DispatchResult) -> "DispatchResponse":
        return cls(
            status=result.status,
            job_id=result.job_id,
            job_kind=result.job_kind.value,
            message=result.message,
        )


class UploadCoverToDriveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(..., alias="imageUrl", min_length=1)
    file_name: str = Field(..., alias="fileName", min_length=1)
    folder_id: str = Field(..., alias="folderId", min_length=1)
    drive_access_token: str = Field(..., alias="driveAccessToken", min_length=1)


class UploadCoverToDriveResponse(BaseModel):
    success: bool = True
    file_id: str = Field(..., serialization_alias="fileId")
    web_view_link: str = Field(..., serialization_alias="webViewLink")


# ─── Endpoints ───


@router.post("/books/{book_id}/regenerate-cover", status_code=202, response_model=DispatchResponse)
async def regenerate_cover(
    book_id: str,
    request: RegenerateCoverRequest | None = None,
    principal: Principal | None = Depends(get_current_principal),
    repository: BookRepository = Depends(get_book_repository),
    dispatcher: AssetDispatcher = Depends(get_asset_dispatcher),
):
    """Start cover regeneration in the background (editors only)."""
    feedback = request.feedback.strip() if request and request.feedback else None
    try:
        result = await dispatcher.dispatch_by_id(
            JobKind.COVER,
            book_id,
            repository,
            principal=principal,
            force=True,
            feedback=feedback or None,
        )
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return DispatchResponse.from_result(result)


@router.post("/books/{book_id}/narrate", status_code=202, response_model=DispatchResponse)
async def narrate(
    book_id: str,
    request: NarrateRequest | None = None,
    principal: Principal | None = Depends(get_current_principal),
    repository: BookRepository = Depends(get_book_repository),
    dispatcher: AssetDispatcher = Depends(get_asset_dispatcher),
):
    """Start narration of one summary section in the background."""
    request = request or NarrateRequest()
    try:
        result = await dispatcher.dispatch_by_id(
            JobKind.AUDIO,
            book_id,
            repository,
            principal=principal,
            force=request.force,
            section=request.section,
        )
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return DispatchResponse.from_result(result)


@router.post(
    "/upload-cover-to-drive",
    response_model=UploadCoverToDriveResponse,
    response_model_by_alias=True,
    dependencies=[Depends(require_dispatch_secret)],
)
async def upload_cover_to_drive(
    request: UploadCoverToDriveRequest,
    uploader: DriveUploader = Depends(get_drive_uploader),
):
    """Copy a stored cover image into a Google Drive folder.

    Called server-to-server with the shared secret and the caller's OAuth token.
    """
    try:
        data = await uploader.download(request.image_url)
        uploaded = await uploader.upload(
            data,
            request.file_name,
            request.folder_id,
            request.drive_access_token,
        )
    except Exception as exc:
        logger.error("Drive upload of %s failed: %s", request.file_name, exc)
        raise to_http_exception(exc) from exc
    return UploadCoverToDriveResponse(file_id=uploaded.file_id, web_view_link=uploaded.web_view_link)


__all__ = ["router"]
