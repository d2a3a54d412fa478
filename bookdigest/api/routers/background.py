"""Background job receiver called by the asset dispatcher.

The shared secret is checked before the body is used. Jobs run after the
response is sent; their outcome is only logged.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from bookdigest.api.dependencies import get_background_runner, require_dispatch_secret
from bookdigest.domain.models import JobKind
from bookdigest.services.dispatch import BackgroundJobRequest, BackgroundJobRunner

router = APIRouter(prefix="/background", tags=["Background"])
logger = logging.getLogger(__name__)


class BackgroundJobBody(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"targetId": "book-42", "force": True, "feedback": None}},
    )

    target_id: str = Field(..., alias="targetId", min_length=1)
    force: bool = False
    feedback: str | None = None
    section: str | None = None
    voice_id: str | None = Field(default=None, alias="voiceId")
    model_id: str | None = Field(default=None, alias="modelId")


class BackgroundJobAccepted(BaseModel):
    status: str = "accepted"
    job_kind: str
    target_id: str


@router.post(
    "/{job_kind}",
    status_code=202,
    response_model=BackgroundJobAccepted,
    dependencies=[Depends(require_dispatch_secret)],
)
async def run_job(
    job_kind: str,
    body: BackgroundJobBody,
    background_tasks: BackgroundTasks,
    runner: BackgroundJobRunner = Depends(get_background_runner),
):
    """Accept a derived-asset job and run it after responding."""
    try:
        kind = JobKind(job_kind)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown job kind: {job_kind}") from exc

    request = BackgroundJobRequest(
        target_id=body.target_id,
        force=body.force,
        feedback=body.feedback,
        section=body.section,
        voice_id=body.voice_id,
        model_id=body.model_id,
    )
    background_tasks.add_task(runner.run_logged, kind, request)
    logger.info("Queued background %s job for %s", kind.value, body.target_id)
    return BackgroundJobAccepted(job_kind=kind.value, target_id=body.target_id)


__all__ = ["router"]
