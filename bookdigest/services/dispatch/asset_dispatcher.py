"""Fire-and-forget dispatch of derived-asset jobs (cover image, narration).

``dispatch`` validates everything it can locally, hands the job to a
detached asyncio task and returns ``accepted`` without waiting for the
executor. Delivery failures are logged and never reach the requester.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from bookdigest.config.settings import DispatchSettings, dispatch_settings
from bookdigest.domain.exceptions import (
    AuthorizationError,
    ConfigError,
    NotFoundError,
    ValidationError,
)
from bookdigest.domain.models import (
    AssetTarget,
    DerivedAssetJob,
    DispatchResult,
    JobKind,
    Principal,
    Role,
    is_known_author,
)
from bookdigest.llm_infrastructure.http_client import client_scope
from bookdigest.llm_infrastructure.summarization.sections import NARRATION_SECTIONS
from bookdigest.services.ports import BookRepository

logger = logging.getLogger(__name__)

# None means any authenticated caller.
REQUIRED_ROLE: dict[JobKind, Role | None] = {
    JobKind.COVER: Role.EDITOR,
    JobKind.AUDIO: None,
}


def authorize(job_kind: JobKind, principal: Principal | None) -> None:
    if principal is None:
        raise AuthorizationError("Unauthorized", unauthenticated=True)
    required = REQUIRED_ROLE[job_kind]
    if required is not None and principal.role != required:
        raise AuthorizationError(
            f"Forbidden: {required.value} access required",
            details={"job_kind": job_kind.value, "role": principal.role.value},
        )


def validate_target(job_kind: JobKind, target: AssetTarget, section: str | None = None) -> None:
    """Check the source fields the job needs before anything is sent."""
    if job_kind == JobKind.COVER:
        if not (target.title or "").strip():
            raise ValidationError("Cover generation needs a title", field="title")
        if not is_known_author(target.author):
            raise ValidationError("Cover generation needs a known author", field="author")
    elif job_kind == JobKind.AUDIO:
        if not target.summary:
            raise ValidationError("Narration needs a stored summary", field="summary")
        if section is not None and section not in NARRATION_SECTIONS:
            raise ValidationError(f"Invalid section: {section}", field="section")


class AssetDispatcher:
    def __init__(
        self,
        executor_url: str,
        secret: str,
        header_name: str = "x-import-secret",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.executor_url = executor_url.rstrip("/")
        self.secret = secret
        self.header_name = header_name
        self._client = client
        self._tasks: set[asyncio.Task] = set()

    @classmethod
    def from_settings(
        cls,
        settings: DispatchSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> "AssetDispatcher":
        settings = settings or dispatch_settings
        return cls(
            executor_url=settings.executor_url,
            secret=settings.secret,
            header_name=settings.header_name,
            client=client,
        )

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def dispatch_by_id(
        self,
        job_kind: JobKind,
        target_id: str,
        repository: BookRepository,
        *,
        principal: Principal | None,
        force: bool = True,
        feedback: str | None = None,
        section: str | None = None,
    ) -> DispatchResult:
        """Authorize, load the target from the repository, then dispatch."""
        authorize(job_kind, principal)
        target = await repository.get_book(target_id)
        if target is None:
            raise NotFoundError(f"Book not found: {target_id}")
        return await self.dispatch(
            job_kind, target, principal=principal, force=force, feedback=feedback, section=section
        )

    async def dispatch(
        self,
        job_kind: JobKind,
        target: AssetTarget,
        *,
        principal: Principal | None,
        force: bool = True,
        feedback: str | None = None,
        section: str | None = None,
    ) -> DispatchResult:
        """Validate and hand off one job; returns as soon as the task is scheduled.

        Raises, in this order and always before any network call:
            AuthorizationError: caller lacks the privilege for ``job_kind``.
            ValidationError: the target lacks required source fields.
            ConfigError: the shared secret or executor URL is missing.
        """
        authorize(job_kind, principal)
        validate_target(job_kind, target, section)
        if not self.secret:
            raise ConfigError("Dispatch secret is not configured (DISPATCH_SECRET)")
        if not self.executor_url:
            raise ConfigError("Background executor URL is not configured (DISPATCH_EXECUTOR_URL)")

        job = DerivedAssetJob(
            target_entity_id=target.id,
            job_kind=job_kind,
            correlation_secret=self.secret,
            feedback=feedback,
            force=force,
            section=section,
        )
        task = asyncio.get_running_loop().create_task(self._deliver(job))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.info("Dispatched %s job %s for %s", job_kind.value, job.job_id, target.id)
        message = "Cover regeneration started" if job_kind == JobKind.COVER else "Narration started"
        if feedback:
            message += " with your feedback applied"
        return DispatchResult(status="accepted", job_id=job.job_id, job_kind=job_kind, message=message)

    async def _deliver(self, job: DerivedAssetJob) -> None:
        url = f"{self.executor_url}/{job.job_kind.value}"
        try:
            async with client_scope(self._client, None) as client:
                resp = await client.post(
                    url,
                    json=job.to_payload(),
                    headers={self.header_name: job.correlation_secret},
                    timeout=None,
                )
        except Exception:
            logger.exception(
                "Failed to trigger %s job %s for %s", job.job_kind.value, job.job_id, job.target_entity_id
            )
            return

        if resp.is_success:
            logger.info("Executor accepted %s job %s (%s)", job.job_kind.value, job.job_id, resp.status_code)
        else:
            logger.warning(
                "Executor rejected %s job %s for %s: %s %s",
                job.job_kind.value,
                job.job_id,
                job.target_entity_id,
                resp.status_code,
                resp.text[:500],
            )

    async def drain(self) -> None:
        """Wait for in-flight deliveries (used at shutdown and in tests)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def cancel_pending(self) -> None:
        for task in list(self._tasks):
            task.cancel()


__all__ = ["REQUIRED_ROLE", "authorize", "validate_target", "AssetDispatcher"]
