"""Receiving side of derived-asset jobs: secret check and job handlers."""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Protocol

from bookdigest.domain.exceptions import AuthorizationError, ConfigError, NotFoundError, ValidationError
from bookdigest.domain.models import AssetTarget, JobKind, is_known_author
from bookdigest.llm_infrastructure.image_generation import BaseImageClient
from bookdigest.llm_infrastructure.summarization.sections import extract_section_text
from bookdigest.services.ports import BookRepository, narration_key
from bookdigest.services.speech_service import SpeechService
from bookdigest.services.storage.minio_client import (
    AssetStore,
    cover_object_path,
    narration_object_path,
)

logger = logging.getLogger(__name__)

GENERATED_COVER_MARKER = "generated-cover-"


def verify_dispatch_secret(provided: str | None, expected: str | None) -> None:
    """Reject the request before any job logic runs."""
    if not expected:
        raise ConfigError("Dispatch secret is not configured (DISPATCH_SECRET)")
    if not provided or not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise AuthorizationError("Unauthorized", unauthenticated=True)


@dataclass
class BackgroundJobRequest:
    target_id: str
    force: bool = False
    feedback: str | None = None
    section: str | None = None
    voice_id: str | None = None
    model_id: str | None = None


@dataclass
class JobOutcome:
    job_kind: JobKind
    target_id: str
    skipped: bool
    asset_url: str | None = None
    reason: str = ""


class JobHandler(Protocol):
    async def run(self, request: BackgroundJobRequest) -> JobOutcome: ...


def is_generated_cover_url(url: str | None) -> bool:
    return bool(url) and GENERATED_COVER_MARKER in url


def build_cover_prompt(
    title: str,
    author: str,
    category: str | None = None,
    description: str | None = None,
    feedback: str | None = None,
) -> str:
    lines = [
        "Design an original, simple cartoony book cover in a flat vector / icon style.",
        "Portrait 2:3 book cover composition (1024x1536), centered layout, clean margins, strong readability.",
        "Use a limited color palette (2-4 colors). Smooth shapes, minimal detail, no photorealism.",
        "Place a single bold icon/illustration in the center that hints at the theme.",
        "Typography: big, bold title near top; smaller author name near bottom. Keep text perfectly legible.",
        "No logos, no publisher marks, no trademarks.",
        "Do NOT copy or imitate any existing book cover art exactly.",
    ]
    if category:
        lines.append(f"Genre/category vibe: {category}.")
    if description:
        lines.append(f"Summary (for mood + icon idea): {description}")
    if feedback:
        lines.append(f"IMPORTANT CORRECTIONS/REQUIREMENTS: {feedback}")
    lines.append(f"Title text must appear exactly: {title}")
    lines.append(f"Author text must appear exactly: {author}")
    return "\n".join(lines)


async def _load(repository: BookRepository, target_id: str) -> AssetTarget:
    book = await repository.get_book(target_id)
    if book is None:
        raise NotFoundError(f"Book not found: {target_id}")
    return book


class CoverJobHandler:
    def __init__(
        self,
        repository: BookRepository,
        image_client: BaseImageClient,
        asset_store: AssetStore,
    ) -> None:
        self.repository = repository
        self.image_client = image_client
        self.asset_store = asset_store

    async def run(self, request: BackgroundJobRequest) -> JobOutcome:
        book = await _load(self.repository, request.target_id)

        def skip(reason: str) -> JobOutcome:
            logger.info("Cover job for %s skipped: %s", book.id, reason)
            return JobOutcome(JobKind.COVER, book.id, skipped=True, reason=reason)

        title = (book.title or "").strip()
        if not title:
            return skip("missing title")
        if not is_known_author(book.author):
            return skip("unknown author")
        if not request.force and is_generated_cover_url(book.cover_url):
            return skip("cover already generated")

        prompt = build_cover_prompt(
            title,
            (book.author or "").strip(),
            category=book.category,
            description=book.description,
            feedback=request.feedback,
        )
        image = await self.image_client.generate(prompt)

        archived: list[dict[str, Any]] = list(book.archived_covers)
        if is_generated_cover_url(book.cover_url):
            reason = "Regenerated"
            if request.feedback:
                reason = f"Regenerated with feedback: {request.feedback[:100]}"
            archived.append(
                {
                    "url": book.cover_url,
                    "archived_at": datetime.now(timezone.utc).isoformat(),
                    "reason": reason,
                }
            )

        url = await self.asset_store.put(
            cover_object_path(book.id, book.owner_id), image.data, image.mime_type
        )
        await self.repository.update_cover(book.id, url, archived)
        logger.info("Generated cover for %s: %s", book.id, url)
        return JobOutcome(JobKind.COVER, book.id, skipped=False, asset_url=url)


class NarrationJobHandler:
    def __init__(
        self,
        repository: BookRepository,
        speech: SpeechService,
        asset_store: AssetStore,
        default_voice_id: str = "21m00Tcm4TlvDq8ikWAM",
        default_model_id: str = "eleven_multilingual_v2",
    ) -> None:
        self.repository = repository
        self.speech = speech
        self.asset_store = asset_store
        self.default_voice_id = default_voice_id
        self.default_model_id = default_model_id

    async def run(self, request: BackgroundJobRequest) -> JobOutcome:
        book = await _load(self.repository, request.target_id)
        section = request.section or "quick_summary"
        voice_id = request.voice_id or self.default_voice_id
        model_id = request.model_id or self.default_model_id

        cached = book.audio_urls.get(narration_key(voice_id, model_id, section))
        if cached and not request.force:
            return JobOutcome(JobKind.AUDIO, book.id, skipped=True, asset_url=cached, reason="cached")

        text = extract_section_text(book.summary, section, title=book.title)
        audio = await self.speech.narrate(text, voice_id=voice_id, model_id=model_id)
        url = await self.asset_store.put(
            narration_object_path(book.id, voice_id, model_id, section),
            audio.audio,
            audio.media_type,
        )
        await self.repository.record_narration(book.id, section, voice_id, model_id, url)
        logger.info("Narrated %s/%s (%d bytes)", book.id, section, len(audio.audio))
        return JobOutcome(JobKind.AUDIO, book.id, skipped=False, asset_url=url)


class BackgroundJobRunner:
    """Routes a verified job to its handler."""

    def __init__(self, handlers: dict[JobKind, JobHandler]) -> None:
        self.handlers = handlers

    async def run(self, job_kind: JobKind, request: BackgroundJobRequest) -> JobOutcome:
        handler = self.handlers.get(job_kind)
        if handler is None:
            raise ValidationError(f"No handler for job kind: {job_kind.value}", field="job_kind")
        return await handler.run(request)

    async def run_logged(self, job_kind: JobKind, request: BackgroundJobRequest) -> None:
        """Entry point for background execution, where nobody awaits the result."""
        try:
            outcome = await self.run(job_kind, request)
        except Exception:
            logger.exception("Background %s job for %s failed", job_kind.value, request.target_id)
            return
        logger.info(
            "Background %s job for %s finished (skipped=%s)",
            job_kind.value,
            outcome.target_id,
            outcome.skipped,
        )


__all__ = [
    "verify_dispatch_secret",
    "BackgroundJobRequest",
    "JobOutcome",
    "is_generated_cover_url",
    "build_cover_prompt",
    "CoverJobHandler",
    "NarrationJobHandler",
    "BackgroundJobRunner",
]
