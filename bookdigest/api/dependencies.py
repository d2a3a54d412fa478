"""FastAPI dependency providers for services and external collaborators."""

import logging
from functools import lru_cache

from fastapi import Depends, Header, Request

from bookdigest.api.errors import to_http_exception
from bookdigest.config.settings import (
    api_settings,
    dispatch_settings,
    elevenlabs_settings,
)
from bookdigest.domain.exceptions import ConfigError
from bookdigest.domain.models import JobKind, Principal, Role
from bookdigest.llm_infrastructure.image_generation import BaseImageClient
from bookdigest.llm_infrastructure.image_generation.clients import OpenAIImagesClient
from bookdigest.services.dispatch import (
    AssetDispatcher,
    BackgroundJobRunner,
    CoverJobHandler,
    NarrationJobHandler,
    verify_dispatch_secret,
)
from bookdigest.services.ingest import DocumentAnalysisService
from bookdigest.services.model_catalog_service import ModelCatalogService
from bookdigest.services.ports import BookRepository
from bookdigest.services.speech_service import SpeechService
from bookdigest.services.storage import AssetStore, DriveUploader
from bookdigest.services.structured_summary_service import StructuredSummaryService
from bookdigest.services.summary_expansion_service import SummaryExpansionService
from bookdigest.services.summary_pipeline_service import SummaryPipelineService

logger = logging.getLogger(__name__)

_book_repository: BookRepository | None = None


class _NotConfiguredBookRepository:
    """Fallback repository that raises a helpful error."""

    def _fail(self, *_: object, **__: object):
        msg = (
            "Book repository is not configured. "
            "Provide one via set_book_repository() or a dependency override."
        )
        raise ConfigError(msg)

    async def get_book(self, *args: object, **kwargs: object):
        self._fail()

    async def save_summary(self, *args: object, **kwargs: object):
        self._fail()

    async def update_cover(self, *args: object, **kwargs: object):
        self._fail()

    async def record_narration(self, *args: object, **kwargs: object):
        self._fail()


def set_book_repository(repository: BookRepository | None) -> None:
    """Wire the deployment's book repository (called at startup)."""
    global _book_repository
    _book_repository = repository


def get_book_repository() -> BookRepository:
    """Provide the book repository (override in tests)."""
    return _book_repository or _NotConfiguredBookRepository()  # type: ignore[return-value]


def get_current_principal(request: Request) -> Principal | None:
    """Caller identity.

    Identity comes from the deployment's auth layer. With
    ``API_TRUST_IDENTITY_HEADERS`` enabled, an upstream proxy passes it in
    ``X-User-Id`` / ``X-User-Role``; otherwise callers are anonymous unless
    this dependency is overridden.
    """
    if not api_settings.trust_identity_headers:
        return None
    user_id = request.headers.get("x-user-id")
    if not user_id:
        return None
    role = Role.EDITOR if request.headers.get("x-user-role") == Role.EDITOR.value else Role.REGULAR
    return Principal(user_id=user_id, role=role)


def get_dispatch_secret() -> str:
    """Shared secret expected from the background executor."""
    return dispatch_settings.secret


def require_dispatch_secret(
    request: Request,
    x_import_secret: str | None = Header(default=None),
    expected: str = Depends(get_dispatch_secret),
) -> None:
    """Reject server-to-server calls without the shared secret.

    Used as a route dependency so the check runs before the body is parsed.
    """
    try:
        verify_dispatch_secret(x_import_secret, expected)
    except Exception as exc:
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
        raise to_http_exception(exc) from exc


@lru_cache
def get_model_catalog_service() -> ModelCatalogService:
    return ModelCatalogService.from_settings()


@lru_cache
def get_summary_pipeline_service() -> SummaryPipelineService:
    return SummaryPipelineService.from_settings()


@lru_cache
def get_structured_summary_service() -> StructuredSummaryService:
    return StructuredSummaryService.from_settings()


@lru_cache
def get_summary_expansion_service() -> SummaryExpansionService:
    return SummaryExpansionService.from_settings()


@lru_cache
def get_speech_service() -> SpeechService:
    return SpeechService.from_settings()


@lru_cache
def get_document_analysis_service() -> DocumentAnalysisService:
    return DocumentAnalysisService.from_settings()


@lru_cache
def get_asset_dispatcher() -> AssetDispatcher:
    """Single dispatcher per process so in-flight tasks stay referenced."""
    return AssetDispatcher.from_settings()


@lru_cache
def get_image_client() -> BaseImageClient:
    return OpenAIImagesClient.from_settings()


@lru_cache
def get_asset_store() -> AssetStore:
    return AssetStore.from_settings()


@lru_cache
def get_drive_uploader() -> DriveUploader:
    return DriveUploader.from_settings()


def get_background_runner(
    repository: BookRepository = Depends(get_book_repository),
    image_client: BaseImageClient = Depends(get_image_client),
    asset_store: AssetStore = Depends(get_asset_store),
    speech: SpeechService = Depends(get_speech_service),
) -> BackgroundJobRunner:
    """Build the job runner from the current collaborators."""
    return BackgroundJobRunner(
        {
            JobKind.COVER: CoverJobHandler(repository, image_client, asset_store),
            JobKind.AUDIO: NarrationJobHandler(
                repository,
                speech,
                asset_store,
                default_voice_id=elevenlabs_settings.voice_id,
                default_model_id=elevenlabs_settings.model_id,
            ),
        }
    )
