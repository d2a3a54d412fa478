"""Model catalog API."""

import logging
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from bookdigest.api.dependencies import get_model_catalog_service
from bookdigest.api.errors import to_http_exception
from bookdigest.services.model_catalog_service import ModelCatalogService

router = APIRouter(prefix="/models", tags=["Models"])
logger = logging.getLogger(__name__)


class ModelPricing(BaseModel):
    prompt: str = Field(..., description="USD per million prompt tokens")
    completion: str = Field(..., description="USD per million completion tokens")


class ModelInfo(BaseModel):
    id: str
    name: str
    description: str | None = None
    pricing: ModelPricing
    context_length: int | None = None
    created: int | None = None
    architecture: dict[str, Any] | None = None
    top_provider: dict[str, Any] | None = None


class ModelListResponse(BaseModel):
    models: list[ModelInfo]


@router.get("", response_model=ModelListResponse)
async def list_models(service: ModelCatalogService = Depends(get_model_catalog_service)):
    """Text-capable summarization models with per-million prices."""
    try:
        catalog = await service.list_models()
    except Exception as exc:
        logger.error("Failed to fetch model catalog: %s", exc)
        raise to_http_exception(exc) from exc
    return ModelListResponse(models=[ModelInfo(**asdict(m)) for m in catalog])


__all__ = ["router"]
