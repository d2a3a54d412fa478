"""Model catalog service: lists OpenRouter models usable for summaries."""

from __future__ import annotations

import logging

from bookdigest.llm_infrastructure.llm.catalog import ModelDescriptor, build_catalog
from bookdigest.llm_infrastructure.llm.engines.openrouter import OpenRouterClient

logger = logging.getLogger(__name__)


class ModelCatalogService:
    def __init__(self, client: OpenRouterClient) -> None:
        self._client = client

    @classmethod
    def from_settings(cls) -> "ModelCatalogService":
        return cls(OpenRouterClient.from_settings())

    async def list_models(self) -> list[ModelDescriptor]:
        """Text-capable models, prices per million tokens, sorted by id.

        Raises:
            ConfigError: No API key is configured (no request is made).
            UpstreamError: The catalog is unreachable or answered non-2xx.
        """
        entries = await self._client.list_models()
        catalog = build_catalog(entries)
        logger.info("Model catalog: %d of %d entries kept", len(catalog), len(entries))
        return catalog


__all__ = ["ModelCatalogService"]
