"""OpenAI images API client used for book cover generation.

Usage:
    from bookdigest.llm_infrastructure.image_generation import get_image_client

    client = get_image_client("openai_images", api_key="sk-...")
    image = await client.generate("A flat vector book cover ...")
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any

import httpx

from bookdigest.config.settings import ImageSettings, image_settings
from bookdigest.domain.exceptions import ConfigError, UpstreamError
from bookdigest.llm_infrastructure.http_client import client_scope, ensure_success, transport_error
from bookdigest.llm_infrastructure.image_generation.base import (
    BaseImageClient,
    GeneratedImage,
    detect_mime_type,
)
from bookdigest.llm_infrastructure.image_generation.registry import register_image_client

logger = logging.getLogger(__name__)

SERVICE_NAME = "OpenAI images"


@register_image_client("openai_images", version="v1")
class OpenAIImagesClient(BaseImageClient):
    """Client for ``POST /images/generations`` returning ``b64_json`` data."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-image-1",
        size: str = "1024x1536",
        timeout: float = 180.0,
        client: httpx.AsyncClient | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(base_url=base_url, model=model, size=size, timeout=timeout, **kwargs)
        self.api_key = api_key or ""
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.size = size
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: ImageSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> "OpenAIImagesClient":
        settings = settings or image_settings
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url,
            model=settings.image_model,
            size=settings.image_size,
            timeout=settings.timeout,
            client=client,
        )

    async def generate(self, prompt: str, *, size: str | None = None, **kwargs: Any) -> GeneratedImage:
        if not self.api_key:
            raise ConfigError("OPENAI_API_KEY is not configured")

        payload = {"model": self.model, "prompt": prompt, "size": size or self.size, **kwargs}
        async with client_scope(self._client, self.timeout) as client:
            try:
                resp = await client.post(
                    f"{self.base_url}/images/generations",
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    timeout=self.timeout,
                )
            except httpx.HTTPError as exc:
                logger.error("OpenAI image request failed: %s", exc)
                raise transport_error(SERVICE_NAME, exc) from exc

        ensure_success(SERVICE_NAME, resp)
        try:
            b64 = resp.json()["data"][0]["b64_json"]
            data = base64.b64decode(b64)
        except (KeyError, IndexError, TypeError, ValueError, binascii.Error) as exc:
            raise UpstreamError(
                "OpenAI did not return image bytes. Check that the model supports base64 output.",
                status_code=resp.status_code,
                body=resp.text[:500],
            ) from exc

        return GeneratedImage(data=data, mime_type=detect_mime_type(data), model=self.model)


__all__ = ["OpenAIImagesClient"]
