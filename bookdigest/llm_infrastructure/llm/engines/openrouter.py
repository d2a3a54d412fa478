"""OpenRouter engine: model catalog and chat completions over httpx."""

from __future__ import annotations

import logging
from typing import Any, Iterable

import httpx

from bookdigest.config.settings import OpenRouterSettings, openrouter_settings
from bookdigest.domain.exceptions import ConfigError, UpstreamError
from bookdigest.llm_infrastructure.http_client import client_scope, ensure_success, transport_error

from ..base import LLMResponse

logger = logging.getLogger(__name__)

SERVICE_NAME = "OpenRouter"


class OpenRouterClient:
    """Thin async client for the OpenRouter REST API.

    Credentials are checked before any request is made, so a missing key
    surfaces as ``ConfigError`` without touching the network.
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://openrouter.ai/api/v1",
        model: str = "openai/gpt-4o",
        temperature: float = 0.35,
        timeout: float = 30.0,
        chat_timeout: float = 300.0,
        site_url: str | None = None,
        app_title: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key or ""
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self.chat_timeout = chat_timeout
        self.site_url = site_url
        self.app_title = app_title
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: OpenRouterSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> "OpenRouterClient":
        settings = settings or openrouter_settings
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url,
            model=settings.default_model,
            temperature=settings.temperature,
            timeout=settings.timeout,
            chat_timeout=settings.summary_timeout,
            site_url=settings.site_url,
            app_title=settings.app_title,
            client=client,
        )

    def _require_key(self) -> None:
        if not self.api_key:
            raise ConfigError("OpenRouter API key not configured")

    def _headers(self, *, attribution: bool = False) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if attribution:
            if self.site_url:
                headers["HTTP-Referer"] = self.site_url
            if self.app_title:
                headers["X-Title"] = self.app_title
        return headers

    async def list_models(self) -> list[dict[str, Any]]:
        """Fetch raw catalog entries (``data`` array of GET /models)."""
        self._require_key()
        url = f"{self.base_url}/models"
        async with client_scope(self._client, self.timeout) as client:
            try:
                resp = await client.get(url, headers=self._headers(), timeout=self.timeout)
            except httpx.HTTPError as exc:
                raise transport_error(SERVICE_NAME, exc) from exc

        ensure_success(SERVICE_NAME, resp)
        try:
            payload = resp.json()
        except ValueError as exc:
            raise UpstreamError(
                "OpenRouter returned a non-JSON model list",
                status_code=resp.status_code,
                body=resp.text,
            ) from exc

        data = payload.get("data") if isinstance(payload, dict) else None
        return data if isinstance(data, list) else []

    async def chat(
        self,
        messages: Iterable[dict[str, str]],
        *,
        model: str | None = None,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """POST /chat/completions and return the first choice's text."""
        self._require_key()
        selected = model or self.model
        payload: dict[str, Any] = {
            "model": selected,
            "messages": list(messages),
            "temperature": temperature if temperature is not None else self.temperature,
        }
        # Allow extra OpenAI-compatible params
        payload.update(kwargs)

        url = f"{self.base_url}/chat/completions"
        async with client_scope(self._client, self.chat_timeout) as client:
            try:
                resp = await client.post(
                    url,
                    json=payload,
                    headers=self._headers(attribution=True),
                    timeout=self.chat_timeout,
                )
            except httpx.HTTPError as exc:
                raise transport_error(SERVICE_NAME, exc) from exc

        ensure_success(SERVICE_NAME, resp)
        data = resp.json()
        try:
            choice = data["choices"][0]
            text = choice["message"]["content"]
        except (KeyError, IndexError, TypeError):
            choice, text = {}, None
        if not text:
            raise UpstreamError(
                "OpenRouter did not return any content.",
                status_code=resp.status_code,
                body=resp.text,
            )
        logger.info("OpenRouter %s returned %d characters", selected, len(text))
        return LLMResponse(
            text=text.strip(),
            model=selected,
            finish_reason=choice.get("finish_reason"),
            raw=data,
        )


__all__ = ["OpenRouterClient"]
