"""OpenAI chat completions engine over httpx."""

from __future__ import annotations

import logging
from typing import Any, Iterable

import httpx

from bookdigest.config.settings import OpenAISettings, openai_settings
from bookdigest.domain.exceptions import ConfigError, UpstreamError
from bookdigest.llm_infrastructure.http_client import client_scope, ensure_success, transport_error

from ..base import LLMResponse

logger = logging.getLogger(__name__)

SERVICE_NAME = "OpenAI"


class OpenAIChatClient:
    """``POST /chat/completions`` against the OpenAI API.

    Extra keyword arguments (``response_format``, ``max_tokens`` ...) are
    passed through in the request body.
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o",
        temperature: float = 0.35,
        timeout: float = 300.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key or ""
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: OpenAISettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> "OpenAIChatClient":
        settings = settings or openai_settings
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url,
            model=settings.summary_model,
            temperature=settings.temperature,
            timeout=settings.timeout,
            client=client,
        )

    async def chat(
        self,
        messages: Iterable[dict[str, str]],
        *,
        model: str | None = None,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        if not self.api_key:
            raise ConfigError("OpenAI client is not configured. Set OPENAI_API_KEY.")
        selected = model or self.model
        payload: dict[str, Any] = {
            "model": selected,
            "messages": list(messages),
            "temperature": temperature if temperature is not None else self.temperature,
        }
        payload.update(kwargs)

        async with client_scope(self._client, self.timeout) as client:
            try:
                resp = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    timeout=self.timeout,
                )
            except httpx.HTTPError as exc:
                raise transport_error(SERVICE_NAME, exc) from exc

        ensure_success(SERVICE_NAME, resp)
        data = resp.json()
        choices = data.get("choices") if isinstance(data, dict) else None
        choice = choices[0] if isinstance(choices, list) and choices else {}
        text = (choice.get("message") or {}).get("content") if isinstance(choice, dict) else None
        if not text:
            raise UpstreamError(
                "OpenAI did not return any summary content.",
                status_code=resp.status_code,
                body=resp.text,
            )
        logger.info("OpenAI %s returned %d characters", selected, len(text))
        return LLMResponse(
            text=text.strip(),
            model=selected,
            finish_reason=choice.get("finish_reason"),
            raw=data,
        )


__all__ = ["OpenAIChatClient"]
