"""OpenRouter adapter registered in the LLM registry."""

from __future__ import annotations

from typing import Any, Iterable

from ..base import BaseLLM, LLMResponse
from ..engines.openrouter import OpenRouterClient
from ..registry import register_llm


@register_llm("openrouter", version="v1")
class OpenRouterAdapter(BaseLLM):
    def __init__(
        self,
        engine: OpenRouterClient | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        timeout: float | None = None,
        client: Any | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        if engine is None:
            engine = OpenRouterClient.from_settings(client=client)
            if api_key is not None:
                engine.api_key = api_key
            if base_url is not None:
                engine.base_url = base_url.rstrip("/")
            if model is not None:
                engine.model = model
            if temperature is not None:
                engine.temperature = temperature
            if timeout is not None:
                engine.chat_timeout = timeout
        self.engine = engine

    @property
    def default_model(self) -> str:
        return self.engine.model

    async def generate(
        self,
        messages: Iterable[dict[str, str]],
        **kwargs: Any,
    ) -> LLMResponse:
        return await self.engine.chat(messages, **kwargs)


__all__ = ["OpenRouterAdapter"]
