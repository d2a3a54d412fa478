"""OpenAI adapter registered in the LLM registry."""

from __future__ import annotations

from typing import Any, Iterable

from ..base import BaseLLM, LLMResponse
from ..engines.openai_chat import OpenAIChatClient
from ..registry import register_llm


@register_llm("openai", version="v1")
class OpenAIAdapter(BaseLLM):
    def __init__(
        self,
        engine: OpenAIChatClient | None = None,
        client: Any | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.engine = engine or OpenAIChatClient.from_settings(client=client)

    @property
    def default_model(self) -> str:
        return self.engine.model

    async def generate(
        self,
        messages: Iterable[dict[str, str]],
        **kwargs: Any,
    ) -> LLMResponse:
        return await self.engine.chat(messages, **kwargs)


__all__ = ["OpenAIAdapter"]
