"""Concrete LLM engine clients."""

from .openai_chat import OpenAIChatClient
from .openrouter import OpenRouterClient

__all__ = ["OpenAIChatClient", "OpenRouterClient"]
