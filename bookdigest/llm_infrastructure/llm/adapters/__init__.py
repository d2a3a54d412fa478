"""LLM adapters registered in the LLM registry."""

from .openai import OpenAIAdapter
from .openrouter import OpenRouterAdapter

__all__ = ["OpenAIAdapter", "OpenRouterAdapter"]
