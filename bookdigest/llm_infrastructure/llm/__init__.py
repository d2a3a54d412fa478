"""LLM engines, clients and the model catalog."""

from .base import BaseLLM, LLMResponse
from .catalog import ModelDescriptor, build_catalog, to_per_million
from .registry import LLMRegistry, get_llm, register_llm

# Trigger adapter registration side effects
from . import adapters  # noqa: F401

__all__ = [
    "BaseLLM",
    "LLMResponse",
    "LLMRegistry",
    "get_llm",
    "register_llm",
    "ModelDescriptor",
    "build_catalog",
    "to_per_million",
]
