"""Summarizer adapters registered in the summarizer registry."""

from .llm import LLMSummarizer
from .structured import StructuredSummarizer

__all__ = ["LLMSummarizer", "StructuredSummarizer"]
