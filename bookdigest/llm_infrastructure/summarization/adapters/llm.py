"""LLM-based summarization adapter."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from bookdigest.llm_infrastructure.llm import get_llm
from bookdigest.llm_infrastructure.llm.base import BaseLLM

from ..base import BaseSummarizer, SummaryResult
from ..registry import register_summarizer


# Prompt directory
PROMPT_DIR = Path(__file__).parent.parent / "prompts"


def _load_prompt(name: str, version: str = "v1") -> dict[str, str]:
    """Load prompt from YAML file."""
    path = PROMPT_DIR / f"{name}_{version}.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Prompt file not found: {path}")
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    user = ""
    for msg in data.get("messages", []):
        if msg.get("role") == "user":
            user = msg.get("content", "")
            break
    return {
        "system": data.get("system", ""),
        "user": user,
        "custom_suffix": data.get("custom_suffix", ""),
    }


def _header(title: str | None, author: str | None) -> str:
    lines = []
    if title:
        lines.append(f"Title: {title}")
    if author:
        lines.append(f"Author: {author}")
    return "\n".join(lines)


@register_summarizer("llm", version="v1")
class LLMSummarizer(BaseSummarizer):
    """Prose summarizer backed by any registered LLM (OpenRouter by default)."""

    def __init__(
        self,
        llm: BaseLLM | None = None,
        llm_method: str = "openrouter",
        llm_version: str = "v1",
        prompt_name: str = "summary",
        prompt_version: str = "v1",
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.prompt_name = prompt_name
        self.prompt_version = prompt_version
        self._prompt = _load_prompt(prompt_name, prompt_version)
        self._llm: BaseLLM = llm or get_llm(llm_method, version=llm_version)

    def build_messages(
        self,
        text: str,
        *,
        title: str | None = None,
        author: str | None = None,
        custom_prompt: str | None = None,
        part: tuple[int, int] | None = None,
    ) -> list[dict[str, str]]:
        """Default prompt = system + user; a custom prompt is sent as a lone user turn."""
        if custom_prompt:
            content = f"{custom_prompt}{self._prompt['custom_suffix']}\n\n{text}"
            return [{"role": "user", "content": content}]

        part_label = ""
        if part is not None and part[1] > 1:
            part_label = f" (part {part[0] + 1} of {part[1]})"
        user_content = self._prompt["user"].format(
            header=_header(title, author),
            part_label=part_label,
            chunk_text=text,
        ).strip()
        return [
            {"role": "system", "content": self._prompt["system"]},
            {"role": "user", "content": user_content},
        ]

    async def summarize(
        self,
        text: str,
        *,
        title: str | None = None,
        author: str | None = None,
        model: str | None = None,
        custom_prompt: str | None = None,
        part: tuple[int, int] | None = None,
        **kwargs: Any,
    ) -> SummaryResult:
        messages = self.build_messages(
            text, title=title, author=author, custom_prompt=custom_prompt, part=part
        )
        if model:
            kwargs["model"] = model
        response = await self._llm.generate(messages, **kwargs)
        return SummaryResult(
            original_text=text,
            summary=response.text,
            provider=response.model,
            metadata={"part": part},
        )


__all__ = ["LLMSummarizer"]
