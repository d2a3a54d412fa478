"""Helpers for growing a summary towards a target word count.

Raw-text summaries are rewritten in one request. Structured summaries are
grown one section at a time, shortest section (relative to its target)
first. The orchestration lives in ``SummaryExpansionService``; everything
here is pure and synchronous.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from bookdigest.llm_infrastructure.chunking import strip_overlap
from bookdigest.llm_infrastructure.text_quality import count_words

PROMPT_DIR = Path(__file__).parent / "prompts"

DEFAULT_TARGET_WORDS = 10_000

# Per-item minimums at DEFAULT_TARGET_WORDS; scaled linearly for other targets.
SECTION_BASE_TARGETS: dict[str, int] = {
    "quick_summary": 1500,
    "key_ideas": 1200,
    "chapters": 1500,
    "actionable_insights": 400,
    "quotes": 250,
}

_STANDARD_KEYS = frozenset(
    {"short_summary", "quick_summary", "key_ideas", "chapters", "actionable_insights", "quotes", "ai_provider"}
)


@dataclass
class ExpansionTarget:
    """One section (or list item) that is shorter than its target."""

    section: str
    current_words: int
    target_words: int
    content: str
    item_index: int | None = None

    @property
    def ratio(self) -> float:
        return self.current_words / max(self.target_words, 1)

    def describe(self, summary: dict[str, Any]) -> str:
        if self.section == "quick_summary":
            return "quick summary"
        position = (self.item_index or 0) + 1
        if self.section in ("key_ideas", "chapters"):
            items = summary.get(self.section) or []
            item = items[self.item_index] if self.item_index is not None and self.item_index < len(items) else {}
            noun = "key idea" if self.section == "key_ideas" else "chapter"
            fallback = f"idea {position}" if self.section == "key_ideas" else f"chapter {position}"
            title = item.get("title") if isinstance(item, dict) else None
            return f'{noun} "{title or fallback}"'
        if self.section == "actionable_insights":
            return f"actionable insight {position}"
        return f"quote {position}"


def is_raw_text(summary: dict[str, Any]) -> bool:
    return isinstance(summary.get("raw_text"), str)


def count_summary_words(summary: dict[str, Any]) -> int:
    """Words in the readable parts of a summary of any accepted shape.

    ``short_summary`` and ``ai_provider`` are not counted. Unknown keys count
    when they hold a string or a list of strings.
    """
    if is_raw_text(summary):
        return count_words(summary["raw_text"])

    total = 0
    if isinstance(summary.get("quick_summary"), str):
        total += count_words(summary["quick_summary"])
    for key, body in (("key_ideas", "text"), ("chapters", "summary")):
        for item in summary.get(key) or []:
            if isinstance(item, dict):
                total += count_words(item.get("title") if isinstance(item.get("title"), str) else None)
                total += count_words(item.get(body) if isinstance(item.get(body), str) else None)
    for key in ("actionable_insights", "quotes"):
        for item in summary.get(key) or []:
            if isinstance(item, str):
                total += count_words(item)

    for key, value in summary.items():
        if key in _STANDARD_KEYS:
            continue
        if isinstance(value, str):
            total += count_words(value)
        elif isinstance(value, list):
            total += sum(count_words(item) for item in value if isinstance(item, str))
    return total


def scaled_targets(target_word_count: int) -> dict[str, int]:
    factor = target_word_count / DEFAULT_TARGET_WORDS
    return {section: round(base * factor) for section, base in SECTION_BASE_TARGETS.items()}


def find_sections_to_expand(
    summary: dict[str, Any],
    target_word_count: int = DEFAULT_TARGET_WORDS,
) -> list[ExpansionTarget]:
    """Sections below their scaled minimum, most under-length first."""
    targets = scaled_targets(target_word_count)
    found: list[ExpansionTarget] = []

    quick = summary.get("quick_summary")
    if isinstance(quick, str):
        words = count_words(quick)
        if words < targets["quick_summary"]:
            found.append(ExpansionTarget("quick_summary", words, targets["quick_summary"], quick))

    for section, body in (("key_ideas", "text"), ("chapters", "summary")):
        items = summary.get(section)
        if not isinstance(items, list):
            continue
        for index, item in enumerate(items):
            content = item.get(body) if isinstance(item, dict) else None
            if not isinstance(content, str):
                continue
            words = count_words(content)
            if words < targets[section]:
                found.append(ExpansionTarget(section, words, targets[section], content, index))

    for section in ("actionable_insights", "quotes"):
        items = summary.get(section)
        if not isinstance(items, list):
            continue
        for index, item in enumerate(items):
            if not isinstance(item, str):
                continue
            words = count_words(item)
            if words < targets[section]:
                found.append(ExpansionTarget(section, words, targets[section], item, index))

    found.sort(key=lambda target: target.ratio)
    return found


def apply_expansion(summary: dict[str, Any], target: ExpansionTarget, text: str) -> dict[str, Any]:
    """Return a copy of ``summary`` with ``target``'s content replaced by ``text``."""
    updated = copy.deepcopy(summary)
    if target.section == "quick_summary":
        updated["quick_summary"] = text
    elif target.section == "key_ideas":
        updated["key_ideas"][target.item_index]["text"] = text
    elif target.section == "chapters":
        updated["chapters"][target.item_index]["summary"] = text
    else:
        updated[target.section][target.item_index] = text
    return updated


def load_expansion_prompts(version: str = "v1") -> dict[str, Any]:
    path = PROMPT_DIR / f"expansion_{version}.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Prompt file not found: {path}")
    with path.open(encoding="utf-8") as f:
        return yaml.safe_load(f)


def reference_excerpt(original_text: str, limit: int) -> str:
    excerpt = original_text[:limit]
    return f"{excerpt}..." if len(original_text) > limit else excerpt


def build_raw_expansion_messages(
    prompts: dict[str, Any],
    summary_text: str,
    original_text: str,
    *,
    current_words: int,
    target_words: int,
    reference_chars: int = 5000,
) -> list[dict[str, str]]:
    content = prompts["raw_text"].format(
        current_words=current_words,
        target_words=target_words,
        summary=summary_text,
        reference=reference_excerpt(original_text, reference_chars),
    )
    return [{"role": "user", "content": content.strip()}]


def build_section_messages(
    prompts: dict[str, Any],
    summary: dict[str, Any],
    target: ExpansionTarget,
    original_text: str,
    *,
    title: str | None = None,
    author: str | None = None,
    reference_chars: int = 5000,
) -> list[dict[str, str]]:
    instructions = prompts["instructions"][target.section].format(
        current_words=target.current_words,
        target_words=target.target_words,
    )
    header = "\n".join(
        line for line in (f"Book Title: {title}" if title else "", f"Book Author: {author}" if author else "") if line
    )
    content = prompts["section"].format(
        description=target.describe(summary),
        current_words=target.current_words,
        content=target.content,
        instructions=instructions.strip(),
        header=header,
        reference=reference_excerpt(original_text, reference_chars),
    )
    return [{"role": "user", "content": content.strip()}]


def join_continuation(existing: str, addition: str) -> str:
    """Append a continuation, dropping text the model repeated from ``existing``."""
    addition = strip_overlap(existing, addition).strip()
    if not addition:
        return existing
    if not existing:
        return addition
    separator = "\n\n" if existing.rstrip().endswith((".", "!", "?", '"', ":")) and addition[:1].isupper() else " "
    return existing.rstrip() + separator + addition


__all__ = [
    "DEFAULT_TARGET_WORDS",
    "SECTION_BASE_TARGETS",
    "ExpansionTarget",
    "apply_expansion",
    "build_raw_expansion_messages",
    "build_section_messages",
    "count_summary_words",
    "find_sections_to_expand",
    "is_raw_text",
    "join_continuation",
    "load_expansion_prompts",
    "reference_excerpt",
    "scaled_targets",
]
