"""Turning a stored summary into narratable text for one section."""

from __future__ import annotations

from typing import Any

from bookdigest.domain.exceptions import ValidationError

NARRATION_SECTIONS: dict[str, str] = {
    "quick_summary": "Quick Summary",
    "short_summary": "Short Summary",
    "full_summary": "Full Summary",
    "key_ideas": "Key Ideas",
    "chapters": "Chapters",
    "actionable_insights": "Insights",
    "quotes": "Quotes",
    "ai_provider": "AI Provider",
}


def _items(summary: dict[str, Any], key: str) -> list[Any]:
    value = summary.get(key)
    return value if isinstance(value, list) else []


def _pairs(summary: dict[str, Any], key: str, body: str) -> list[tuple[str, str]]:
    return [
        (str(item.get("title", "")), str(item.get(body, "")))
        for item in _items(summary, key)
        if isinstance(item, dict)
    ]


def _full_summary(summary: dict[str, Any], title: str | None) -> str:
    parts: list[str] = []
    if title:
        parts.append(f"Title: {title}")
    parts.append(f"Quick Summary\n{summary.get('quick_summary', '')}")
    parts.append(f"Short Summary\n{summary.get('short_summary', '')}")

    ideas = _pairs(summary, "key_ideas", "text")
    if ideas:
        parts.append(
            "Key Ideas\n" + "\n".join(f"{i}. {t}. {x}" for i, (t, x) in enumerate(ideas, 1))
        )
    chapters = _pairs(summary, "chapters", "summary")
    if chapters:
        parts.append(
            "Chapters\n" + "\n\n".join(f"{i}. {t}\n{x}" for i, (t, x) in enumerate(chapters, 1))
        )
    insights = _items(summary, "actionable_insights")
    if insights:
        parts.append("Insights\n" + "\n".join(f"{i}. {x}" for i, x in enumerate(insights, 1)))
    quotes = _items(summary, "quotes")
    if quotes:
        parts.append("Quotes\n" + "\n".join(f"{i}. {q}" for i, q in enumerate(quotes, 1)))
    return "\n\n".join(parts)


def extract_section_text(
    summary: dict[str, Any] | None,
    section: str,
    title: str | None = None,
) -> str:
    """Return the text to narrate for ``section``.

    Raw-text summaries have a single body, so every section narrates it.
    Flexible summaries have no known sections and are rejected.
    """
    if section not in NARRATION_SECTIONS:
        raise ValidationError(f"Invalid section: {section}", field="section")
    if not isinstance(summary, dict):
        raise ValidationError("Book has no summary to narrate", field="summary")

    raw_text = summary.get("raw_text")
    if isinstance(raw_text, str):
        return raw_text

    if not isinstance(summary.get("quick_summary"), str):
        raise ValidationError("Cannot extract section text from this summary format")

    if section == "full_summary":
        return _full_summary(summary, title)
    if section == "key_ideas":
        return "\n".join(f"{t}: {x}" for t, x in _pairs(summary, "key_ideas", "text"))
    if section == "chapters":
        return "\n".join(f"{t}: {x}" for t, x in _pairs(summary, "chapters", "summary"))
    if section in ("actionable_insights", "quotes"):
        return "\n".join(str(item) for item in _items(summary, section))
    if section == "ai_provider":
        return summary.get("ai_provider") or "Unknown"
    return str(summary.get(section) or "")


__all__ = ["NARRATION_SECTIONS", "extract_section_text"]
