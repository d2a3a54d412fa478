"""Normalization of the OpenRouter model catalog.

Raw entries are filtered to models that can produce text, per-token prices
are converted to per-million strings, and the result is sorted by id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

PER_MILLION = Decimal(1_000_000)
CENT = Decimal("0.01")


@dataclass
class ModelDescriptor:
    id: str
    name: str
    description: str | None = None
    pricing: dict[str, str] = field(default_factory=lambda: {"prompt": "0", "completion": "0"})
    context_length: int | None = None
    created: int | None = None
    architecture: dict[str, Any] | None = None
    top_provider: dict[str, Any] | None = None


def to_per_million(price: Any) -> str:
    """Convert a per-token price string to a per-million string with 2 decimals.

    ``"0.000002"`` -> ``"2.00"``. Missing or unparseable prices become ``"0"``.
    Decimal arithmetic keeps the result exact.
    """
    if price is None or price == "":
        return "0"
    try:
        amount = Decimal(str(price).strip())
    except InvalidOperation:
        return "0"
    if not amount.is_finite():
        return "0"
    return str((amount * PER_MILLION).quantize(CENT, rounding=ROUND_HALF_UP))


def supports_text_output(entry: dict[str, Any]) -> bool:
    """Entries must list "text" as an output modality and not be embeddings-only."""
    architecture = entry.get("architecture") or {}
    modalities = architecture.get("output_modalities") or []
    if not isinstance(modalities, list):
        return False
    return "text" in modalities and modalities != ["embeddings"]


def to_descriptor(entry: dict[str, Any]) -> ModelDescriptor:
    pricing = entry.get("pricing") or {}
    return ModelDescriptor(
        id=str(entry["id"]),
        name=entry.get("name") or str(entry["id"]),
        description=entry.get("description"),
        pricing={
            "prompt": to_per_million(pricing.get("prompt")),
            "completion": to_per_million(pricing.get("completion")),
        },
        context_length=entry.get("context_length"),
        created=entry.get("created"),
        architecture=entry.get("architecture"),
        top_provider=entry.get("top_provider"),
    )


def build_catalog(entries: Iterable[dict[str, Any]]) -> list[ModelDescriptor]:
    """Filter, normalize and sort raw catalog entries."""
    descriptors = [
        to_descriptor(entry)
        for entry in entries
        if isinstance(entry, dict) and entry.get("id") and supports_text_output(entry)
    ]
    return sorted(descriptors, key=lambda d: d.id)


__all__ = [
    "ModelDescriptor",
    "to_per_million",
    "supports_text_output",
    "to_descriptor",
    "build_catalog",
]
