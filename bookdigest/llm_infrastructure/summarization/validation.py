"""Cascading validation of summary payloads.

A payload is tried against each accepted shape in order and the first shape
that parses wins. The cascade is an ordered list of ``(shape, model)`` pairs,
so adding a shape means adding one entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from bookdigest.domain.exceptions import ValidationError

from .schemas import FlexibleSummary, RawTextSummary, StructuredSummary


class SummaryShape(str, Enum):
    RAW_TEXT = "raw_text"
    STRUCTURED = "structured"
    FLEXIBLE = "flexible"


@dataclass
class ValidatedSummary:
    """A payload that passed validation, tagged with the shape it matched."""

    shape: SummaryShape
    data: dict[str, Any]
    model: BaseModel

    @property
    def is_raw_text(self) -> bool:
        return self.shape == SummaryShape.RAW_TEXT


SUMMARY_CASCADE: list[tuple[SummaryShape, Type[BaseModel]]] = [
    (SummaryShape.RAW_TEXT, RawTextSummary),
    (SummaryShape.STRUCTURED, StructuredSummary),
    (SummaryShape.FLEXIBLE, FlexibleSummary),
]


def _error_details(exc: PydanticValidationError) -> list[dict[str, Any]]:
    return [
        {
            "loc": list(err.get("loc", ())),
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]


def _dump(model: BaseModel) -> dict[str, Any]:
    if isinstance(model, FlexibleSummary):
        return dict(model.root)
    return model.model_dump(exclude_none=True)


def validate_summary(
    payload: Any,
    cascade: list[tuple[SummaryShape, Type[BaseModel]]] | None = None,
) -> ValidatedSummary:
    """Return the first shape that accepts ``payload``.

    Raises:
        ValidationError: When no shape matches. Only the first shape's
            (raw-text) errors are reported, which is usually what a caller
            sending structured data did not intend to read.
    """
    cascade = cascade or SUMMARY_CASCADE
    first_error: PydanticValidationError | None = None

    for shape, model_cls in cascade:
        try:
            model = model_cls.model_validate(payload)
        except PydanticValidationError as exc:
            if first_error is None:
                first_error = exc
            continue
        return ValidatedSummary(shape=shape, data=_dump(model), model=model)

    details = {"errors": _error_details(first_error)} if first_error else {}
    raise ValidationError("Summary does not match any accepted format", details=details)


def parse_structured(payload: Any) -> StructuredSummary | None:
    """Strict structured parse, or None when the payload is another shape."""
    try:
        return StructuredSummary.model_validate(payload)
    except PydanticValidationError:
        return None


__all__ = [
    "SummaryShape",
    "ValidatedSummary",
    "SUMMARY_CASCADE",
    "validate_summary",
    "parse_structured",
]
