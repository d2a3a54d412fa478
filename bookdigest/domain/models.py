"""Core domain objects for documents, callers and derived-asset jobs."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import Any

_FILENAME_EXT_RE = re.compile(r"\.(pdf|epub|txt)$", re.IGNORECASE)
_FILENAME_SEP_RE = re.compile(r"\s*(?:-+|—|–|_)\s*")

UNKNOWN_AUTHORS = frozenset({"unknown", "unknown author", "n/a", "na"})


def parse_title_author_from_filename(filename: str) -> tuple[str, str | None]:
    """Infer ``(title, author)`` from names like ``"Deep Work - Cal Newport.pdf"``.

    The last separated part is taken as the author. Without a separator the
    whole stem is the title and the author is unknown.
    """
    base = _FILENAME_EXT_RE.sub("", filename).strip()
    parts = [p.strip() for p in _FILENAME_SEP_RE.split(base) if p.strip()]
    if len(parts) >= 2:
        author = parts.pop()
        title = " - ".join(parts)
        return title or base, author or None
    return base or "Untitled", None


def is_known_author(author: str | None) -> bool:
    """False for empty or placeholder author names."""
    normalized = (author or "").strip().lower()
    return bool(normalized) and normalized not in UNKNOWN_AUTHORS


@dataclass
class Document:
    """An uploaded text blob plus the metadata known about it.

    Lives only for the duration of one request.
    """

    text: str
    title: str | None = None
    author: str | None = None
    filename: str | None = None
    byte_size: int | None = None

    @property
    def extension(self) -> str:
        if not self.filename:
            return ""
        return PurePath(self.filename).suffix.lower()

    @classmethod
    def from_upload(
        cls,
        text: str,
        filename: str,
        byte_size: int | None = None,
        title: str | None = None,
        author: str | None = None,
    ) -> "Document":
        """Build a document, filling title/author from the filename when missing."""
        parsed_title, parsed_author = parse_title_author_from_filename(filename)
        return cls(
            text=text,
            title=title or parsed_title,
            author=author or parsed_author,
            filename=filename,
            byte_size=byte_size if byte_size is not None else len(text.encode("utf-8")),
        )


class Role(str, Enum):
    REGULAR = "regular"
    EDITOR = "editor"


@dataclass
class Principal:
    """Caller identity supplied by the external identity provider."""

    user_id: str
    role: Role = Role.REGULAR

    @property
    def is_editor(self) -> bool:
        return self.role == Role.EDITOR


class JobKind(str, Enum):
    COVER = "cover"
    AUDIO = "audio"


@dataclass
class AssetTarget:
    """The stored entity a derived asset is generated for (usually a book)."""

    id: str
    title: str | None = None
    author: str | None = None
    owner_id: str | None = None
    description: str | None = None
    category: str | None = None
    cover_url: str | None = None
    summary: dict[str, Any] | None = None
    archived_covers: list[dict[str, Any]] = field(default_factory=list)
    audio_urls: dict[str, str] = field(default_factory=dict)


@dataclass
class DerivedAssetJob:
    """A request for the background executor to build one asset."""

    target_entity_id: str
    job_kind: JobKind
    correlation_secret: str
    feedback: str | None = None
    force: bool = True
    section: str | None = None
    job_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def to_payload(self) -> dict[str, Any]:
        """JSON body sent to the executor."""
        payload: dict[str, Any] = {
            "targetId": self.target_entity_id,
            "force": self.force,
            "feedback": self.feedback,
        }
        if self.section is not None:
            payload["section"] = self.section
        return payload


@dataclass
class DispatchResult:
    """Returned to the requester as soon as a job is handed off."""

    status: str
    job_id: str
    job_kind: JobKind
    message: str = ""


__all__ = [
    "UNKNOWN_AUTHORS",
    "parse_title_author_from_filename",
    "is_known_author",
    "Document",
    "Role",
    "Principal",
    "JobKind",
    "AssetTarget",
    "DerivedAssetJob",
    "DispatchResult",
]
