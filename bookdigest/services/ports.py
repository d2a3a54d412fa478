"""Collaborator interfaces the services depend on.

Persistence of books lives outside this project; deployments plug in their
own repository. ``InMemoryBookRepository`` backs the demo and tests.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Protocol

from bookdigest.domain.exceptions import NotFoundError
from bookdigest.domain.models import AssetTarget


class BookRepository(Protocol):
    async def get_book(self, book_id: str) -> AssetTarget | None: ...

    async def save_summary(self, book_id: str, summary: dict[str, Any]) -> None: ...

    async def update_cover(
        self, book_id: str, cover_url: str, archived_covers: list[dict[str, Any]]
    ) -> None: ...

    async def record_narration(
        self, book_id: str, section: str, voice_id: str, model_id: str, audio_url: str
    ) -> None: ...


def narration_key(voice_id: str, model_id: str, section: str) -> str:
    return f"voice:{voice_id}|model:{model_id}|section:{section}"


class InMemoryBookRepository:
    """Dict-backed repository."""

    def __init__(self, books: list[AssetTarget] | None = None) -> None:
        self._books: dict[str, AssetTarget] = {b.id: b for b in books or []}

    def add(self, book: AssetTarget) -> None:
        self._books[book.id] = book

    def _require(self, book_id: str) -> AssetTarget:
        book = self._books.get(book_id)
        if book is None:
            raise NotFoundError(f"Book not found: {book_id}")
        return book

    async def get_book(self, book_id: str) -> AssetTarget | None:
        book = self._books.get(book_id)
        return deepcopy(book) if book is not None else None

    async def save_summary(self, book_id: str, summary: dict[str, Any]) -> None:
        self._require(book_id).summary = deepcopy(summary)

    async def update_cover(
        self, book_id: str, cover_url: str, archived_covers: list[dict[str, Any]]
    ) -> None:
        book = self._require(book_id)
        book.cover_url = cover_url
        book.archived_covers = list(archived_covers)

    async def record_narration(
        self, book_id: str, section: str, voice_id: str, model_id: str, audio_url: str
    ) -> None:
        book = self._require(book_id)
        book.audio_urls[narration_key(voice_id, model_id, section)] = audio_url


__all__ = ["BookRepository", "InMemoryBookRepository", "narration_key"]
