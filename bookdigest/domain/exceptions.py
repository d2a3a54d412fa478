"""Domain exceptions shared by engines, services and the API layer.

Every error carries a human-readable ``message`` and an optional ``details``
mapping. The API layer maps each class to one HTTP status in
``bookdigest/api/errors.py``.
"""

from __future__ import annotations

from typing import Any


class DigestError(Exception):
    """Base exception for the book digest pipeline."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class ConfigError(DigestError):
    """A required credential or endpoint is not configured."""


class ValidationError(DigestError):
    """Input failed validation before any side effect happened."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field


class UpstreamError(DigestError):
    """An external service was unreachable, timed out, or answered non-2xx."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code
        self.body = body


class AuthorizationError(DigestError):
    """Caller is not allowed to perform the operation.

    ``unauthenticated`` distinguishes "who are you?" (401) from
    "you may not do this" (403).
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        unauthenticated: bool = False,
    ) -> None:
        super().__init__(message, details)
        self.unauthenticated = unauthenticated


class NotFoundError(DigestError):
    """Referenced entity does not exist."""


__all__ = [
    "DigestError",
    "ConfigError",
    "ValidationError",
    "UpstreamError",
    "AuthorizationError",
    "NotFoundError",
]
