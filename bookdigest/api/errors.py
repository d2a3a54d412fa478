"""Mapping of domain exceptions to HTTP errors."""

from fastapi import HTTPException

from bookdigest.domain.exceptions import (
    AuthorizationError,
    ConfigError,
    DigestError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)


def status_for(exc: DigestError) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, AuthorizationError):
        return 401 if exc.unauthenticated else 403
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, UpstreamError):
        return 502
    if isinstance(exc, ConfigError):
        return 500
    return 500


def to_http_exception(exc: Exception) -> HTTPException:
    """Translate any exception raised by a service into an HTTPException."""
    if isinstance(exc, HTTPException):
        return exc
    if isinstance(exc, DigestError):
        detail = {"error": exc.message}
        if exc.details:
            detail["details"] = exc.details
        return HTTPException(status_code=status_for(exc), detail=detail)
    return HTTPException(status_code=500, detail=str(exc))
