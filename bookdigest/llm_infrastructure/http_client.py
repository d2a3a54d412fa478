"""Shared httpx helpers for engines that talk to external HTTP APIs.

Engines accept an injected ``httpx.AsyncClient`` (tests pass one backed by
``httpx.MockTransport``); without one, a short-lived client is opened per call.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx

from bookdigest.domain.exceptions import UpstreamError


@asynccontextmanager
async def client_scope(
    client: httpx.AsyncClient | None,
    timeout: float | None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a fresh one that is closed afterwards."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=timeout) as owned:
        yield owned


def transport_error(service: str, exc: httpx.HTTPError) -> UpstreamError:
    """Wrap an httpx transport failure (including timeouts)."""
    if isinstance(exc, httpx.TimeoutException):
        return UpstreamError(f"{service} request timed out", details={"error": str(exc)})
    return UpstreamError(f"{service} is unreachable: {exc}", details={"error": str(exc)})


def ensure_success(service: str, response: httpx.Response, body: str | None = None) -> None:
    """Raise UpstreamError carrying status and body for a non-2xx response."""
    if response.is_success:
        return
    if body is None:
        body = response.text
    raise UpstreamError(
        f"{service} error: {response.status_code} {response.reason_phrase} - {body}",
        status_code=response.status_code,
        body=body,
    )


__all__ = ["client_scope", "transport_error", "ensure_success"]
