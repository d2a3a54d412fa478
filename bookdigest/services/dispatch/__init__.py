"""Derived-asset job dispatch (sender) and background execution (receiver)."""

from .asset_dispatcher import AssetDispatcher, authorize, validate_target
from .background_jobs import (
    BackgroundJobRequest,
    BackgroundJobRunner,
    CoverJobHandler,
    JobOutcome,
    NarrationJobHandler,
    build_cover_prompt,
    verify_dispatch_secret,
)

__all__ = [
    "AssetDispatcher",
    "authorize",
    "validate_target",
    "BackgroundJobRequest",
    "BackgroundJobRunner",
    "CoverJobHandler",
    "JobOutcome",
    "NarrationJobHandler",
    "build_cover_prompt",
    "verify_dispatch_secret",
]
