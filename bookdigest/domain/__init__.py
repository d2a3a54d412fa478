"""Domain objects and exceptions."""

from .exceptions import (
    AuthorizationError,
    ConfigError,
    DigestError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from .models import (
    AssetTarget,
    DerivedAssetJob,
    DispatchResult,
    Document,
    JobKind,
    Principal,
    Role,
)

__all__ = [
    "AuthorizationError",
    "ConfigError",
    "DigestError",
    "NotFoundError",
    "UpstreamError",
    "ValidationError",
    "AssetTarget",
    "DerivedAssetJob",
    "DispatchResult",
    "Document",
    "JobKind",
    "Principal",
    "Role",
]
