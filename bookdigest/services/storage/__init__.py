"""Storage service module for object storage and Drive uploads."""

from .drive_upload import DriveFile, DriveUploader, build_multipart_related
from .minio_client import (
    AssetStore,
    cover_object_path,
    ensure_bucket,
    get_minio_client,
    narration_object_path,
    sanitize_id,
    upload_bytes,
)

__all__ = [
    "AssetStore",
    "cover_object_path",
    "ensure_bucket",
    "get_minio_client",
    "narration_object_path",
    "sanitize_id",
    "upload_bytes",
    "DriveFile",
    "DriveUploader",
    "build_multipart_related",
]
