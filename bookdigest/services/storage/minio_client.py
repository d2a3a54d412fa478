"""MinIO client utilities for derived asset storage.

This module provides functions for:
- Connecting to MinIO
- Building object paths for generated covers and narrations
- Uploading bytes and building their public URLs
"""

import asyncio
import io
import logging
import re
from functools import lru_cache
from urllib.parse import urlparse

from minio import Minio
from minio.error import S3Error

from bookdigest.config.settings import MinioSettings, minio_settings
from bookdigest.domain.exceptions import UpstreamError

logger = logging.getLogger(__name__)


def sanitize_id(value: str) -> str:
    """Replace characters that are unsafe in object paths with underscores."""
    return re.sub(r"[^a-zA-Z0-9._-]", "_", value)


def cover_object_path(book_id: str, owner_id: str | None = None) -> str:
    """``covers/{owner}/generated-cover-{book}.png`` (owner omitted when unknown)."""
    safe_book = sanitize_id(book_id)
    filename = f"generated-cover-{safe_book}.png"
    if owner_id:
        return f"covers/{sanitize_id(owner_id)}/{filename}"
    return f"covers/{filename}"


def narration_object_path(book_id: str, voice_id: str, model_id: str, section: str) -> str:
    """``narrations/{book}/{voice}/{model}/{section}.mp3``"""
    parts = [sanitize_id(p) for p in (book_id, voice_id, model_id)]
    return "narrations/{}/{}/{}/{}.mp3".format(*parts, sanitize_id(section))


@lru_cache(maxsize=1)
def get_minio_client() -> Minio:
    """Get a cached MinIO client instance."""
    # Parse endpoint to extract host and port
    parsed = urlparse(minio_settings.endpoint)
    endpoint = parsed.netloc or parsed.path

    logger.info("Creating MinIO client for endpoint: %s", endpoint)

    return Minio(
        endpoint=endpoint,
        access_key=minio_settings.access_key,
        secret_key=minio_settings.secret_key,
        secure=minio_settings.secure,
    )


def ensure_bucket(client: Minio, bucket: str) -> bool:
    """Ensure the bucket exists, create if not."""
    try:
        if not client.bucket_exists(bucket):
            client.make_bucket(bucket)
            logger.info("Created bucket: %s", bucket)
        return True
    except S3Error as e:
        logger.error("Failed to ensure bucket %s: %s", bucket, e)
        return False


def upload_bytes(
    client: Minio,
    bucket: str,
    data: bytes,
    object_name: str,
    content_type: str = "image/png",
) -> str | None:
    """Upload bytes; returns the object name, or None on an S3 error."""
    try:
        ensure_bucket(client, bucket)
        client.put_object(
            bucket_name=bucket,
            object_name=object_name,
            data=io.BytesIO(data),
            length=len(data),
            content_type=content_type,
        )
        logger.debug("Uploaded object: %s/%s", bucket, object_name)
        return object_name
    except S3Error as e:
        logger.error("Failed to upload %s: %s", object_name, e)
        return None


class AssetStore:
    """Async facade over the blocking MinIO SDK.

    SDK calls run in a worker thread so the event loop keeps serving
    requests while large audio files upload.
    """

    def __init__(
        self,
        client: Minio | None = None,
        bucket: str = "book-files",
        public_base_url: str = "",
    ) -> None:
        self._client = client
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: MinioSettings | None = None) -> "AssetStore":
        settings = settings or minio_settings
        base = settings.public_base_url or f"{settings.endpoint.rstrip('/')}/{settings.bucket}"
        return cls(bucket=settings.bucket, public_base_url=base)

    @property
    def client(self) -> Minio:
        if self._client is None:
            self._client = get_minio_client()
        return self._client

    def public_url(self, object_name: str) -> str:
        return f"{self.public_base_url}/{object_name}"

    async def put(self, object_name: str, data: bytes, content_type: str) -> str:
        """Store ``data`` and return its public URL."""
        stored = await asyncio.to_thread(
            upload_bytes, self.client, self.bucket, data, object_name, content_type
        )
        if stored is None:
            raise UpstreamError(f"Failed to upload {object_name} to object storage")
        return self.public_url(stored)


__all__ = [
    "sanitize_id",
    "cover_object_path",
    "narration_object_path",
    "get_minio_client",
    "ensure_bucket",
    "upload_bytes",
    "AssetStore",
]
