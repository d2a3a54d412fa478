"""Google Drive uploads using a caller-supplied OAuth access token."""

from __future__ import annotations

import json
import logging
import secrets
from dataclasses import dataclass

import httpx

from bookdigest.config.settings import DriveSettings, drive_settings
from bookdigest.domain.exceptions import UpstreamError, ValidationError
from bookdigest.llm_infrastructure.http_client import client_scope, transport_error
from bookdigest.llm_infrastructure.image_generation.base import detect_mime_type

logger = logging.getLogger(__name__)


@dataclass
class DriveFile:
    file_id: str
    web_view_link: str


def build_multipart_related(
    data: bytes,
    file_name: str,
    folder_id: str,
    mime_type: str = "image/png",
    boundary: str | None = None,
) -> tuple[bytes, str]:
    """Build a Drive ``multipart/related`` body.

    Returns ``(body, content_type)``. The JSON metadata part comes first,
    followed by the raw file bytes.
    """
    boundary = boundary or f"----WebKitFormBoundary{secrets.token_hex(8)}"
    metadata = json.dumps({"name": file_name, "parents": [folder_id]})
    body = b"".join(
        [
            f"--{boundary}\r\nContent-Type: application/json; charset=UTF-8\r\n\r\n{metadata}\r\n".encode("utf-8"),
            f"--{boundary}\r\nContent-Type: {mime_type}\r\n\r\n".encode("utf-8"),
            data,
            f"\r\n--{boundary}--\r\n".encode("utf-8"),
        ]
    )
    return body, f"multipart/related; boundary={boundary}"


class DriveUploader:
    def __init__(
        self,
        upload_url: str = "https://www.googleapis.com/upload/drive/v3/files",
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.upload_url = upload_url
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: DriveSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> "DriveUploader":
        settings = settings or drive_settings
        return cls(upload_url=settings.upload_url, timeout=settings.timeout, client=client)

    async def download(self, url: str) -> bytes:
        """Fetch source bytes (e.g. a stored cover) before uploading them."""
        async with client_scope(self._client, self.timeout) as client:
            try:
                resp = await client.get(url, timeout=self.timeout)
            except httpx.HTTPError as exc:
                raise transport_error("Image download", exc) from exc
        if not resp.is_success:
            raise UpstreamError(
                f"Failed to download image: {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text[:500],
            )
        return resp.content

    async def upload(
        self,
        data: bytes,
        file_name: str,
        folder_id: str,
        access_token: str,
        mime_type: str | None = None,
    ) -> DriveFile:
        """Upload ``data``; the MIME type is sniffed from the bytes unless given."""
        if not access_token:
            raise ValidationError("A Drive access token is required", field="driveAccessToken")
        if not folder_id:
            raise ValidationError("A Drive folder id is required", field="folderId")

        mime_type = mime_type or detect_mime_type(data)
        body, content_type = build_multipart_related(data, file_name, folder_id, mime_type)
        async with client_scope(self._client, self.timeout) as client:
            try:
                resp = await client.post(
                    self.upload_url,
                    params={"uploadType": "multipart", "fields": "id,webViewLink"},
                    content=body,
                    headers={
                        "Authorization": f"Bearer {access_token}",
                        "Content-Type": content_type,
                    },
                    timeout=self.timeout,
                )
            except httpx.HTTPError as exc:
                raise transport_error("Google Drive", exc) from exc

        if not resp.is_success:
            raise UpstreamError(
                f"Google Drive upload failed: {resp.status_code} {resp.reason_phrase} - {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )

        result = resp.json()
        file_id = str(result.get("id", ""))
        logger.info("Uploaded %s to Drive folder %s as %s", file_name, folder_id, file_id)
        return DriveFile(
            file_id=file_id,
            web_view_link=result.get("webViewLink") or f"https://drive.google.com/file/d/{file_id}/view",
        )


__all__ = ["DriveFile", "DriveUploader", "build_multipart_related"]
