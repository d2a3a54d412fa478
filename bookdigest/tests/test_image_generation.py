"""Tests for the OpenAI images client used for cover generation."""

from __future__ import annotations

import base64
import json
import sys
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bookdigest.domain.exceptions import ConfigError, UpstreamError  # noqa: E402
from bookdigest.llm_infrastructure.image_generation import get_image_client  # noqa: E402
from bookdigest.llm_infrastructure.image_generation.base import detect_mime_type  # noqa: E402

PNG = b"\x89PNG\r\n\x1a\nrest"


def _client_for(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_detect_mime_type():
    assert detect_mime_type(PNG) == "image/png"
    assert detect_mime_type(b"\xff\xd8\xff\xe0") == "image/jpeg"
    assert detect_mime_type(b"RIFF\0\0\0\0WEBPVP8 ") == "image/webp"
    assert detect_mime_type(b"unknown") == "image/png"


@pytest.mark.asyncio
async def test_generate_decodes_base64_image():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": [{"b64_json": base64.b64encode(PNG).decode()}]})

    client = get_image_client(
        "openai_images", api_key="sk-test", base_url="https://img.test/v1", client=_client_for(handler)
    )
    image = await client.generate("A flat vector cover")

    assert image.data == PNG
    assert image.mime_type == "image/png"
    assert seen["url"] == "https://img.test/v1/images/generations"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"] == {"model": "gpt-image-1", "prompt": "A flat vector cover", "size": "1024x1536"}


@pytest.mark.asyncio
async def test_generate_without_key_raises_config_error():
    client = get_image_client("openai_images", api_key="")
    with pytest.raises(ConfigError):
        await client.generate("prompt")


@pytest.mark.asyncio
async def test_generate_without_image_bytes_raises_upstream_error():
    def handler(request):
        return httpx.Response(200, json={"data": [{"url": "https://img.test/1.png"}]})

    client = get_image_client("openai_images", api_key="sk-test", client=_client_for(handler))
    with pytest.raises(UpstreamError, match="did not return image bytes"):
        await client.generate("prompt")


@pytest.mark.asyncio
async def test_generate_non_success_raises_upstream_error():
    def handler(request):
        return httpx.Response(400, text="content policy")

    client = get_image_client("openai_images", api_key="sk-test", client=_client_for(handler))
    with pytest.raises(UpstreamError) as exc_info:
        await client.generate("prompt")
    assert exc_info.value.status_code == 400
