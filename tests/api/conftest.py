from pathlib import Path
from typing import Any

import sys

import httpx
import pytest
from fastapi.testclient import TestClient

# Put the project root on PYTHONPATH for the bookdigest imports
ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from bookdigest.api import dependencies
from bookdigest.api.main import create_app
from bookdigest.domain.models import AssetTarget, Principal, Role
from bookdigest.llm_infrastructure.image_generation import BaseImageClient, GeneratedImage
from bookdigest.llm_infrastructure.llm.base import BaseLLM, LLMResponse
from bookdigest.llm_infrastructure.llm.catalog import ModelDescriptor
from bookdigest.llm_infrastructure.speech import BaseSpeechSynthesizer, SpeechAudio, media_type_for
from bookdigest.llm_infrastructure.summarization import validate_summary
from bookdigest.llm_infrastructure.summarization.adapters import StructuredSummarizer
from bookdigest.services.dispatch import AssetDispatcher
from bookdigest.services.ports import InMemoryBookRepository
from bookdigest.services.speech_service import SpeechService
from bookdigest.services.storage import AssetStore, DriveUploader
from bookdigest.services.structured_summary_service import StructuredSummaryService
from bookdigest.services.summary_expansion_service import SummaryExpansionService
from bookdigest.services.summary_pipeline_service import SummaryOutcome

SECRET = "test-secret"
EDITOR = Principal(user_id="editor-1", role=Role.EDITOR)


class FakeCatalogService:
    def __init__(self) -> None:
        self.error: Exception | None = None

    async def list_models(self):
        if self.error is not None:
            raise self.error
        return [
            ModelDescriptor(
                id="anthropic/claude-3.5-sonnet",
                name="Claude 3.5 Sonnet",
                pricing={"prompt": "3.00", "completion": "15.00"},
                context_length=200000,
            ),
            ModelDescriptor(id="openai/gpt-4o", name="GPT-4o"),
        ]


class FakeSummaryPipeline:
    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    async def summarize(self, document, *, model=None, custom_prompt=None):
        self.calls.append({"document": document, "model": model, "custom_prompt": custom_prompt})
        selected = model or "openai/gpt-4o"
        summary = validate_summary(
            {"raw_text": f"Summary of {document.title}", "ai_provider": f"OpenRouter ({selected})"}
        )
        return SummaryOutcome(summary=summary, chunk_count=2, failed_chunks=[], word_count=3)


class ScriptedLLM(BaseLLM):
    """Replies with queued responses, then with ``fallback``."""

    def __init__(self, model: str = "scripted-model") -> None:
        super().__init__(model=model)
        self.replies: list[LLMResponse] = []
        self.fallback = "More words."
        self.calls: list[dict[str, Any]] = []

    def queue(self, text: str, finish_reason: str = "stop") -> None:
        self.replies.append(LLMResponse(text=text, model=self.default_model, finish_reason=finish_reason))

    async def generate(self, messages, **kwargs):
        self.calls.append({"messages": list(messages), **kwargs})
        if self.replies:
            return self.replies.pop(0)
        return LLMResponse(text=self.fallback, model=self.default_model, finish_reason="stop")


class FakeSynth(BaseSpeechSynthesizer):
    def __init__(self) -> None:
        super().__init__()
        self.texts: list[str] = []

    async def synthesize(self, text, *, voice_id=None, model_id=None, output_format=None):
        self.texts.append(text)
        return SpeechAudio(
            audio=b"ID3-" + str(len(self.texts)).encode(),
            voice_id=voice_id or "default-voice",
            model_id=model_id or "default-model",
            output_format=output_format or "mp3_44100_128",
            media_type=media_type_for(output_format),
        )


class FakeImageClient(BaseImageClient):
    def __init__(self) -> None:
        super().__init__(model="fake")
        self.prompts: list[str] = []

    async def generate(self, prompt, *, size=None, **kwargs):
        self.prompts.append(prompt)
        return GeneratedImage(data=b"\x89PNG\r\n\x1a\n", mime_type="image/png", model="fake")


class FakeAssetStore(AssetStore):
    def __init__(self) -> None:
        super().__init__(client=None, bucket="book-files", public_base_url="https://cdn.test/book-files")
        self.objects: dict[str, tuple[bytes, str]] = {}

    async def put(self, object_name, data, content_type):
        self.objects[object_name] = (data, content_type)
        return self.public_url(object_name)


class Recorder:
    """Collects requests seen by a MockTransport handler."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []


class Identity:
    def __init__(self) -> None:
        self.principal: Principal | None = EDITOR


def _books() -> list[AssetTarget]:
    return [
        AssetTarget(
            id="book-1",
            title="Deep Work",
            author="Cal Newport",
            owner_id="owner-1",
            summary={"raw_text": "Deep work is valuable."},
        ),
        AssetTarget(id="book-anon", title="Mystery", author="Unknown"),
    ]


@pytest.fixture
def identity():
    return Identity()


@pytest.fixture
def repository():
    return InMemoryBookRepository(_books())


@pytest.fixture
def catalog_service():
    return FakeCatalogService()


@pytest.fixture
def summary_pipeline():
    return FakeSummaryPipeline()


@pytest.fixture
def chat_llm():
    return ScriptedLLM()


@pytest.fixture
def structured_llm():
    return ScriptedLLM(model="gpt-4o")


@pytest.fixture
def synth():
    return FakeSynth()


@pytest.fixture
def image_client():
    return FakeImageClient()


@pytest.fixture
def asset_store():
    return FakeAssetStore()


@pytest.fixture
def executor():
    recorder = Recorder()

    def handler(request):
        recorder.requests.append(request)
        return httpx.Response(202, json={"ok": True})

    dispatcher = AssetDispatcher(
        executor_url="https://exec.test/background",
        secret=SECRET,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    return dispatcher, recorder


@pytest.fixture
def drive():
    recorder = Recorder()

    def handler(request):
        recorder.requests.append(request)
        if request.method == "GET":
            return httpx.Response(200, content=b"\x89PNGcover")
        return httpx.Response(200, json={"id": "drive-file-1", "webViewLink": "https://drive.test/1"})

    uploader = DriveUploader(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    return uploader, recorder


@pytest.fixture
def client(
    identity,
    repository,
    catalog_service,
    summary_pipeline,
    chat_llm,
    structured_llm,
    synth,
    image_client,
    asset_store,
    executor,
    drive,
):
    app = create_app()
    dispatcher, _ = executor
    uploader, _ = drive
    overrides = {
        dependencies.get_current_principal: lambda: identity.principal,
        dependencies.get_book_repository: lambda: repository,
        dependencies.get_dispatch_secret: lambda: SECRET,
        dependencies.get_model_catalog_service: lambda: catalog_service,
        dependencies.get_summary_pipeline_service: lambda: summary_pipeline,
        dependencies.get_structured_summary_service: lambda: StructuredSummaryService(
            StructuredSummarizer(llm=structured_llm)
        ),
        dependencies.get_summary_expansion_service: lambda: SummaryExpansionService(
            chat_llm, min_word_count=50, section_delay=0
        ),
        dependencies.get_speech_service: lambda: SpeechService(synth, max_chars_per_request=100),
        dependencies.get_asset_dispatcher: lambda: dispatcher,
        dependencies.get_image_client: lambda: image_client,
        dependencies.get_asset_store: lambda: asset_store,
        dependencies.get_drive_uploader: lambda: uploader,
    }
    app.dependency_overrides.update(overrides)
    with TestClient(app) as test_client:
        yield test_client

