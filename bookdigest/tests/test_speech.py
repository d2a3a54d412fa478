"""Tests for ElevenLabs synthesis, narration splitting and the speech service."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bookdigest.domain.exceptions import ConfigError, UpstreamError, ValidationError  # noqa: E402
from bookdigest.llm_infrastructure.speech import (  # noqa: E402
    BaseSpeechSynthesizer,
    SpeechRegistry,
    SpeechAudio,
    get_speech_synthesizer,
    media_type_for,
    register_speech_synthesizer,
    split_for_speech,
)
from bookdigest.llm_infrastructure.speech.engines import ElevenLabsClient  # noqa: E402
from bookdigest.services.speech_service import SpeechService  # noqa: E402


def _client_for(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class _RecordingSynth(BaseSpeechSynthesizer):
    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []
        self.formats: list[str | None] = []

    async def synthesize(self, text, *, voice_id=None, model_id=None, output_format=None):
        self.calls.append(text)
        self.formats.append(output_format)
        return SpeechAudio(
            audio=f"<{len(self.calls)}>".encode(),
            voice_id=voice_id or "default-voice",
            model_id=model_id or "default-model",
            output_format=output_format or "mp3_44100_128",
        )


# --- ElevenLabs engine ---


@pytest.mark.asyncio
async def test_synthesize_without_key_makes_no_request():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, content=b"")

    client = ElevenLabsClient(api_key="", client=_client_for(handler))
    with pytest.raises(ConfigError, match="ELEVENLABS_API_KEY"):
        await client.synthesize("Hello")
    assert calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   \n "])
async def test_synthesize_blank_text_makes_no_request(text):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, content=b"")

    client = ElevenLabsClient(api_key="xi-test", client=_client_for(handler))
    with pytest.raises(ValidationError, match="empty text"):
        await client.synthesize(text)
    assert calls == []


@pytest.mark.asyncio
async def test_synthesize_streams_audio_bytes():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("xi-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, content=b"ID3audio-bytes")

    client = ElevenLabsClient(
        api_key="xi-test",
        base_url="https://tts.test/v1",
        client=_client_for(handler),
    )
    audio = await client.synthesize("Hello world", voice_id="voice-1")

    assert audio == b"ID3audio-bytes"
    assert seen["url"] == "https://tts.test/v1/text-to-speech/voice-1/stream"
    assert seen["key"] == "xi-test"
    assert seen["body"] == {
        "model_id": "eleven_multilingual_v2",
        "output_format": "mp3_44100_128",
        "text": "Hello world",
        "voice_settings": {"similarity_boost": 0.65, "stability": 0.4, "style": 0.3},
    }


@pytest.mark.asyncio
async def test_synthesize_uses_default_voice():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        return httpx.Response(200, content=b"x")

    client = ElevenLabsClient(api_key="xi-test", client=_client_for(handler))
    await client.synthesize("Hi")
    assert seen["path"] == "/v1/text-to-speech/21m00Tcm4TlvDq8ikWAM/stream"


@pytest.mark.asyncio
async def test_synthesize_non_success_carries_status_and_body():
    def handler(request):
        return httpx.Response(401, text='{"detail": "invalid api key"}')

    client = ElevenLabsClient(api_key="bad", client=_client_for(handler))
    with pytest.raises(UpstreamError) as exc_info:
        await client.synthesize("Hello")
    assert exc_info.value.status_code == 401
    assert "invalid api key" in exc_info.value.body


@pytest.mark.asyncio
async def test_synthesize_timeout_raises_upstream_error():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    client = ElevenLabsClient(api_key="xi-test", client=_client_for(handler))
    with pytest.raises(UpstreamError, match="timed out"):
        await client.synthesize("Hello")


@pytest.mark.asyncio
async def test_adapter_reports_effective_voice_and_model():
    def handler(request):
        return httpx.Response(200, content=b"mp3")

    engine = ElevenLabsClient(api_key="xi-test", client=_client_for(handler))
    synth = get_speech_synthesizer("elevenlabs", engine=engine)
    result = await synth.synthesize("Hello", model_id="eleven_turbo_v2")

    assert result.audio == b"mp3"
    assert result.voice_id == "21m00Tcm4TlvDq8ikWAM"
    assert result.model_id == "eleven_turbo_v2"
    assert result.media_type == "audio/mpeg"


@pytest.mark.asyncio
async def test_adapter_media_type_follows_output_format():
    def handler(request):
        return httpx.Response(200, content=b"pcm")

    engine = ElevenLabsClient(api_key="xi-test", client=_client_for(handler))
    synth = get_speech_synthesizer("elevenlabs", engine=engine)
    result = await synth.synthesize("Hello", output_format="pcm_24000")

    assert result.output_format == "pcm_24000"
    assert result.media_type == "audio/pcm"


@pytest.mark.parametrize(
    "output_format,media_type",
    [
        ("mp3_44100_128", "audio/mpeg"),
        ("pcm_16000", "audio/pcm"),
        ("ulaw_8000", "audio/basic"),
        ("opus_48000_64", "audio/opus"),
        ("flac_44100", "application/octet-stream"),
        (None, "audio/mpeg"),
    ],
)
def test_media_type_for(output_format, media_type):
    assert media_type_for(output_format) == media_type


# --- splitting ---


def test_split_short_text_is_one_piece():
    assert split_for_speech("  Short text.  ", 100) == ["Short text."]


def test_split_empty_text():
    assert split_for_speech("  \n ", 100) == []


def test_split_packs_paragraphs():
    text = "\n\n".join(["a" * 40, "b" * 40, "c" * 40])
    pieces = split_for_speech(text, 90)
    assert pieces == ["a" * 40 + "\n\n" + "b" * 40, "c" * 40]


def test_split_long_paragraph_by_sentence():
    sentences = [f"Sentence number {i} is here." for i in range(10)]
    pieces = split_for_speech(" ".join(sentences), 60)
    assert all(len(p) <= 60 for p in pieces)
    assert " ".join(pieces) == " ".join(sentences)


def test_split_long_paragraph_after_short_one():
    short = "Intro paragraph."
    long_paragraph = " ".join(["Word " * 10 + "end."] * 5)
    pieces = split_for_speech(f"{short}\n\n{long_paragraph}", 80)
    assert pieces[0] == short
    assert all(len(p) <= 80 for p in pieces)


def test_split_hard_slices_oversized_sentence():
    pieces = split_for_speech("x" * 250, 100)
    assert pieces == ["x" * 100, "x" * 100, "x" * 50]


def test_split_never_exceeds_limit_on_mixed_text():
    text = ("Short one. " * 30 + "\n\n" + "y" * 700 + "\n\n" + "Tail sentence. " * 10).strip()
    pieces = split_for_speech(text, 200)
    assert pieces
    assert all(0 < len(p) <= 200 for p in pieces)


# --- service ---


@pytest.mark.asyncio
async def test_narrate_synthesizes_pieces_in_order_and_concatenates():
    synth = _RecordingSynth()
    service = SpeechService(synth, max_chars_per_request=50)
    text = "\n\n".join(["a" * 40, "b" * 40, "c" * 40])

    result = await service.narrate(text, voice_id="v", model_id="m")

    assert synth.calls == ["a" * 40, "b" * 40, "c" * 40]
    assert result.audio == b"<1><2><3>"
    assert (result.voice_id, result.model_id) == ("v", "m")


@pytest.mark.asyncio
async def test_narrate_empty_text_rejected():
    service = SpeechService(_RecordingSynth())
    with pytest.raises(ValidationError):
        await service.narrate("   ")


@pytest.mark.asyncio
async def test_synthesize_passes_text_through():
    synth = _RecordingSynth()
    service = SpeechService(synth)
    result = await service.synthesize("Hello", voice_id="v")
    assert synth.calls == ["Hello"]
    assert result.voice_id == "v"


@pytest.mark.asyncio
async def test_narrate_defaults_to_mp3():
    synth = _RecordingSynth()
    service = SpeechService(synth, max_chars_per_request=50)

    result = await service.narrate("\n\n".join(["a" * 40, "b" * 40]))

    assert synth.formats == ["mp3_44100_128", "mp3_44100_128"]
    assert result.output_format == "mp3_44100_128"
    assert result.media_type == "audio/mpeg"


@pytest.mark.asyncio
async def test_narrate_passes_requested_format_to_every_piece():
    synth = _RecordingSynth()
    service = SpeechService(synth, max_chars_per_request=50)

    result = await service.narrate("\n\n".join(["a" * 40, "b" * 40]), output_format="pcm_16000")

    assert synth.formats == ["pcm_16000", "pcm_16000"]
    assert result.output_format == "pcm_16000"
    assert result.media_type == "audio/pcm"


@pytest.mark.asyncio
@pytest.mark.parametrize("output_format", ["opus_48000_64", "wav_44100"])
async def test_narrate_rejects_formats_that_cannot_be_concatenated(output_format):
    synth = _RecordingSynth()
    service = SpeechService(synth, max_chars_per_request=50)

    with pytest.raises(ValidationError, match="cannot be used for long narration"):
        await service.narrate("\n\n".join(["a" * 40, "b" * 40]), output_format=output_format)
    assert synth.calls == []


def test_speech_registry_lists_and_rejects():
    assert SpeechRegistry.list_methods()["elevenlabs"] == ["v1"]

    with pytest.raises(ValueError, match=r"No speech backend polly/v1; registered: .*elevenlabs/v1"):
        get_speech_synthesizer("polly")
    with pytest.raises(ValueError, match="elevenlabs/v1 is already registered"):

        @register_speech_synthesizer("elevenlabs", version="v1")
        class _Duplicate(_RecordingSynth):
            pass
