"""Application settings using Pydantic Settings.

Configuration is loaded from:
1. Environment variables (highest priority)
2. .env file
3. Default values (lowest priority)

Settings objects are created once at import time and handed to engines and
services explicitly (see ``bookdigest/api/dependencies.py``); nothing below the
API layer reads the environment on its own.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OpenRouterSettings(BaseSettings):
    """OpenRouter (model catalog + chat completions) settings.

    Environment variables use prefix OPENROUTER_
    Example: OPENROUTER_API_KEY=sk-or-...
    """
    model_config = SettingsConfigDict(
        env_prefix="OPENROUTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    api_key: str = Field(
        default="",
        description="OpenRouter API key (bearer credential)"
    )
    base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="OpenRouter API base URL"
    )
    default_model: str = Field(
        default="openai/gpt-4o",
        validation_alias=AliasChoices("OPENROUTER_MODEL", "OPENROUTER_DEFAULT_MODEL"),
        description="Model used when the caller does not pick one"
    )
    temperature: float = Field(
        default=0.35,
        description="Sampling temperature for summary generation"
    )
    timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for catalog requests"
    )
    summary_timeout: float = Field(
        default=300.0,
        description="Timeout in seconds for a single chat completion"
    )
    site_url: str = Field(
        default="http://localhost:3000",
        validation_alias=AliasChoices("OPENROUTER_SITE_URL", "NEXT_PUBLIC_SITE_URL"),
        description="Value sent as HTTP-Referer"
    )
    app_title: str = Field(
        default="BookDigest",
        description="Value sent as X-Title"
    )


class ElevenLabsSettings(BaseSettings):
    """ElevenLabs text-to-speech settings.

    Environment variables use prefix ELEVENLABS_
    Example: ELEVENLABS_VOICE_ID=21m00Tcm4TlvDq8ikWAM
    """
    model_config = SettingsConfigDict(
        env_prefix="ELEVENLABS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str = Field(
        default="",
        description="ElevenLabs API key (sent as xi-api-key)"
    )
    voice_id: str = Field(
        default="21m00Tcm4TlvDq8ikWAM",
        description="Default voice identifier"
    )
    model_id: str = Field(
        default="eleven_multilingual_v2",
        description="Default speech model identifier"
    )
    output_format: str = Field(
        default="mp3_44100_128",
        description="Audio output format"
    )
    base_url: str = Field(
        default="https://api.elevenlabs.io/v1",
        description="ElevenLabs API base URL"
    )
    timeout: float = Field(
        default=120.0,
        description="Timeout in seconds for one synthesis request"
    )
    max_chars_per_request: int = Field(
        default=4500,
        description="Longest text sent in one synthesis request"
    )


class DispatchSettings(BaseSettings):
    """Derived-asset job dispatch settings.

    The shared secret is read from DISPATCH_SECRET, falling back to
    GOOGLE_DRIVE_IMPORT_SECRET for older deployments.
    """
    model_config = SettingsConfigDict(
        env_prefix="DISPATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    secret: str = Field(
        default="",
        validation_alias=AliasChoices("DISPATCH_SECRET", "GOOGLE_DRIVE_IMPORT_SECRET"),
        description="Shared secret sent in the x-import-secret header"
    )
    executor_url: str = Field(
        default="",
        description="Base URL of the background executor (job kind is appended)"
    )
    header_name: str = Field(
        default="x-import-secret",
        description="Header carrying the shared secret"
    )


class SummarizationSettings(BaseSettings):
    """Summary pipeline settings.

    Environment variables use prefix SUMMARY_
    Example: SUMMARY_CHUNK_SIZE=6000
    """
    model_config = SettingsConfigDict(
        env_prefix="SUMMARY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    chunk_method: str = Field(
        default="sliding_window",
        description="Chunker name from the chunker registry"
    )
    chunk_size: int = Field(
        default=4000,
        description="Chunk window size in characters"
    )
    chunk_overlap: int = Field(
        default=250,
        description="Characters shared by consecutive chunks"
    )
    max_chunks: int | None = Field(
        default=None,
        description="Hard cap on chunks per document (tail is dropped)"
    )
    concurrency: int = Field(
        default=4,
        description="Chunk summaries requested in parallel"
    )
    prompt_version: str = Field(
        default="v1",
        description="Summary prompt version"
    )
    structured_llm: str = Field(
        default="openai",
        description="LLM backend used for structured (JSON) summaries"
    )
    min_word_count: int = Field(
        default=10000,
        description="Default target when expanding a summary"
    )
    max_expansion_attempts: int = Field(
        default=15,
        description="Section expansions tried per structured summary"
    )
    max_continuations: int = Field(
        default=3,
        description="Follow-up requests when a reply stops at the token limit"
    )
    reference_chars: int = Field(
        default=5000,
        description="Characters of the book sent as reference during expansion"
    )
    section_delay: float = Field(
        default=0.5,
        description="Pause in seconds between section expansions"
    )


class IngestSettings(BaseSettings):
    """Document ingest heuristics."""
    model_config = SettingsConfigDict(
        env_prefix="INGEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    low_word_threshold: int = Field(
        default=100,
        description="Word count below which extraction is suspicious"
    )
    large_file_bytes: int = Field(
        default=100_000,
        description="File size above which a low word count triggers a warning"
    )
    image_capable_extensions: list[str] = Field(
        default_factory=lambda: [".pdf"],
        description="Extensions that may contain page images instead of text"
    )


class OpenAISettings(BaseSettings):
    """OpenAI chat completions (structured summary backend).

    Environment variables use prefix OPENAI_
    Example: OPENAI_SUMMARY_MODEL=gpt-4o
    """
    model_config = SettingsConfigDict(
        env_prefix="OPENAI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str = Field(default="", description="OpenAI API key")
    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI API base URL"
    )
    summary_model: str = Field(default="gpt-4o", description="Chat model for summaries")
    temperature: float = Field(default=0.35, description="Sampling temperature")
    timeout: float = Field(default=300.0, description="Chat request timeout in seconds")


class ImageSettings(BaseSettings):
    """Cover image generation settings (OpenAI images API)."""
    model_config = SettingsConfigDict(
        env_prefix="OPENAI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str = Field(default="", description="OpenAI API key")
    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI API base URL"
    )
    image_model: str = Field(default="gpt-image-1", description="Image model")
    image_size: str = Field(default="1024x1536", description="Portrait 2:3 cover size")
    timeout: float = Field(default=180.0, description="Image request timeout in seconds")


class MinioSettings(BaseSettings):
    """MinIO object storage for generated covers and narrations."""
    model_config = SettingsConfigDict(
        env_prefix="MINIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    endpoint: str = Field(default="http://localhost:9000", description="MinIO endpoint")
    access_key: str = Field(default="minioadmin", description="Access key")
    secret_key: str = Field(default="minioadmin", description="Secret key")
    secure: bool = Field(default=False, description="Use HTTPS")
    bucket: str = Field(default="book-files", description="Bucket for derived assets")
    public_base_url: str = Field(
        default="",
        description="Public URL prefix for stored objects (defaults to endpoint/bucket)"
    )


class DriveSettings(BaseSettings):
    """Google Drive upload settings."""
    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_DRIVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    upload_url: str = Field(
        default="https://www.googleapis.com/upload/drive/v3/files",
        description="Drive multipart upload endpoint"
    )
    covers_folder_id: str = Field(default="", description="Default folder for covers")
    timeout: float = Field(default=60.0, description="Upload timeout in seconds")


class APISettings(BaseSettings):
    """API server settings.

    Environment variables use prefix API_
    Example: API_PORT=8001
    """
    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=8000, description="API server port")
    reload: bool = Field(default=False, description="Enable auto-reload (dev only)")
    title: str = Field(default="BookDigest API", description="OpenAPI title")
    version: str = Field(default="", description="OpenAPI version override")
    description: str = Field(default="", description="OpenAPI description")
    trust_identity_headers: bool = Field(
        default=False,
        description="Read caller identity from X-User-Id / X-User-Role set by an auth proxy"
    )


# Global settings instances
openrouter_settings = OpenRouterSettings()
elevenlabs_settings = ElevenLabsSettings()
openai_settings = OpenAISettings()
dispatch_settings = DispatchSettings()
summarization_settings = SummarizationSettings()
ingest_settings = IngestSettings()
image_settings = ImageSettings()
minio_settings = MinioSettings()
drive_settings = DriveSettings()
api_settings = APISettings()


__all__ = [
    "OpenRouterSettings",
    "ElevenLabsSettings",
    "OpenAISettings",
    "DispatchSettings",
    "SummarizationSettings",
    "IngestSettings",
    "ImageSettings",
    "MinioSettings",
    "DriveSettings",
    "APISettings",
    "openrouter_settings",
    "elevenlabs_settings",
    "openai_settings",
    "dispatch_settings",
    "summarization_settings",
    "ingest_settings",
    "image_settings",
    "minio_settings",
    "drive_settings",
    "api_settings",
]
