"""
Processing configuration value type.

ProcessingConfig is built once at startup from Settings, validated eagerly,
and passed explicitly into every pipeline call. Per-call variation goes
through with_overrides(), which returns a new validated copy.

Dependencies: pydantic, pdf_rag.configs
System role: Immutable configuration threaded through the pipeline
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, model_validator

from pdf_rag.configs import Settings
from pdf_rag.core.exceptions import ChunkingConfigError, ConfigurationError

PLACEHOLDER_API_KEYS = frozenset({"your-google-api-key-here"})


def validate_chunk_geometry(chunk_size: int, chunk_overlap: int) -> None:
    """
    Check that a chunk size and overlap can produce advancing windows.

    Args:
        chunk_size: Maximum chunk length in characters
        chunk_overlap: Characters shared by consecutive chunks

    Raises:
        ChunkingConfigError: size <= 0, overlap < 0, or overlap >= size
    """
    if chunk_size <= 0:
        raise ChunkingConfigError(chunk_size, chunk_overlap, "chunk_size must be positive")
    if chunk_overlap < 0:
        raise ChunkingConfigError(chunk_size, chunk_overlap, "chunk_overlap must not be negative")
    if chunk_overlap >= chunk_size:
        raise ChunkingConfigError(
            chunk_size, chunk_overlap, "chunk_overlap must be smaller than chunk_size"
        )


class ProcessingConfig(BaseModel):
    """Configuration for one ingestion or query call."""

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr = Field(description="Google Generative AI API key")
    chunk_size: int = Field(default=500, description="Maximum chunk size in characters")
    chunk_overlap: int = Field(default=75, description="Overlap between consecutive chunks")
    embedding_model: str = Field(
        default="text-embedding-004",
        description="Embedding model shared by ingestion and queries",
    )
    chat_model: str = Field(default="gemini-1.5-flash", description="Generation model")
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=512, gt=0)
    context_preview_chars: int = Field(default=500, gt=0)
    embed_requests_per_second: float = Field(default=10.0, gt=0)
    embed_max_concurrency: int = Field(default=1, ge=1)
    request_timeout_seconds: float | None = Field(default=30.0, gt=0)

    @model_validator(mode="after")
    def _check(self) -> "ProcessingConfig":
        api_key = self.api_key.get_secret_value().strip()
        if not api_key or api_key in PLACEHOLDER_API_KEYS:
            raise ConfigurationError("GOOGLE_API_KEY is required", field="api_key")
        if not self.embedding_model.strip():
            raise ConfigurationError("embedding_model cannot be empty", field="embedding_model")
        validate_chunk_geometry(self.chunk_size, self.chunk_overlap)
        return self

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProcessingConfig":
        """
        Build the process-wide default configuration.

        Args:
            settings: Loaded application settings

        Returns:
            ProcessingConfig: Validated configuration

        Raises:
            ConfigurationError: API key missing
            ChunkingConfigError: Chunk size/overlap unusable
        """
        pipeline = settings.pipeline
        return cls._build(
            api_key=settings.google.api_key,
            chunk_size=pipeline.chunk_size,
            chunk_overlap=pipeline.chunk_overlap,
            embedding_model=pipeline.embedding_model,
            chat_model=pipeline.chat_model,
            temperature=pipeline.temperature,
            max_output_tokens=pipeline.max_output_tokens,
            context_preview_chars=pipeline.context_preview_chars,
            embed_requests_per_second=pipeline.embed_requests_per_second,
            embed_max_concurrency=pipeline.embed_max_concurrency,
            request_timeout_seconds=pipeline.request_timeout_seconds,
        )

    def with_overrides(self, **overrides: Any) -> "ProcessingConfig":
        """Return a validated copy with the given fields replaced."""
        return self._build(**{**self.model_dump(), **overrides})

    @classmethod
    def _build(cls, **fields: Any) -> "ProcessingConfig":
        try:
            return cls(**fields)
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid processing configuration",
                details={
                    "errors": e.errors(
                        include_url=False, include_context=False, include_input=False
                    )
                },
            ) from e
