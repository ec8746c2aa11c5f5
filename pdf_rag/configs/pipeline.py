"""
Configuration settings for the ingestion and query pipeline.

Provides environment-based defaults for chunking, embedding, retrieval and
generation. Values end up in ProcessingConfig; pipeline stages never read
these settings directly.

Dependencies: pydantic, pydantic_settings
System role: Pipeline defaults loaded from environment
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineSettings(BaseSettings):
    """Settings for the RAG pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="RAG_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Chunking settings
    chunk_size: int = Field(default=500, description="Maximum chunk size in characters")
    chunk_overlap: int = Field(default=75, description="Overlap between consecutive chunks")

    # Model settings
    embedding_model: str = Field(
        default="text-embedding-004",
        description="Embedding model used for both ingestion and queries",
    )
    chat_model: str = Field(default="gemini-1.5-flash", description="Generation model")
    temperature: float = Field(default=0.2, description="Sampling temperature for generation")
    max_output_tokens: int = Field(default=512, description="Upper bound on generated tokens")

    # Retrieval settings
    default_top_k: int = Field(default=3, description="Results retrieved per query")
    context_preview_chars: int = Field(
        default=500,
        description="Characters of each retrieved chunk included in the prompt",
    )

    # Embedding throughput
    embed_requests_per_second: float = Field(
        default=10.0,
        description="Token bucket refill rate for embedding calls",
    )
    embed_max_concurrency: int = Field(
        default=1,
        description="Embedding calls allowed in flight at once",
    )

    request_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for each PDF parse, embedding and generation call",
    )
