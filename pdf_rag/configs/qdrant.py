"""
Qdrant vector store configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class QdrantSettings(BaseSettings):
    """Qdrant connection settings."""

    model_config = SettingsConfigDict(
        env_prefix="QDRANT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    url: str = Field(
        default="http://localhost:6333",
        description="Qdrant URL, or ':memory:' for the in-process store",
    )
    api_key: str | None = Field(default=None, description="Qdrant API key (cloud deployments)")
    collection: str = Field(
        default="genai-embedding-demo",
        description="Collection holding every ingested chunk",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout applied to each vector store call",
    )
