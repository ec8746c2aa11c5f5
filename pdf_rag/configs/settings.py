"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from pdf_rag.configs.api import ApiSettings
from pdf_rag.configs.base import BaseSettings
from pdf_rag.configs.google import GoogleSettings
from pdf_rag.configs.pipeline import PipelineSettings
from pdf_rag.configs.qdrant import QdrantSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    google: GoogleSettings = Field(default_factory=GoogleSettings)
    qdrant: QdrantSettings = Field(default_factory=QdrantSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are loaded once; call get_settings.cache_clear()
    in tests that change the environment.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
