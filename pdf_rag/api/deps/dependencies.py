"""
Dependency injection container.

Factory functions for FastAPI dependencies. ServiceCache holds the objects
built once per process; tests replace them through app.dependency_overrides.

Dependencies: pdf_rag.configs, pdf_rag.core, pdf_rag.boundary
System role: DI container for service injection
"""

from pdf_rag.boundary.vdb import QdrantConnection
from pdf_rag.configs import Settings, get_settings
from pdf_rag.configs.api import ApiSettings
from pdf_rag.core.orchestrator import Orchestrator
from pdf_rag.core.processing_config import ProcessingConfig


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._processing_config: ProcessingConfig | None = None
        self._connection: QdrantConnection | None = None
        self._orchestrator: Orchestrator | None = None

    @property
    def settings(self) -> Settings:
        """Get cached settings."""
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def processing_config(self) -> ProcessingConfig:
        """Get process-wide processing config (fails fast on missing credentials)."""
        if self._processing_config is None:
            self._processing_config = ProcessingConfig.from_settings(self.settings)
        return self._processing_config

    @property
    def connection(self) -> QdrantConnection:
        """Get the shared Qdrant connection session (not yet opened)."""
        if self._connection is None:
            self._connection = QdrantConnection.from_settings(self.settings.qdrant)
        return self._connection

    @property
    def orchestrator(self) -> Orchestrator:
        """Get cached orchestrator."""
        if self._orchestrator is None:
            self._orchestrator = Orchestrator(
                connection=self.connection,
                collection=self.settings.qdrant.collection,
            )
        return self._orchestrator

    async def aclose(self) -> None:
        """Close the Qdrant connection and forget every cached instance."""
        if self._connection is not None:
            await self._connection.close()
        self.clear()

    def clear(self) -> None:
        """Clear all cached instances."""
        self._settings = None
        self._processing_config = None
        self._connection = None
        self._orchestrator = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_processing_config() -> ProcessingConfig:
    """Get the process-wide ProcessingConfig."""
    return get_service_cache().processing_config


def get_orchestrator() -> Orchestrator:
    """Get the shared Orchestrator."""
    return get_service_cache().orchestrator


def get_api_settings() -> ApiSettings:
    """Get HTTP server settings."""
    return get_service_cache().settings.api
