"""Fixtures for API tests: app with overridden dependencies."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from pdf_rag.api.deps import get_api_settings, get_orchestrator, get_processing_config
from pdf_rag.api.main import create_app
from pdf_rag.configs.api import ApiSettings


@pytest.fixture
def mock_orchestrator() -> MagicMock:
    """Orchestrator double with async pipeline methods."""
    orchestrator = MagicMock()
    orchestrator.process_pdf = AsyncMock()
    orchestrator.query_knowledge_base = AsyncMock()
    return orchestrator


@pytest.fixture
def api_settings(temp_dir) -> ApiSettings:
    """Upload settings pointing at a temporary directory."""
    return ApiSettings(upload_dir=str(temp_dir / "uploads"), max_upload_bytes=1024 * 1024)


@pytest.fixture
def app(mock_orchestrator, processing_config, api_settings):
    """FastAPI app with pipeline dependencies replaced."""
    application = create_app()
    application.dependency_overrides[get_orchestrator] = lambda: mock_orchestrator
    application.dependency_overrides[get_processing_config] = lambda: processing_config
    application.dependency_overrides[get_api_settings] = lambda: api_settings
    return application


@pytest.fixture
def client(app) -> TestClient:
    """Test client without lifespan (no real config or Qdrant needed)."""
    return TestClient(app)
