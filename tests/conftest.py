"""
Shared test fixtures and configuration for entire test suite.

Provides: processing config, deterministic embeddings, in-memory Qdrant,
fake chat model, page documents and on-disk PDF files
Dependencies: pytest, langchain_core, qdrant_client
System role: Test infrastructure and fixture management
"""

import shutil
import tempfile
from pathlib import Path

import pytest
import pytest_asyncio
from langchain_core.documents import Document
from langchain_core.embeddings import DeterministicFakeEmbedding
from langchain_core.language_models import FakeListChatModel

from pdf_rag.boundary.vdb import QdrantConnection, VectorStoreGateway
from pdf_rag.core.document_processing.tasks import EmbeddingTask
from pdf_rag.core.processing_config import ProcessingConfig
from tests.fakes import EMBEDDING_SIZE, TEST_COLLECTION, make_pdf


@pytest.fixture
def processing_config() -> ProcessingConfig:
    """Provide a valid processing config with a fast rate limit."""
    return ProcessingConfig(
        api_key="test-key",
        embed_requests_per_second=1000.0,
        request_timeout_seconds=5.0,
    )


@pytest.fixture
def fake_embeddings() -> DeterministicFakeEmbedding:
    """Provide deterministic embeddings (same text, same vector)."""
    return DeterministicFakeEmbedding(size=EMBEDDING_SIZE)


@pytest.fixture
def embedder(fake_embeddings, processing_config) -> EmbeddingTask:
    """Provide an embedding task over deterministic embeddings."""
    return EmbeddingTask(
        embeddings=fake_embeddings,
        model_name=processing_config.embedding_model,
        timeout_seconds=5.0,
    )


@pytest_asyncio.fixture
async def memory_connection():
    """
    Provide an in-process Qdrant connection.

    Yields:
        QdrantConnection: Connection closed after the test
    """
    connection = QdrantConnection(":memory:")
    yield connection
    await connection.close()


@pytest.fixture
def gateway(memory_connection, embedder) -> VectorStoreGateway:
    """Provide a gateway over the in-process store."""
    return VectorStoreGateway(memory_connection, TEST_COLLECTION, embedder)


@pytest.fixture
def fake_chat_model() -> FakeListChatModel:
    """Provide a chat model that always answers the same text."""
    return FakeListChatModel(responses=["Here's what I found about your leave question."])


@pytest.fixture
def page_documents() -> list[Document]:
    """Provide two page documents in page order."""
    return [
        Document(
            page_content="Annual leave accrues monthly.\n\nEmployees may carry over five days.",
            metadata={"page": 1, "source": "policy.pdf"},
        ),
        Document(
            page_content="Sick leave requires a medical certificate after two days.",
            metadata={"page": 2, "source": "policy.pdf"},
        ),
    ]


@pytest.fixture
def temp_dir():
    """
    Create a temporary directory for test files.

    Yields:
        Path: Path to temporary directory
    """
    temp_path = Path(tempfile.mkdtemp(prefix="pdf_rag_test_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def temp_pdf_file(temp_dir) -> Path:
    """Provide a small two-page PDF on disk."""
    path = temp_dir / "policy.pdf"
    path.write_bytes(make_pdf(["Leave policy page one", "Leave policy page two"]))
    return path
