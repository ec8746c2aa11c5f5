"""
Pipeline orchestrator.

Runs ingestion (load -> chunk -> embed -> upsert) and querying (embed ->
search -> generate) in strict sequence. Stages and model clients are built
per call from the ProcessingConfig passed in; the only thing shared between
calls is the Qdrant connection session. Errors propagate unchanged.

Dependencies: All pipeline stages, pdf_rag.boundary.vdb
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time
from collections.abc import Callable

from langchain_community.document_loaders import PyPDFLoader
from langchain_core.document_loaders import BaseLoader
from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel

from pdf_rag.boundary.vdb import QdrantConnection, VectorStoreGateway
from pdf_rag.core.document_processing.models import IngestionResult
from pdf_rag.core.document_processing.tasks import ChunkingTask, EmbeddingTask, ParsingTask
from pdf_rag.core.processing_config import ProcessingConfig
from pdf_rag.core.providers import build_chat_model, build_embeddings
from pdf_rag.core.query_engine import QueryEngine, RAGAnswer, validate_query

logger = logging.getLogger(__name__)


class Orchestrator:
    """Coordinate ingestion and querying against one collection."""

    def __init__(
        self,
        connection: QdrantConnection,
        collection: str,
        embeddings_factory: Callable[[ProcessingConfig], Embeddings] = build_embeddings,
        chat_model_factory: Callable[[ProcessingConfig], BaseChatModel] = build_chat_model,
        loader_factory: Callable[[str], BaseLoader] = PyPDFLoader,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            connection: Shared vector store connection session
            collection: Collection holding every ingested chunk
            embeddings_factory: Builds the embedding model for a config
            chat_model_factory: Builds the chat model for a config
            loader_factory: Builds the PDF loader for a path
        """
        self._connection = connection
        self._collection = collection
        self._embeddings_factory = embeddings_factory
        self._chat_model_factory = chat_model_factory
        self._loader_factory = loader_factory

    @property
    def collection(self) -> str:
        return self._collection

    def gateway(self, config: ProcessingConfig) -> VectorStoreGateway:
        """Build a gateway bound to the config's embedding model."""
        return VectorStoreGateway(
            connection=self._connection,
            collection=self._collection,
            embedder=self._embedder(config),
        )

    async def process_pdf(self, path: str, config: ProcessingConfig) -> IngestionResult:
        """
        Ingest a PDF into the knowledge base.

        Args:
            path: Path to the PDF
            config: Processing configuration

        Returns:
            IngestionResult: Counts and timings for the run

        Raises:
            ChunkingConfigError: Invalid chunk geometry (before the PDF is read)
            ParsingError: Missing, unreadable or invalid PDF
            ConsistencyError: Vector dimension differs from the collection's
            DependencyUnavailable: A service was unreachable or timed out
            DependencyRejected: A service refused a request
        """
        start_time = time.perf_counter()
        chunking_task = ChunkingTask(config.chunk_size, config.chunk_overlap)
        parsing_task = ParsingTask(
            timeout_seconds=config.request_timeout_seconds,
            loader_factory=self._loader_factory,
        )
        embedder = self._embedder(config)
        gateway = VectorStoreGateway(self._connection, self._collection, embedder)

        logger.info(
            f"{__name__}:process_pdf - Step 1: Loading PDF",
            extra={"path": path, "collection": self._collection},
        )
        pages = await parsing_task.parse(path)

        logger.info(f"{__name__}:process_pdf - Step 2: Chunking {len(pages)} pages")
        chunks = chunking_task.chunk(pages)

        logger.info(f"{__name__}:process_pdf - Step 3: Embedding {len(chunks)} chunks")
        embedded = await embedder.embed_all(chunks)

        logger.info(f"{__name__}:process_pdf - Step 4: Storing {len(embedded)} chunks")
        ids = await gateway.upsert(embedded)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        result = IngestionResult(
            source=path,
            page_count=len(pages),
            chunk_count=len(ids),
            vector_dimension=embedded[0].dimension if embedded else 0,
            collection=self._collection,
            processing_time_ms=elapsed_ms,
        )
        logger.info(
            f"{__name__}:process_pdf - Complete",
            extra={
                "path": path,
                "chunk_count": result.chunk_count,
                "processing_time_ms": round(elapsed_ms, 2),
            },
        )
        return result

    async def query_knowledge_base(
        self,
        query: str,
        config: ProcessingConfig,
        top_k: int = 3,
        instruction: str | None = None,
    ) -> RAGAnswer:
        """
        Answer a question from the knowledge base.

        Args:
            query: User question
            config: Processing configuration
            top_k: Number of chunks to retrieve
            instruction: Optional persona replacing the default system prompt

        Returns:
            RAGAnswer: Answer and retrieved results

        Raises:
            QueryValidationError: Query empty or not a string
            ConsistencyError: Query and stored vectors are not comparable
            DependencyUnavailable: A service was unreachable or timed out
            DependencyRejected: A service refused a request
        """
        validate_query(query)
        embedder = self._embedder(config)
        engine = QueryEngine(
            gateway=VectorStoreGateway(self._connection, self._collection, embedder),
            embedder=embedder,
            chat_model=self._chat_model_factory(config),
        )
        return await engine.answer(query, config, top_k=top_k, instruction=instruction)

    def _embedder(self, config: ProcessingConfig) -> EmbeddingTask:
        return EmbeddingTask.from_config(config, self._embeddings_factory(config))
