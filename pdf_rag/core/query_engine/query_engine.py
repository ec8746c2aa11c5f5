"""
Query and generation engine.

Embeds a question with the collection's embedding model, retrieves the top-K
chunks and asks the chat model for an answer grounded on them. Generation
runs even when nothing was retrieved; the prompt then tells the model there
is no context so it answers with the not-found sentence.

Dependencies: langchain_core, pdf_rag.boundary.vdb, pdf_rag.core.document_processing
System role: Retrieval and grounded generation
"""

import logging

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage

from pdf_rag.boundary.vdb import VectorStoreGateway
from pdf_rag.core.document_processing.tasks import EmbeddingTask
from pdf_rag.core.exceptions import (
    ConsistencyError,
    DependencyRejected,
    InputError,
    QueryValidationError,
)
from pdf_rag.core.processing_config import ProcessingConfig
from pdf_rag.core.query_engine.query_prompt import build_messages
from pdf_rag.core.query_engine.query_schema import RAGAnswer
from pdf_rag.core.upstream import call_upstream

logger = logging.getLogger(__name__)

SERVICE_NAME = "generation"


def validate_query(query: object) -> str:
    """
    Check that a query is a non-blank string.

    Raises:
        QueryValidationError: Query missing, not a string, or blank
    """
    if not isinstance(query, str) or not query.strip():
        raise QueryValidationError("Query is required and must be a string", field="query")
    return query


def message_text(message: BaseMessage) -> str:
    """Extract plain text from a chat model response."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


class QueryEngine:
    """Answer questions from the vector store with a chat model."""

    def __init__(
        self,
        gateway: VectorStoreGateway,
        embedder: EmbeddingTask,
        chat_model: BaseChatModel,
    ) -> None:
        """
        Initialize query engine.

        Args:
            gateway: Vector store gateway to search
            embedder: Embedder for queries; must use the gateway's embedding model
            chat_model: Chat model producing the answer

        Raises:
            ConsistencyError: embedder and gateway use different embedding models
        """
        if embedder.model_name != gateway.embedding_model:
            raise ConsistencyError(
                "Query embedder and vector store use different embedding models",
                details={
                    "query_model": embedder.model_name,
                    "store_model": gateway.embedding_model,
                },
            )
        self._gateway = gateway
        self._embedder = embedder
        self._chat_model = chat_model

    async def answer(
        self,
        query: str,
        config: ProcessingConfig,
        top_k: int = 3,
        instruction: str | None = None,
    ) -> RAGAnswer:
        """
        Retrieve context for query and generate an answer.

        Args:
            query: User question
            config: Processing configuration for this call
            top_k: Number of chunks to retrieve
            instruction: Optional persona replacing the default system prompt

        Returns:
            RAGAnswer: Answer and the retrieved results, best first

        Raises:
            QueryValidationError: Query empty or not a string
            InputError: top_k not a positive integer
            ConsistencyError: config names a different embedding model than the
                gateway. The orchestrator builds both from one config, so this
                only guards direct QueryEngine callers; stored points are
                checked by VectorStoreGateway.search
            DependencyUnavailable: Embedding, store or generation unreachable
            DependencyRejected: Embedding, store or generation refused the request
        """
        validate_query(query)
        if isinstance(top_k, bool) or not isinstance(top_k, int) or top_k <= 0:
            raise InputError("top_k must be a positive integer", field="top_k")
        if config.embedding_model != self._gateway.embedding_model:
            raise ConsistencyError(
                "Configured embedding model differs from the one used for ingestion",
                details={
                    "config_model": config.embedding_model,
                    "store_model": self._gateway.embedding_model,
                },
            )

        logger.info(
            f"{__name__}:answer - Step 1: Embedding query",
            extra={"query_len": len(query), "top_k": top_k},
        )
        query_vector = await self._embedder.embed(query)

        logger.info(f"{__name__}:answer - Step 2: Searching vector store")
        results = await self._gateway.search(query_vector, top_k)

        logger.info(
            f"{__name__}:answer - Step 3: Building prompt",
            extra={"result_count": len(results)},
        )
        messages = build_messages(
            query,
            results,
            preview_chars=config.context_preview_chars,
            instruction=instruction,
        )

        logger.info(f"{__name__}:answer - Step 4: Generating answer")
        response = await call_upstream(
            SERVICE_NAME,
            self._chat_model.ainvoke(messages),
            config.request_timeout_seconds,
        )
        answer = message_text(response).strip()
        if not answer:
            raise DependencyRejected(SERVICE_NAME, "model returned an empty answer")

        logger.info(
            f"{__name__}:answer - Complete",
            extra={"result_count": len(results), "answer_len": len(answer)},
        )
        return RAGAnswer(results=results, answer=answer)
