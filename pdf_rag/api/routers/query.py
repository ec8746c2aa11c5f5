"""
Query API endpoint.

Routes: POST /query

Dependencies: pdf_rag.core.orchestrator, pdf_rag.models.query
System role: Knowledge base question answering HTTP API
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from pdf_rag.api.deps import get_orchestrator, get_processing_config
from pdf_rag.core.orchestrator import Orchestrator
from pdf_rag.core.processing_config import ProcessingConfig
from pdf_rag.core.query_engine import validate_query
from pdf_rag.models.query import (
    SOURCE_PREVIEW_CHARS,
    QueryRequest,
    QueryResponse,
    QuerySource,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["query"])


@router.post("/query", response_model=QueryResponse)
async def query_knowledge_base(
    request: QueryRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
    config: ProcessingConfig = Depends(get_processing_config),
) -> QueryResponse:
    """
    Answer a question from the knowledge base.

    Args:
        request: QueryRequest with query and top_k
        orchestrator: Injected Orchestrator
        config: Injected process-wide ProcessingConfig

    Returns:
        QueryResponse: Answer with ranked sources

    Raises:
        QueryValidationError: Query missing or not a string (400)
        ConsistencyError: Embedding model or dimension mismatch (409)
        DependencyRejected: Upstream refused the request (502)
        DependencyUnavailable: Upstream unreachable (503)
    """
    query = validate_query(request.query)
    logger.info(f"{__name__}:query_knowledge_base - START", extra={"top_k": request.top_k})

    result = await orchestrator.query_knowledge_base(query, config, top_k=request.top_k)

    sources = [
        QuerySource(
            id=rank,
            score=round(item.score, 4),
            content=item.record.text[:SOURCE_PREVIEW_CHARS]
            + ("..." if len(item.record.text) > SOURCE_PREVIEW_CHARS else ""),
            metadata=item.record.metadata,
        )
        for rank, item in enumerate(result.results, start=1)
    ]
    return QueryResponse(
        query=query,
        answer=result.answer,
        sources=sources,
        timestamp=datetime.now(timezone.utc),
    )
