"""
Health check API endpoints.

Routes: GET /health, GET /health/vector-store

Dependencies: pdf_rag.core.orchestrator
System role: Health check HTTP API
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from pdf_rag.api.deps import get_orchestrator, get_processing_config
from pdf_rag.core.orchestrator import Orchestrator
from pdf_rag.core.processing_config import ProcessingConfig
from pdf_rag.models.health import HealthResponse, VectorStoreHealthResponse

SERVICE_NAME = "PDF Embedding Service"

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(
        status="ok",
        service=SERVICE_NAME,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/vector-store", response_model=VectorStoreHealthResponse)
async def health_check_vector_store(
    orchestrator: Orchestrator = Depends(get_orchestrator),
    config: ProcessingConfig = Depends(get_processing_config),
) -> VectorStoreHealthResponse:
    """
    Vector store health check.

    Raises:
        DependencyUnavailable: Store unreachable (mapped to 503)
    """
    gateway = orchestrator.gateway(config)
    points = await gateway.count()
    return VectorStoreHealthResponse(
        status="ok",
        collection=gateway.collection,
        points=points,
    )
