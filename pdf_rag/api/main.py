"""
FastAPI application with assembled routers.

Initializes the FastAPI app, validates configuration on startup and closes
the vector store connection on shutdown.

Dependencies: fastapi, uvicorn, pdf_rag.api.routers
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pdf_rag.api.deps import get_service_cache
from pdf_rag.api.errors import register_error_handlers
from pdf_rag.configs import get_settings
from pdf_rag.observability import configure_logging
from pdf_rag.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import documents_router, health_router, query_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Builds the ProcessingConfig on startup so a missing API key stops the
    server before it accepts requests.
    """
    logger = logging.getLogger("uvicorn")

    # Startup
    cache = get_service_cache()
    config = cache.processing_config
    logger.info(
        "Processing config loaded",
        extra={"embedding_model": config.embedding_model, "chat_model": config.chat_model},
    )

    yield

    # Shutdown
    await cache.aclose()
    logger.info("Service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="PDF RAG API",
        description="Upload PDFs and ask questions answered from their content",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Outermost middleware is added last
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(documents_router)
    app.include_router(query_router)

    return app


app = create_app()


def main() -> None:
    """Run the API server."""
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "pdf_rag.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
    )


if __name__ == "__main__":
    main()
