"""
Error to HTTP response mapping.

Pipeline errors reach the HTTP boundary unchanged; this module maps each
kind to a status code and a uniform ErrorResponse body.

Dependencies: fastapi, pdf_rag.core.exceptions
System role: Boundary translation of typed pipeline errors
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pdf_rag.core.exceptions import (
    ConsistencyError,
    DependencyRejected,
    DependencyUnavailable,
    InputError,
    PdfRagError,
)
from pdf_rag.models.common import ErrorResponse
from pdf_rag.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: tuple[tuple[type[PdfRagError], int], ...] = (
    (InputError, status.HTTP_400_BAD_REQUEST),
    (ConsistencyError, status.HTTP_409_CONFLICT),
    (DependencyRejected, status.HTTP_502_BAD_GATEWAY),
    (DependencyUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: PdfRagError) -> int:
    """Return the HTTP status for a pipeline error."""
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(
    status_code: int,
    error: str,
    error_type: str | None = None,
    retryable: bool = False,
    details: dict | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        error_type=error_type,
        retryable=retryable,
        details=details or None,
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def pdf_rag_error_handler(request: Request, exc: PdfRagError) -> JSONResponse:
    status_code = status_for(exc)
    log_exception_with_context(
        logger,
        f"{request.method} {request.url.path} - {type(exc).__name__}",
        exc,
        status_code=status_code,
    )
    return error_response(
        status_code,
        exc.message,
        error_type=type(exc).__name__,
        retryable=exc.retryable,
        details=exc.details,
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request",
        error_type="InputError",
        details={
            "errors": [
                {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
                for error in exc.errors()
            ]
        },
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        return error_response(exc.status_code, "Endpoint not found")
    return error_response(exc.status_code, str(exc.detail))


def register_error_handlers(app: FastAPI) -> None:
    """Install the pipeline error handlers on app."""
    app.add_exception_handler(PdfRagError, pdf_rag_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
