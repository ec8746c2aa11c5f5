"""
Guarded calls to external services.

Bounds every await on an external service with a timeout and converts SDK
exceptions into DependencyUnavailable or DependencyRejected. Nothing here
retries; a failed call fails the current request.

Dependencies: asyncio, httpx
System role: Failure boundary between pipeline stages and external SDKs
"""

import asyncio
import logging
from collections.abc import Awaitable, Iterator
from typing import TypeVar

import httpx

from pdf_rag.core.exceptions import (
    DependencyError,
    DependencyRejected,
    DependencyUnavailable,
    PdfRagError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRANSIENT_TYPES: tuple[type[BaseException], ...] = (
    asyncio.TimeoutError,
    TimeoutError,
    ConnectionError,
    OSError,
    httpx.TransportError,
)


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield the exception and everything it was raised from."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _status_code(exc: BaseException) -> int | None:
    for attr in ("status_code", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool) and 100 <= value < 600:
            return value
    return None


def classify_upstream_error(service: str, exc: BaseException) -> PdfRagError:
    """
    Map an SDK exception to the pipeline error taxonomy.

    Transport failures, timeouts and 5xx responses are treated as the service
    being unavailable. 4xx responses (bad credentials, quota, malformed
    payload) and anything unrecognised are treated as a rejection so the
    caller does not retry blindly.

    Args:
        service: Logical service name used in the error message
        exc: Exception raised by the SDK

    Returns:
        PdfRagError: DependencyUnavailable or DependencyRejected (or exc itself
        if it already belongs to the taxonomy)
    """
    if isinstance(exc, PdfRagError):
        return exc

    detail = f"{type(exc).__name__}: {exc}"
    for link in _exception_chain(exc):
        status = _status_code(link)
        if status is not None:
            if status >= 500:
                return DependencyUnavailable(service, detail, status_code=status)
            if status >= 400:
                return DependencyRejected(service, detail, status_code=status)
        if isinstance(link, _TRANSIENT_TYPES):
            return DependencyUnavailable(service, detail)

    return DependencyRejected(service, detail)


async def call_upstream(
    service: str,
    awaitable: Awaitable[T],
    timeout: float | None,
) -> T:
    """
    Await an external call with a timeout and typed failures.

    Args:
        service: Logical service name (embedding, generation, vector-store, pdf-parser)
        awaitable: Coroutine performing the external call
        timeout: Seconds to wait before giving up (None waits indefinitely)

    Returns:
        T: Whatever the awaitable returns

    Raises:
        DependencyUnavailable: Timed out, unreachable, or 5xx
        DependencyRejected: Request refused by the service
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except PdfRagError:
        raise
    except asyncio.TimeoutError as e:
        logger.warning(
            f"{__name__}:call_upstream - {service} timed out",
            extra={"service": service, "timeout_seconds": timeout},
        )
        raise DependencyUnavailable(service, f"timed out after {timeout}s") from e
    except Exception as e:
        error = classify_upstream_error(service, e)
        if isinstance(error, DependencyError):
            logger.warning(
                f"{__name__}:call_upstream - {service} failed",
                extra={
                    "service": service,
                    "error_type": type(e).__name__,
                    "retryable": error.retryable,
                },
            )
        raise error from e
