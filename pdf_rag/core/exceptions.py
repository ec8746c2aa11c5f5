"""
Exception hierarchy for the PDF RAG pipeline.

Four kinds of failure cross stage boundaries: bad input, an unreachable
dependency, a dependency that refused the request, and a mismatch between
what was stored and what is being queried. Every pipeline operation either
returns a result or raises one of these.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class PdfRagError(Exception):
    """Base exception for all PDF RAG errors."""

    retryable: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InputError(PdfRagError):
    """Raised when caller-supplied input or configuration is invalid."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize input error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class ConfigurationError(InputError):
    """Raised when process configuration is missing or invalid."""


class ChunkingConfigError(InputError):
    """Raised when chunk size and overlap cannot produce valid chunks."""

    def __init__(self, chunk_size: int, chunk_overlap: int, reason: str) -> None:
        super().__init__(
            f"Invalid chunking configuration: {reason}",
            details={"chunk_size": chunk_size, "chunk_overlap": chunk_overlap},
        )


class ParsingError(InputError):
    """Raised when a document cannot be loaded."""

    def __init__(self, message: str, file_path: str | None = None) -> None:
        self.file_path = file_path
        super().__init__(message, field="path", details={"file_path": file_path})


class QueryValidationError(InputError):
    """Raised when a query is empty or not a string."""


class DependencyError(PdfRagError):
    """Base exception for failures of external services."""

    def __init__(
        self,
        service: str,
        detail: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize dependency error.

        Args:
            service: Logical name of the external service (e.g. "embedding")
            detail: Upstream error detail
            status_code: Upstream status code when one was reported
            details: Additional context
        """
        self.service = service
        self.detail = detail
        self.status_code = status_code
        details = details or {}
        details.update({"service": service, "upstream_detail": detail})
        if status_code is not None:
            details["upstream_status"] = status_code
        super().__init__(self._describe(service), details)

    def _describe(self, service: str) -> str:
        return f"{service} service failed"


class DependencyUnavailable(DependencyError):
    """Raised when an external service is unreachable or times out."""

    retryable = True

    def _describe(self, service: str) -> str:
        return f"{service} service unavailable"


class DependencyRejected(DependencyError):
    """Raised when an external service is reachable but refuses the request."""

    def _describe(self, service: str) -> str:
        return f"{service} service rejected the request"


class ConsistencyError(PdfRagError):
    """Raised when stored vectors and query vectors are not comparable."""
