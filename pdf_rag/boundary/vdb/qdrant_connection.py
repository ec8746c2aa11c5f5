"""
Qdrant connection session.

Owns the one AsyncQdrantClient shared by every request. The client is opened
on first use; concurrent first callers wait on the same initialization
instead of opening their own. close() (or leaving an `async with` block)
releases it so tests can scope a connection to a single case.

Dependencies: qdrant_client, asyncio
System role: Lifecycle of the external vector database connection
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from qdrant_client import AsyncQdrantClient

from pdf_rag.configs.qdrant import QdrantSettings
from pdf_rag.core.exceptions import DependencyUnavailable, PdfRagError
from pdf_rag.core.upstream import call_upstream

logger = logging.getLogger(__name__)

SERVICE_NAME = "vector-store"
IN_MEMORY_URL = ":memory:"


class QdrantConnection:
    """Lazily opened, shared Qdrant client handle."""

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        timeout_seconds: float | None = None,
        client_factory: Callable[..., AsyncQdrantClient] = AsyncQdrantClient,
    ) -> None:
        """
        Initialize connection settings without opening anything.

        Args:
            url: Qdrant URL, or ':memory:' for the in-process store
            api_key: Qdrant API key
            timeout_seconds: Timeout for the reachability probe and store calls
            client_factory: Callable creating the client (injectable for tests)
        """
        self._url = url
        self._api_key = api_key
        self._timeout = timeout_seconds
        self._client_factory = client_factory
        self._client: AsyncQdrantClient | None = None
        self._lock = asyncio.Lock()
        # Serializes collection creation across every gateway on this connection.
        self.schema_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: QdrantSettings) -> "QdrantConnection":
        return cls(
            url=settings.url,
            api_key=settings.api_key,
            timeout_seconds=settings.timeout_seconds,
        )

    @property
    def url(self) -> str:
        return self._url

    @property
    def timeout_seconds(self) -> float | None:
        return self._timeout

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> AsyncQdrantClient:
        """
        Return the shared client, opening it on first call.

        Returns:
            AsyncQdrantClient: Connected client

        Raises:
            DependencyUnavailable: Store unreachable
            DependencyRejected: Store refused the connection (e.g. bad API key)
        """
        if self._client is not None:
            return self._client

        async with self._lock:
            if self._client is None:
                self._client = await self._open()
        return self._client

    async def _open(self) -> AsyncQdrantClient:
        in_memory = self._url == IN_MEMORY_URL
        kwargs: dict[str, Any] = (
            {"location": IN_MEMORY_URL}
            if in_memory
            else {"url": self._url, "api_key": self._api_key}
        )
        logger.info(f"{__name__}:connect - Opening Qdrant client", extra={"url": self._url})

        try:
            client = self._client_factory(**kwargs)
        except Exception as e:
            raise DependencyUnavailable(SERVICE_NAME, f"{type(e).__name__}: {e}") from e

        if not in_memory:
            try:
                await call_upstream(SERVICE_NAME, client.get_collections(), self._timeout)
            except PdfRagError:
                await client.close()
                logger.error(
                    f"{__name__}:connect - Qdrant unreachable",
                    extra={"url": self._url},
                )
                raise

        logger.info(f"{__name__}:connect - Qdrant client ready", extra={"url": self._url})
        return client

    async def close(self) -> None:
        """Close the client if open; a later connect() opens a new one."""
        async with self._lock:
            if self._client is not None:
                await self._client.close()
                self._client = None
                logger.info(f"{__name__}:close - Qdrant client closed")

    async def __aenter__(self) -> "QdrantConnection":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
