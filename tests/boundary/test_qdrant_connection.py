"""Tests for QdrantConnection lifecycle."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from pdf_rag.boundary.vdb import QdrantConnection
from pdf_rag.configs.qdrant import QdrantSettings
from pdf_rag.core.exceptions import DependencyUnavailable


def make_client(delay: float = 0.0, error: Exception | None = None) -> MagicMock:
    client = MagicMock()

    async def get_collections():
        await asyncio.sleep(delay)
        if error is not None:
            raise error
        return MagicMock(collections=[])

    client.get_collections = AsyncMock(side_effect=get_collections)
    client.close = AsyncMock()
    return client


class TestQdrantConnection:
    """Test connection opening, sharing and closing."""

    def test_from_settings(self) -> None:
        """Should take URL and timeout from settings."""
        connection = QdrantConnection.from_settings(
            QdrantSettings(url="http://qdrant:6333", timeout_seconds=3.0)
        )

        assert connection.url == "http://qdrant:6333"
        assert connection.timeout_seconds == 3.0

    @pytest.mark.asyncio
    async def test_lazy_open(self) -> None:
        """Should not open a client until first use."""
        factory = MagicMock(return_value=make_client())
        connection = QdrantConnection("http://qdrant:6333", client_factory=factory)

        assert connection.is_connected is False
        factory.assert_not_called()

        await connection.connect()

        assert connection.is_connected is True
        factory.assert_called_once_with(url="http://qdrant:6333", api_key=None)

    @pytest.mark.asyncio
    async def test_connect_is_idempotent(self) -> None:
        """Should return the same client on repeated calls."""
        factory = MagicMock(return_value=make_client())
        connection = QdrantConnection("http://qdrant:6333", client_factory=factory)

        first = await connection.connect()
        second = await connection.connect()

        assert first is second
        factory.assert_called_once()

    @pytest.mark.asyncio
    async def test_concurrent_first_use_opens_once(self) -> None:
        """Should share one initialization between concurrent first callers."""
        client = make_client(delay=0.05)
        factory = MagicMock(return_value=client)
        connection = QdrantConnection("http://qdrant:6333", client_factory=factory)

        clients = await asyncio.gather(*(connection.connect() for _ in range(5)))

        assert all(item is client for item in clients)
        factory.assert_called_once()
        client.get_collections.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unreachable_store(self) -> None:
        """Should raise DependencyUnavailable and close the half-open client."""
        client = make_client(error=httpx.ConnectError("connection refused"))
        connection = QdrantConnection(
            "http://qdrant:6333", client_factory=MagicMock(return_value=client)
        )

        with pytest.raises(DependencyUnavailable) as exc_info:
            await connection.connect()

        assert exc_info.value.service == "vector-store"
        assert connection.is_connected is False
        client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_probe_timeout(self) -> None:
        """Should raise DependencyUnavailable when the probe exceeds the timeout."""
        client = make_client(delay=1.0)
        connection = QdrantConnection(
            "http://qdrant:6333",
            timeout_seconds=0.01,
            client_factory=MagicMock(return_value=client),
        )

        with pytest.raises(DependencyUnavailable):
            await connection.connect()

    @pytest.mark.asyncio
    async def test_client_construction_failure(self) -> None:
        """Should raise DependencyUnavailable when the client cannot be built."""
        factory = MagicMock(side_effect=ValueError("bad url"))
        connection = QdrantConnection("not a url", client_factory=factory)

        with pytest.raises(DependencyUnavailable):
            await connection.connect()

    @pytest.mark.asyncio
    async def test_close_and_reopen(self) -> None:
        """Should close the client and open a fresh one on next use."""
        first_client, second_client = make_client(), make_client()
        factory = MagicMock(side_effect=[first_client, second_client])
        connection = QdrantConnection("http://qdrant:6333", client_factory=factory)

        await connection.connect()
        await connection.close()

        assert connection.is_connected is False
        first_client.close.assert_awaited_once()
        assert await connection.connect() is second_client

    @pytest.mark.asyncio
    async def test_close_without_open(self) -> None:
        """Should do nothing when closing an unopened connection."""
        connection = QdrantConnection("http://qdrant:6333", client_factory=MagicMock())

        await connection.close()

        assert connection.is_connected is False

    @pytest.mark.asyncio
    async def test_context_manager(self) -> None:
        """Should open on enter and close on exit."""
        client = make_client()
        connection = QdrantConnection(
            "http://qdrant:6333", client_factory=MagicMock(return_value=client)
        )

        async with connection as opened:
            assert opened is connection
            assert connection.is_connected is True

        assert connection.is_connected is False
        client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_in_memory_skips_probe(self) -> None:
        """Should open the in-process store without a reachability probe."""
        factory = MagicMock(return_value=make_client())
        connection = QdrantConnection(":memory:", client_factory=factory)

        client = await connection.connect()

        factory.assert_called_once_with(location=":memory:")
        client.get_collections.assert_not_awaited()
