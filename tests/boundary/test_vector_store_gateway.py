"""Tests for VectorStoreGateway against the in-process Qdrant store."""

import asyncio

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding

from pdf_rag.boundary.vdb import RecordInput, VectorStoreGateway
from pdf_rag.core.document_processing.models import Chunk, EmbeddedChunk
from pdf_rag.core.document_processing.tasks import EmbeddingTask
from pdf_rag.core.exceptions import ConsistencyError, InputError

from tests.fakes import EMBEDDING_SIZE, TEST_COLLECTION

POLICY_SNIPPETS = [
    "Annual leave accrues at two days per month.",
    "Sick leave requires a medical certificate after two days.",
    "Parental leave can be split into three blocks.",
    "Unused annual leave can be carried over up to five days.",
    "Requests for leave go to HR four weeks in advance.",
]


class TestGatewayInit:
    """Test gateway construction."""

    @pytest.mark.asyncio
    async def test_requires_collection(self, memory_connection, embedder) -> None:
        """Should reject an empty collection name."""
        with pytest.raises(ValueError):
            VectorStoreGateway(memory_connection, "", embedder)

    @pytest.mark.asyncio
    async def test_embedding_model_from_embedder(self, gateway, embedder) -> None:
        """Should report the embedder's model as the collection model."""
        assert gateway.embedding_model == embedder.model_name
        assert gateway.collection == TEST_COLLECTION


class TestGatewayUpsert:
    """Test storing records."""

    @pytest.mark.asyncio
    async def test_upsert_chunks_embeds_missing_vectors(self, gateway) -> None:
        """Should embed chunks without vectors and store them all."""
        chunks = [
            Chunk(text=text, metadata={"chunk_index": i})
            for i, text in enumerate(POLICY_SNIPPETS)
        ]

        ids = await gateway.upsert(chunks)

        assert len(ids) == len(chunks)
        assert len(set(ids)) == len(ids)
        assert await gateway.count() == len(chunks)

    @pytest.mark.asyncio
    async def test_upsert_embedded_chunks(self, gateway, embedder) -> None:
        """Should store precomputed vectors as given."""
        chunks = [Chunk(text=text) for text in POLICY_SNIPPETS[:2]]
        embedded = await embedder.embed_all(chunks)

        ids = await gateway.upsert(embedded)

        assert len(ids) == 2
        assert await gateway.count() == 2

    @pytest.mark.asyncio
    async def test_upsert_empty(self, gateway) -> None:
        """Should return no ids and not create the collection."""
        assert await gateway.upsert([]) == []
        assert await gateway.count() == 0

    @pytest.mark.asyncio
    async def test_dimension_mismatch(self, gateway) -> None:
        """Should refuse vectors whose dimension differs from the collection's."""
        await gateway.upsert([RecordInput(text="first", vector=[0.1] * EMBEDDING_SIZE)])

        with pytest.raises(ConsistencyError):
            await gateway.upsert([RecordInput(text="second", vector=[0.1, 0.2, 0.3])])

    @pytest.mark.asyncio
    async def test_embedding_model_mismatch_on_write(
        self, gateway, embedder, memory_connection
    ) -> None:
        """Should refuse writes from another model and keep the collection searchable."""
        await gateway.upsert([Chunk(text=POLICY_SNIPPETS[0])])
        other_embedder = EmbeddingTask(
            DeterministicFakeEmbedding(size=EMBEDDING_SIZE), model_name="other-model"
        )
        other_gateway = VectorStoreGateway(memory_connection, TEST_COLLECTION, other_embedder)

        with pytest.raises(ConsistencyError) as exc_info:
            await other_gateway.upsert([Chunk(text=POLICY_SNIPPETS[1])])

        assert exc_info.value.details["stored_model"] == embedder.model_name
        assert await gateway.count() == 1
        results = await gateway.search(await embedder.embed(POLICY_SNIPPETS[0]), 5)
        assert [result.record.text for result in results] == [POLICY_SNIPPETS[0]]

    @pytest.mark.asyncio
    async def test_same_model_appends(self, gateway) -> None:
        """Should accept later writes from the collection's own model."""
        await gateway.upsert([Chunk(text=POLICY_SNIPPETS[0])])
        await gateway.upsert([Chunk(text=POLICY_SNIPPETS[1])])

        assert await gateway.count() == 2

    @pytest.mark.asyncio
    async def test_mixed_dimensions_in_batch(self, gateway) -> None:
        """Should refuse a batch whose records disagree on dimension."""
        records = [
            RecordInput(text="a", vector=[0.1, 0.2]),
            RecordInput(text="b", vector=[0.1, 0.2, 0.3]),
        ]

        with pytest.raises(ConsistencyError):
            await gateway.upsert(records)

    @pytest.mark.asyncio
    async def test_concurrent_first_upserts(self, memory_connection, embedder) -> None:
        """Should create the collection once when gateways race to write."""
        gateways = [
            VectorStoreGateway(memory_connection, TEST_COLLECTION, embedder)
            for _ in range(3)
        ]

        await asyncio.gather(
            *(
                gw.upsert([Chunk(text=f"{text} ({n})") for text in POLICY_SNIPPETS])
                for n, gw in enumerate(gateways)
            )
        )

        assert await gateways[0].count() == 3 * len(POLICY_SNIPPETS)


class TestGatewaySearch:
    """Test similarity search."""

    @pytest.mark.asyncio
    async def test_self_similarity(self, gateway, embedder) -> None:
        """Should return a stored record first with a score near 1."""
        await gateway.upsert([Chunk(text=text, metadata={"page": 1}) for text in POLICY_SNIPPETS])
        query_vector = await embedder.embed(POLICY_SNIPPETS[2])

        results = await gateway.search(query_vector, 3)

        assert results[0].record.text == POLICY_SNIPPETS[2]
        assert results[0].score == pytest.approx(1.0, abs=1e-4)
        assert results[0].record.metadata == {"page": 1}
        assert results[0].record.embedding_model == embedder.model_name

    @pytest.mark.asyncio
    async def test_results_descending(self, gateway, embedder) -> None:
        """Should order results by score, best first."""
        await gateway.upsert([Chunk(text=text) for text in POLICY_SNIPPETS])
        query_vector = await embedder.embed("leave")

        results = await gateway.search(query_vector, 5)

        scores = [result.score for result in results]
        assert scores == sorted(scores, reverse=True)
        assert all(-1.0 - 1e-6 <= score <= 1.0 + 1e-6 for score in scores)

    @pytest.mark.asyncio
    async def test_k_larger_than_collection(self, gateway, embedder) -> None:
        """Should return every record when k exceeds the count."""
        await gateway.upsert([Chunk(text=text) for text in POLICY_SNIPPETS[:2]])

        results = await gateway.search(await embedder.embed("leave"), 10)

        assert len(results) == 2

    @pytest.mark.asyncio
    async def test_k_limits_results(self, gateway, embedder) -> None:
        """Should return at most k records."""
        await gateway.upsert([Chunk(text=text) for text in POLICY_SNIPPETS])

        results = await gateway.search(await embedder.embed("leave"), 2)

        assert len(results) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("k", [0, -1, True, 2.5])
    async def test_invalid_k(self, gateway, k) -> None:
        """Should reject k that is not a positive integer."""
        with pytest.raises(InputError):
            await gateway.search([0.1] * EMBEDDING_SIZE, k)

    @pytest.mark.asyncio
    async def test_empty_query_vector(self, gateway) -> None:
        """Should reject an empty query vector."""
        with pytest.raises(InputError):
            await gateway.search([], 3)

    @pytest.mark.asyncio
    async def test_missing_collection(self, gateway) -> None:
        """Should return an empty list before anything was stored."""
        assert await gateway.search([0.1] * EMBEDDING_SIZE, 3) == []

    @pytest.mark.asyncio
    async def test_query_dimension_mismatch(self, gateway) -> None:
        """Should refuse a query vector of the wrong dimension."""
        await gateway.upsert([Chunk(text=POLICY_SNIPPETS[0])])

        with pytest.raises(ConsistencyError):
            await gateway.search([0.1, 0.2, 0.3], 3)

    @pytest.mark.asyncio
    async def test_embedding_model_mismatch(self, gateway, memory_connection) -> None:
        """Should refuse to rank vectors stored by a different model."""
        await gateway.upsert([Chunk(text=text) for text in POLICY_SNIPPETS])
        other_embedder = EmbeddingTask(
            DeterministicFakeEmbedding(size=EMBEDDING_SIZE), model_name="other-model"
        )
        other_gateway = VectorStoreGateway(memory_connection, TEST_COLLECTION, other_embedder)

        with pytest.raises(ConsistencyError):
            await other_gateway.search(await other_embedder.embed("leave"), 3)

    @pytest.mark.asyncio
    async def test_upserted_embedded_chunk_keeps_metadata(self, gateway, embedder) -> None:
        """Should persist chunk metadata alongside the text."""
        chunk = Chunk(text=POLICY_SNIPPETS[0], metadata={"page": 4, "source": "policy.pdf"})
        vector = await embedder.embed(chunk.text)
        await gateway.upsert([EmbeddedChunk(chunk=chunk, vector=vector)])

        results = await gateway.search(vector, 1)

        assert results[0].record.metadata == {"page": 4, "source": "policy.pdf"}
