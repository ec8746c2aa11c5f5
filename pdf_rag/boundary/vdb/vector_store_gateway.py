"""
Vector store gateway over Qdrant.

Stores chunk text, metadata and vector as points in one collection and runs
nearest-neighbour search against it. The collection is created on first
upsert with cosine distance and the dimension of the first vector, so scores
are cosine similarities in [-1, 1] (higher is more similar). Each point also
records the embedding model that produced it; upsert and search refuse to mix
vectors across dimensions or models.

Dependencies: qdrant_client, pdf_rag.core.document_processing
System role: Persistence and similarity search for the RAG pipeline
"""

import logging
import uuid
from collections.abc import Sequence
from typing import Any

from qdrant_client import AsyncQdrantClient, models

from pdf_rag.boundary.vdb.qdrant_connection import SERVICE_NAME, QdrantConnection
from pdf_rag.boundary.vdb.vector_schemas import RecordInput, SearchResult, StoredRecord
from pdf_rag.core.document_processing.models import Chunk, EmbeddedChunk
from pdf_rag.core.document_processing.tasks import EmbeddingTask
from pdf_rag.core.exceptions import ConsistencyError, DependencyRejected, InputError
from pdf_rag.core.upstream import call_upstream

logger = logging.getLogger(__name__)

Record = RecordInput | EmbeddedChunk | Chunk


class VectorStoreGateway:
    """Upsert and search chunk vectors in a Qdrant collection."""

    def __init__(
        self,
        connection: QdrantConnection,
        collection: str,
        embedder: EmbeddingTask,
    ) -> None:
        """
        Initialize gateway.

        Args:
            connection: Shared Qdrant connection session
            collection: Collection name
            embedder: Embedder for records stored without a vector; its model
                is the collection's embedding model

        Raises:
            ValueError: When collection is empty
        """
        if not collection:
            raise ValueError("collection cannot be empty")

        self._connection = connection
        self._collection = collection
        self._embedder = embedder
        self._timeout = connection.timeout_seconds
        self._dimension: int | None = None

    @property
    def collection(self) -> str:
        return self._collection

    @property
    def embedding_model(self) -> str:
        return self._embedder.model_name

    async def connect(self) -> AsyncQdrantClient:
        """Return the shared client (opened on first use)."""
        return await self._connection.connect()

    async def upsert(self, records: Sequence[Record]) -> list[str]:
        """
        Store records in the collection.

        Records without a vector are embedded first. The call returns only
        after Qdrant has applied the whole batch.

        Args:
            records: RecordInput, EmbeddedChunk or Chunk values

        Returns:
            list[str]: Point IDs in record order

        Raises:
            ConsistencyError: Vector dimension or embedding model differs from
                the collection's
            DependencyUnavailable: Store or embedding service unreachable
            DependencyRejected: Store or embedding service refused the request
        """
        if not records:
            return []

        inputs = [self._as_input(record) for record in records]
        logger.info(
            f"{__name__}:upsert - Step 1: Preparing {len(inputs)} records",
            extra={"collection": self._collection, "record_count": len(inputs)},
        )

        missing = [i for i, record in enumerate(inputs) if record.vector is None]
        if missing:
            logger.info(
                f"{__name__}:upsert - Step 2: Embedding {len(missing)} records without vectors",
                extra={"embedding_model": self.embedding_model},
            )
            vectors = await self._embedder.embed_texts([inputs[i].text for i in missing])
            for i, vector in zip(missing, vectors):
                inputs[i] = inputs[i].model_copy(update={"vector": vector})

        dimensions = {len(record.vector or []) for record in inputs}
        if len(dimensions) != 1:
            raise ConsistencyError(
                "Records in one upsert must share a vector dimension",
                details={"dimensions": sorted(dimensions)},
            )
        dimension = dimensions.pop()
        if dimension == 0:
            raise InputError("Records cannot carry empty vectors", field="vector")

        client = await self.connect()
        await self._ensure_collection(client, dimension)

        ids = [str(uuid.uuid4()) for _ in inputs]
        points = [
            models.PointStruct(
                id=point_id,
                vector=record.vector,
                payload={
                    "text": record.text,
                    "metadata": record.metadata,
                    "embedding_model": self.embedding_model,
                },
            )
            for point_id, record in zip(ids, inputs)
        ]

        logger.info(
            f"{__name__}:upsert - Step 3: Writing {len(points)} points",
            extra={"collection": self._collection, "dimension": dimension},
        )
        result = await call_upstream(
            SERVICE_NAME,
            client.upsert(collection_name=self._collection, points=points, wait=True),
            self._timeout,
        )
        if result.status != models.UpdateStatus.COMPLETED:
            raise DependencyRejected(
                SERVICE_NAME,
                f"upsert finished with status {result.status}",
                details={"collection": self._collection},
            )
        return ids

    async def search(self, query_vector: Sequence[float], k: int) -> list[SearchResult]:
        """
        Return the k records most similar to query_vector.

        Args:
            query_vector: Embedding of the query
            k: Maximum results

        Returns:
            list[SearchResult]: Descending by score; empty when the
            collection does not exist or holds no records

        Raises:
            InputError: k <= 0 or empty query vector
            ConsistencyError: Dimension or embedding model mismatch
            DependencyUnavailable: Store unreachable
        """
        if isinstance(k, bool) or not isinstance(k, int) or k <= 0:
            raise InputError("k must be a positive integer", field="k", details={"k": k})
        if not query_vector:
            raise InputError("query vector cannot be empty", field="query_vector")

        client = await self.connect()
        dimension = await self._collection_dimension(client)
        if dimension is None:
            logger.info(
                f"{__name__}:search - Collection does not exist yet",
                extra={"collection": self._collection},
            )
            return []
        if len(query_vector) != dimension:
            raise ConsistencyError(
                "Query vector dimension does not match the collection",
                details={
                    "collection": self._collection,
                    "collection_dimension": dimension,
                    "query_dimension": len(query_vector),
                },
            )

        response = await call_upstream(
            SERVICE_NAME,
            client.query_points(
                collection_name=self._collection,
                query=list(query_vector),
                limit=k,
                with_payload=True,
            ),
            self._timeout,
        )

        results = [self._to_result(point) for point in response.points]
        foreign = {
            result.record.embedding_model
            for result in results
            if result.record.embedding_model != self.embedding_model
        }
        if foreign:
            raise ConsistencyError(
                "Collection holds vectors from a different embedding model",
                details={
                    "collection": self._collection,
                    "query_model": self.embedding_model,
                    "stored_models": sorted(str(model) for model in foreign),
                },
            )

        results.sort(key=lambda result: result.score, reverse=True)
        logger.info(
            f"{__name__}:search - Found {len(results)} results",
            extra={"collection": self._collection, "k": k},
        )
        return results[:k]

    async def count(self) -> int:
        """Number of points stored (0 when the collection does not exist)."""
        client = await self.connect()
        if await self._collection_dimension(client) is None:
            return 0
        result = await call_upstream(
            SERVICE_NAME,
            client.count(collection_name=self._collection, exact=True),
            self._timeout,
        )
        return result.count

    async def _ensure_collection(self, client: AsyncQdrantClient, dimension: int) -> None:
        async with self._connection.schema_lock:
            existing = await self._collection_dimension(client)
            if existing is None:
                logger.info(
                    f"{__name__}:upsert - Creating collection",
                    extra={"collection": self._collection, "dimension": dimension},
                )
                await call_upstream(
                    SERVICE_NAME,
                    client.create_collection(
                        collection_name=self._collection,
                        vectors_config=models.VectorParams(
                            size=dimension,
                            distance=models.Distance.COSINE,
                        ),
                    ),
                    self._timeout,
                )
                self._dimension = dimension
            elif existing != dimension:
                raise ConsistencyError(
                    "Vector dimension does not match the collection",
                    details={
                        "collection": self._collection,
                        "collection_dimension": existing,
                        "record_dimension": dimension,
                    },
                )
            else:
                stored_model = await self._stored_embedding_model(client)
                if stored_model is not None and stored_model != self.embedding_model:
                    raise ConsistencyError(
                        "Collection holds vectors from a different embedding model",
                        details={
                            "collection": self._collection,
                            "record_model": self.embedding_model,
                            "stored_model": stored_model,
                        },
                    )

    async def _stored_embedding_model(self, client: AsyncQdrantClient) -> str | None:
        points, _ = await call_upstream(
            SERVICE_NAME,
            client.scroll(
                collection_name=self._collection,
                limit=1,
                with_payload=["embedding_model"],
                with_vectors=False,
            ),
            self._timeout,
        )
        if not points:
            return None
        return (points[0].payload or {}).get("embedding_model")

    async def _collection_dimension(self, client: AsyncQdrantClient) -> int | None:
        exists = await call_upstream(
            SERVICE_NAME,
            client.collection_exists(collection_name=self._collection),
            self._timeout,
        )
        if not exists:
            self._dimension = None
            return None
        if self._dimension is not None:
            return self._dimension

        info = await call_upstream(
            SERVICE_NAME,
            client.get_collection(collection_name=self._collection),
            self._timeout,
        )
        vectors = info.config.params.vectors
        if not isinstance(vectors, models.VectorParams):
            raise ConsistencyError(
                "Collection uses named vectors, expected a single unnamed vector",
                details={"collection": self._collection},
            )
        self._dimension = vectors.size
        return self._dimension

    def _as_input(self, record: Record) -> RecordInput:
        if isinstance(record, RecordInput):
            return record
        if isinstance(record, EmbeddedChunk):
            return RecordInput(
                text=record.chunk.text,
                metadata=dict(record.chunk.metadata),
                vector=record.vector,
            )
        if isinstance(record, Chunk):
            return RecordInput(text=record.text, metadata=dict(record.metadata))
        raise InputError(
            f"Unsupported record type: {type(record).__name__}",
            field="records",
        )

    @staticmethod
    def _to_result(point: Any) -> SearchResult:
        payload = point.payload or {}
        return SearchResult(
            record=StoredRecord(
                id=str(point.id),
                text=payload.get("text", ""),
                metadata=payload.get("metadata") or {},
                embedding_model=payload.get("embedding_model"),
            ),
            score=point.score,
        )
