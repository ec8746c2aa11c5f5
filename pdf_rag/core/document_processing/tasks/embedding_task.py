"""
Embedding generation task.

Turns chunk texts into vectors through a LangChain Embeddings model. Calls
pass through a token-bucket rate limiter and a concurrency cap (one call in
flight by default); results always come back in input order. The first
failed call cancels the rest of the batch and propagates.

Dependencies: langchain_core (Embeddings, InMemoryRateLimiter), asyncio
System role: Third stage of document ingestion pipeline
"""

import asyncio
import logging
from collections.abc import Sequence

from langchain_core.embeddings import Embeddings
from langchain_core.rate_limiters import BaseRateLimiter, InMemoryRateLimiter

from pdf_rag.core.exceptions import ConsistencyError, DependencyRejected
from pdf_rag.core.processing_config import ProcessingConfig
from pdf_rag.core.providers import build_embeddings
from pdf_rag.core.upstream import call_upstream

from ..models import Chunk, EmbeddedChunk

logger = logging.getLogger(__name__)

SERVICE_NAME = "embedding"


class EmbeddingTask:
    """Generate embeddings with bounded concurrency and rate limiting."""

    def __init__(
        self,
        embeddings: Embeddings,
        model_name: str,
        rate_limiter: BaseRateLimiter | None = None,
        max_concurrency: int = 1,
        timeout_seconds: float | None = None,
    ) -> None:
        """
        Initialize embedding task.

        Args:
            embeddings: LangChain embeddings model
            model_name: Name of the model, recorded alongside stored vectors
            rate_limiter: Limiter acquired before every call (None disables limiting)
            max_concurrency: Calls allowed in flight at once
            timeout_seconds: Per-call timeout

        Raises:
            ValueError: When model_name is empty or max_concurrency < 1
        """
        if not model_name:
            raise ValueError("model_name cannot be empty")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self._embeddings = embeddings
        self._model_name = model_name
        self._rate_limiter = rate_limiter
        self._max_concurrency = max_concurrency
        self._timeout = timeout_seconds

    @classmethod
    def from_config(
        cls,
        config: ProcessingConfig,
        embeddings: Embeddings | None = None,
    ) -> "EmbeddingTask":
        """
        Build an embedding task from processing configuration.

        Args:
            config: Processing configuration
            embeddings: Model to use instead of the configured Gemini model

        Returns:
            EmbeddingTask: Configured task
        """
        rate_limiter = InMemoryRateLimiter(
            requests_per_second=config.embed_requests_per_second,
            check_every_n_seconds=min(0.1, 0.5 / config.embed_requests_per_second),
            max_bucket_size=config.embed_max_concurrency,
        )
        return cls(
            embeddings=embeddings or build_embeddings(config),
            model_name=config.embedding_model,
            rate_limiter=rate_limiter,
            max_concurrency=config.embed_max_concurrency,
            timeout_seconds=config.request_timeout_seconds,
        )

    @property
    def model_name(self) -> str:
        return self._model_name

    async def embed(self, text: str) -> list[float]:
        """
        Embed a single query text.

        Args:
            text: Text to embed

        Returns:
            list[float]: Embedding vector

        Raises:
            DependencyUnavailable: Service unreachable or timed out
            DependencyRejected: Service refused the request or returned no vector
        """
        await self._acquire()
        vector = await call_upstream(
            SERVICE_NAME, self._embeddings.aembed_query(text), self._timeout
        )
        return self._checked(vector)

    async def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed document texts, preserving order.

        Args:
            texts: Texts to embed

        Returns:
            list[list[float]]: One vector per text, all of the same dimension

        Raises:
            DependencyUnavailable: Service unreachable or timed out
            DependencyRejected: Service refused a request
            ConsistencyError: Vectors of different dimensions came back
        """
        if not texts:
            return []

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def embed_one(text: str) -> list[float]:
            async with semaphore:
                await self._acquire()
                vectors = await call_upstream(
                    SERVICE_NAME, self._embeddings.aembed_documents([text]), self._timeout
                )
                if len(vectors) != 1:
                    raise DependencyRejected(
                        SERVICE_NAME, f"expected 1 vector, received {len(vectors)}"
                    )
                return self._checked(vectors[0])

        tasks = [asyncio.ensure_future(embed_one(text)) for text in texts]
        try:
            vectors = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        dimensions = {len(vector) for vector in vectors}
        if len(dimensions) > 1:
            raise ConsistencyError(
                "Embedding model returned vectors of different dimensions",
                details={"dimensions": sorted(dimensions), "model": self._model_name},
            )
        return list(vectors)

    async def embed_all(self, chunks: Sequence[Chunk]) -> list[EmbeddedChunk]:
        """
        Embed chunks, pairing each chunk with its vector.

        Args:
            chunks: Chunks in ingestion order

        Returns:
            list[EmbeddedChunk]: Pairs in the same order as chunks
        """
        logger.info(
            f"{__name__}:embed_all - Embedding {len(chunks)} chunks",
            extra={"chunk_count": len(chunks), "model": self._model_name},
        )
        vectors = await self.embed_texts([chunk.text for chunk in chunks])
        embedded = [
            EmbeddedChunk(chunk=chunk, vector=vector)
            for chunk, vector in zip(chunks, vectors)
        ]
        if embedded:
            logger.info(
                f"{__name__}:embed_all - Created {len(embedded)} embeddings",
                extra={
                    "dimension": embedded[0].dimension,
                    "sample": [round(value, 4) for value in embedded[0].vector[:5]],
                },
            )
        return embedded

    async def _acquire(self) -> None:
        if self._rate_limiter is not None:
            await self._rate_limiter.aacquire(blocking=True)

    def _checked(self, vector: Sequence[float]) -> list[float]:
        if not vector:
            raise DependencyRejected(SERVICE_NAME, "received an empty embedding")
        return [float(value) for value in vector]
