"""
Chunk domain models for the ingestion pipeline.

A Chunk is a contiguous window of one page's text; an EmbeddedChunk pairs it
with the vector produced for it during ingestion.

Dependencies: pydantic
System role: Data structures passed between Chunker, Embedder and vector store
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Chunk(BaseModel):
    """Bounded text window with metadata inherited from its source page."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Chunk text content")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Page metadata plus chunk_index and start_index",
    )

    @property
    def chunk_index(self) -> int | None:
        """Position of this chunk in the ingestion run."""
        return self.metadata.get("chunk_index")


class EmbeddedChunk(BaseModel):
    """Chunk paired with its embedding vector."""

    model_config = ConfigDict(frozen=True)

    chunk: Chunk
    vector: list[float] = Field(description="Embedding vector")

    @property
    def dimension(self) -> int:
        return len(self.vector)
