"""
Vector database schemas.

Pydantic models for records written to and read from the vector store.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from typing import Any

from pydantic import BaseModel, Field


class RecordInput(BaseModel):
    """Record to upsert; the gateway embeds text when vector is omitted."""

    text: str = Field(description="Chunk text content")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Chunk metadata")
    vector: list[float] | None = Field(default=None, description="Precomputed embedding")


class StoredRecord(BaseModel):
    """Record as persisted in the collection."""

    id: str = Field(description="Point identifier")
    text: str = Field(description="Chunk text content")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Chunk metadata")
    embedding_model: str | None = Field(default=None, description="Model that produced the vector")


class SearchResult(BaseModel):
    """Single result from vector search."""

    record: StoredRecord
    score: float = Field(description="Cosine similarity in [-1, 1]; higher is more similar")
