"""
Query API models.

Dependencies: pydantic
System role: Query API contracts
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

SOURCE_PREVIEW_CHARS = 200


class QueryRequest(BaseModel):
    """Request schema for knowledge base queries."""

    # Validated by the pipeline so a wrong type maps to the same 400 as a blank query.
    query: Any = Field(default=None, description="User question")
    top_k: int = Field(default=3, ge=1, le=50, description="Chunks to retrieve")


class QuerySource(BaseModel):
    """Retrieved chunk shown as evidence."""

    id: int = Field(description="1-based rank")
    score: float = Field(description="Cosine similarity, higher is more similar")
    content: str = Field(description="Chunk preview")
    metadata: dict[str, Any]


class QueryResponse(BaseModel):
    """Response schema for knowledge base queries."""

    success: bool = True
    query: str
    answer: str
    sources: list[QuerySource]
    timestamp: datetime
