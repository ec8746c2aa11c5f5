"""
Query engine response schema.

Dependencies: pydantic, pdf_rag.boundary.vdb
System role: Answer returned by the query engine and the orchestrator
"""

from pydantic import BaseModel, Field

from pdf_rag.boundary.vdb.vector_schemas import SearchResult


class RAGAnswer(BaseModel):
    """Generated answer together with the evidence it was grounded on."""

    results: list[SearchResult] = Field(
        default_factory=list,
        description="Retrieved records, descending by score",
    )
    answer: str = Field(description="Answer generated from the retrieved context")
