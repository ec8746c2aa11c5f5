"""
Ingestion result model.

Represents the outcome of processing a PDF through the pipeline.

Dependencies: pydantic
System role: Return type for Orchestrator.process_pdf()
"""

from pydantic import BaseModel, Field


class IngestionResult(BaseModel):
    """Result of a completed ingestion run."""

    source: str = Field(description="Path of the ingested PDF")
    page_count: int = Field(description="Pages returned by the loader")
    chunk_count: int = Field(description="Chunks stored in the vector store")
    vector_dimension: int = Field(description="Dimension of the stored vectors")
    collection: str = Field(description="Vector store collection written to")
    processing_time_ms: float = Field(description="Total processing time in milliseconds")
