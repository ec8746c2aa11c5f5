"""
Models for the ingestion pipeline.

Exports: Chunk, EmbeddedChunk, IngestionResult
"""

from .chunk import Chunk, EmbeddedChunk
from .ingestion_result import IngestionResult

__all__ = [
    "Chunk",
    "EmbeddedChunk",
    "IngestionResult",
]
