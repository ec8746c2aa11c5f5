"""
Vector store boundary.

Exports: QdrantConnection, VectorStoreGateway, RecordInput, StoredRecord, SearchResult
"""

from .qdrant_connection import QdrantConnection
from .vector_schemas import RecordInput, SearchResult, StoredRecord
from .vector_store_gateway import VectorStoreGateway

__all__ = [
    "QdrantConnection",
    "VectorStoreGateway",
    "RecordInput",
    "StoredRecord",
    "SearchResult",
]
