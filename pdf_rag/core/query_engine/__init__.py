"""
Retrieval and grounded generation.

Exports: QueryEngine, RAGAnswer
"""

from .query_engine import QueryEngine, validate_query
from .query_schema import RAGAnswer

__all__ = [
    "QueryEngine",
    "RAGAnswer",
    "validate_query",
]
