"""
Task modules for document processing pipeline.

Exports: ParsingTask, ChunkingTask, EmbeddingTask, chunk_documents
"""

from pdf_rag.core.exceptions import ParsingError

from .chunking_task import ChunkingTask, chunk_documents
from .embedding_task import EmbeddingTask
from .parsing_task import ParsingTask

__all__ = [
    "ParsingTask",
    "ParsingError",
    "ChunkingTask",
    "chunk_documents",
    "EmbeddingTask",
]
