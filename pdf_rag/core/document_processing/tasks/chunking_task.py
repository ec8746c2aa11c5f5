"""
Text chunking task using OverlapTextSplitter.

Splits page documents into bounded, overlapping chunks while preserving the
originating page's metadata.

Dependencies: langchain_core, pdf_rag.core.document_processing.text_splitter
System role: Second stage of document ingestion pipeline
"""

import logging
from collections.abc import Sequence

from langchain_core.documents import Document

from ..models import Chunk
from ..text_splitter import OverlapTextSplitter

logger = logging.getLogger(__name__)


def chunk_documents(
    documents: Sequence[Document],
    chunk_size: int,
    chunk_overlap: int,
) -> list[Chunk]:
    """
    Split page documents into chunks.

    Args:
        documents: Page documents in page order
        chunk_size: Maximum chunk size in characters
        chunk_overlap: Overlap between consecutive chunks of one page

    Returns:
        list[Chunk]: Chunks in document order

    Raises:
        ChunkingConfigError: Invalid size/overlap (raised before any splitting)
    """
    return ChunkingTask(chunk_size, chunk_overlap).chunk(documents)


class ChunkingTask:
    """Split documents into chunks using OverlapTextSplitter."""

    def __init__(
        self,
        chunk_size: int = 500,
        chunk_overlap: int = 75,
    ) -> None:
        """
        Initialize chunking task with splitter configuration.

        Args:
            chunk_size: Maximum chunk size in characters
            chunk_overlap: Overlap between consecutive chunks

        Raises:
            ChunkingConfigError: Invalid size/overlap
        """
        self._splitter = OverlapTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
        )

    def chunk(self, documents: Sequence[Document]) -> list[Chunk]:
        """
        Split documents into chunks.

        Args:
            documents: LangChain Documents to split

        Returns:
            list[Chunk]: Chunks carrying page metadata plus chunk_index and start_index
        """
        pieces = self._splitter.split_documents(list(documents))
        chunks = [Chunk(text=piece.page_content, metadata=piece.metadata) for piece in pieces]
        logger.info(
            f"{__name__}:chunk - Created {len(chunks)} chunks from {len(documents)} pages",
            extra={"page_count": len(documents), "chunk_count": len(chunks)},
        )
        return chunks
