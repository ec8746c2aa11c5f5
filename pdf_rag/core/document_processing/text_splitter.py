"""
Character-window text splitter with exact overlap.

Each page is cut into windows text[start:end] with end - start <= chunk_size.
The window end is moved back to the strongest boundary available (paragraph,
line, sentence, word) in the second half of the window; a raw character cut
is used when none exists. The next window starts chunk_overlap characters
before the previous end, so consecutive chunks of a page share exactly
chunk_overlap characters and dropping those shared prefixes reconstructs the
page text. Whitespace is never stripped.

Overlap does not cross page boundaries: each page starts a fresh window
sequence.

Dependencies: langchain_text_splitters, langchain_core
System role: Chunk boundary policy for the ingestion pipeline
"""

import copy
from collections.abc import Iterable, Sequence
from typing import Any

from langchain_core.documents import Document
from langchain_text_splitters import TextSplitter

from pdf_rag.core.processing_config import validate_chunk_geometry

DEFAULT_SEPARATORS: tuple[str, ...] = ("\n\n", "\n", ". ", "! ", "? ", "; ", ", ", " ")


class OverlapTextSplitter(TextSplitter):
    """Split text into bounded windows that share an exact character overlap."""

    def __init__(
        self,
        chunk_size: int = 500,
        chunk_overlap: int = 75,
        separators: Sequence[str] | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize splitter.

        Args:
            chunk_size: Maximum window length in characters
            chunk_overlap: Characters repeated at the start of the next window
            separators: Boundaries in order of preference

        Raises:
            ChunkingConfigError: chunk_size <= 0 or chunk_overlap outside [0, chunk_size)
        """
        validate_chunk_geometry(chunk_size, chunk_overlap)
        kwargs.setdefault("strip_whitespace", False)
        super().__init__(chunk_size=chunk_size, chunk_overlap=chunk_overlap, **kwargs)
        self._separators = tuple(separators) if separators else DEFAULT_SEPARATORS

    def spans(self, text: str) -> list[tuple[int, int]]:
        """
        Compute window boundaries for text.

        Args:
            text: Page text

        Returns:
            list[tuple[int, int]]: (start, end) offsets; empty for blank text
        """
        if not text.strip():
            return []

        spans: list[tuple[int, int]] = []
        start = 0
        while len(text) - start > self._chunk_size:
            end = self._break_point(text, start)
            spans.append((start, end))
            start = end - self._chunk_overlap
        spans.append((start, len(text)))
        return spans

    def _break_point(self, text: str, start: int) -> int:
        limit = start + self._chunk_size
        # Boundaries must land past the overlap so every window advances.
        floor = start + max(self._chunk_overlap, self._chunk_size // 2)
        for separator in self._separators:
            index = text.rfind(separator, floor, limit)
            if index != -1:
                return index + len(separator)
        return limit

    def split_text(self, text: str) -> list[str]:
        return [text[start:end] for start, end in self.spans(text)]

    def create_documents(
        self,
        texts: list[str],
        metadatas: Iterable[dict[Any, Any]] | None = None,
    ) -> list[Document]:
        """
        Split each text and attach its metadata to every window.

        chunk_index counts windows across all texts in the call; start_index
        is the window offset inside its own text.
        """
        metadatas = list(metadatas) if metadatas is not None else [{} for _ in texts]
        documents: list[Document] = []
        for text, metadata in zip(texts, metadatas):
            for start, end in self.spans(text):
                documents.append(
                    Document(
                        page_content=text[start:end],
                        metadata={
                            **copy.deepcopy(metadata),
                            "chunk_index": len(documents),
                            "start_index": start,
                        },
                    )
                )
        return documents
