"""
Document parsing task using LangChain PyPDFLoader.

Converts a PDF on disk into one LangChain Document per physical page, in
page order, with normalized `page` (1-based) and `source` metadata.

Dependencies: langchain_community.document_loaders, pypdf
System role: First stage of document ingestion pipeline
"""

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from langchain_community.document_loaders import PyPDFLoader
from langchain_core.document_loaders import BaseLoader
from langchain_core.documents import Document

from pdf_rag.core.exceptions import DependencyUnavailable, ParsingError

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"


class ParsingTask:
    """Parse PDF documents into page-level LangChain Documents."""

    def __init__(
        self,
        timeout_seconds: float | None = None,
        loader_factory: Callable[[str], BaseLoader] = PyPDFLoader,
    ) -> None:
        """
        Initialize parsing task.

        Args:
            timeout_seconds: Upper bound on PDF extraction time (None waits indefinitely)
            loader_factory: Callable building a loader for a file path
        """
        self._timeout = timeout_seconds
        self._loader_factory = loader_factory

    async def parse(self, file_path: str) -> list[Document]:
        """
        Parse PDF document into page Documents.

        Args:
            file_path: Path to PDF document

        Returns:
            list[Document]: One Document per page, in page order

        Raises:
            ParsingError: File missing, unreadable, not a PDF, or without text
            DependencyUnavailable: Extraction exceeded the timeout
        """
        path = self._validate_path(file_path)

        logger.info(f"{__name__}:parse - Loading PDF", extra={"file_path": file_path})
        loader = self._loader_factory(str(path))
        try:
            pages = await asyncio.wait_for(loader.aload(), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise DependencyUnavailable(
                "pdf-parser", f"PDF extraction timed out after {self._timeout}s"
            ) from e
        except ParsingError:
            raise
        except Exception as e:
            raise ParsingError(f"Failed to parse PDF: {e}", file_path) from e

        if not any(page.page_content.strip() for page in pages):
            raise ParsingError("PDF document contains no extractable text", file_path)

        documents = [
            Document(
                page_content=page.page_content,
                metadata={**page.metadata, "page": number, "source": str(path)},
            )
            for number, page in enumerate(pages, start=1)
        ]
        logger.info(
            f"{__name__}:parse - Loaded {len(documents)} pages",
            extra={"file_path": file_path, "page_count": len(documents)},
        )
        return documents

    def _validate_path(self, file_path: str) -> Path:
        path = Path(file_path)
        if not path.is_file():
            raise ParsingError(f"File not found: {file_path}", file_path)

        if path.suffix.lower() != ".pdf":
            raise ParsingError(
                f"Unsupported file format: {path.suffix}. Only PDF files are supported.",
                file_path,
            )

        try:
            with path.open("rb") as f:
                header = f.read(len(PDF_MAGIC))
        except OSError as e:
            raise ParsingError(f"File is not readable: {e}", file_path) from e

        if header != PDF_MAGIC:
            raise ParsingError("File is not a valid PDF", file_path)
        return path
