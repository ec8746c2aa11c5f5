"""
Document API endpoints.

Routes: POST /upload-pdf, GET /uploads

Dependencies: pdf_rag.core.orchestrator, pdf_rag.models.document
System role: Document upload HTTP API
"""

import logging
import secrets
import time
from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, Depends, File, UploadFile

from pdf_rag.api.deps import get_api_settings, get_orchestrator, get_processing_config
from pdf_rag.configs.api import ApiSettings
from pdf_rag.core.exceptions import InputError
from pdf_rag.core.orchestrator import Orchestrator
from pdf_rag.core.processing_config import ProcessingConfig
from pdf_rag.models.document import UploadedFile, UploadListResponse, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])

PDF_CONTENT_TYPE = "application/pdf"
READ_CHUNK_BYTES = 1024 * 1024


def stored_filename() -> str:
    """Unique name for an uploaded PDF."""
    return f"pdf-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}.pdf"


def cleanup_file(file_path: Path) -> None:
    """
    Remove a stored upload, logging instead of raising on failure.

    Args:
        file_path: Path to remove
    """
    try:
        file_path.unlink(missing_ok=True)
        logger.debug("Cleaned up upload", extra={"file_path": str(file_path)})
    except OSError as e:
        logger.warning(
            "Failed to clean up upload",
            extra={"file_path": str(file_path), "error": str(e)},
        )


async def save_upload(upload: UploadFile, destination: Path, max_bytes: int) -> int:
    """
    Stream an upload to disk, enforcing the size limit.

    Returns:
        int: Bytes written

    Raises:
        InputError: Upload exceeds max_bytes (nothing is left on disk)
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    size = 0
    with destination.open("wb") as out:
        while chunk := await upload.read(READ_CHUNK_BYTES):
            size += len(chunk)
            if size > max_bytes:
                break
            out.write(chunk)

    if size > max_bytes:
        cleanup_file(destination)
        raise InputError(
            f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB.",
            field="pdf",
            details={"max_bytes": max_bytes},
        )
    return size


@router.post("/upload-pdf", response_model=UploadResponse)
async def upload_pdf(
    pdf: UploadFile | None = File(default=None),
    orchestrator: Orchestrator = Depends(get_orchestrator),
    config: ProcessingConfig = Depends(get_processing_config),
    api_settings: ApiSettings = Depends(get_api_settings),
) -> UploadResponse:
    """
    Upload a PDF and ingest it into the knowledge base.

    Flow:
    1. Validate the upload is a PDF
    2. Stream it into the upload directory
    3. Run the ingestion pipeline
    4. Remove the stored file if ingestion fails

    Args:
        pdf: Multipart file field "pdf"
        orchestrator: Injected Orchestrator
        config: Injected ProcessingConfig
        api_settings: Injected upload settings

    Returns:
        UploadResponse: Ingestion summary

    Raises:
        InputError: Missing, non-PDF or oversized upload (400)
    """
    if pdf is None or not pdf.filename:
        raise InputError("No PDF file uploaded", field="pdf")

    original_name = pdf.filename
    if pdf.content_type != PDF_CONTENT_TYPE or Path(original_name).suffix.lower() != ".pdf":
        raise InputError(
            "Only PDF files are allowed!",
            field="pdf",
            details={"content_type": pdf.content_type, "filename": original_name},
        )

    destination = Path(api_settings.upload_dir) / stored_filename()
    size = await save_upload(pdf, destination, api_settings.max_upload_bytes)
    logger.info(
        f"{__name__}:upload_pdf - Stored upload",
        extra={"upload_name": original_name, "stored_as": destination.name, "size": size},
    )

    try:
        result = await orchestrator.process_pdf(str(destination), config)
    except Exception:
        cleanup_file(destination)
        raise

    return UploadResponse(
        message="PDF processed and stored in vector database successfully",
        filename=original_name,
        stored_as=destination.name,
        file_size=size,
        chunk_count=result.chunk_count,
        processed_at=datetime.now(timezone.utc),
    )


@router.get("/uploads", response_model=UploadListResponse)
async def list_uploads(
    api_settings: ApiSettings = Depends(get_api_settings),
) -> UploadListResponse:
    """
    List stored PDFs, newest first.

    Args:
        api_settings: Injected upload settings

    Returns:
        UploadListResponse: Stored files
    """
    upload_dir = Path(api_settings.upload_dir)
    if not upload_dir.is_dir():
        return UploadListResponse(files=[])

    files = []
    for path in upload_dir.glob("*.pdf"):
        stats = path.stat()
        files.append(
            UploadedFile(
                filename=path.name,
                uploaded_at=datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc),
                size=stats.st_size,
            )
        )
    files.sort(key=lambda item: item.uploaded_at, reverse=True)
    return UploadListResponse(files=files)
