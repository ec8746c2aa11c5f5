"""
Document upload models.

Dependencies: pydantic
System role: Upload API contracts
"""

from datetime import datetime

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Response for a processed upload."""

    success: bool = True
    message: str
    filename: str = Field(description="Original filename")
    stored_as: str = Field(description="Filename under the upload directory")
    file_size: int = Field(description="Size in bytes")
    chunk_count: int = Field(description="Chunks stored in the knowledge base")
    processed_at: datetime


class UploadedFile(BaseModel):
    """PDF stored in the upload directory."""

    filename: str
    uploaded_at: datetime
    size: int


class UploadListResponse(BaseModel):
    """Response listing stored uploads, newest first."""

    success: bool = True
    files: list[UploadedFile]
