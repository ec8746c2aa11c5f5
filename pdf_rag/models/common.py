"""
Common response models.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response schema."""

    success: bool = False
    error: str = Field(description="Error message")
    error_type: str | None = Field(default=None, description="Error category")
    retryable: bool = Field(default=False, description="Whether retrying may succeed")
    details: dict[str, Any] | None = Field(default=None, description="Additional error context")
