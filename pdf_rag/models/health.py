"""
Health check models.

Dependencies: pydantic
System role: Health API contracts
"""

from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    service: str
    timestamp: datetime


class VectorStoreHealthResponse(BaseModel):
    """Vector store health response model."""

    status: str
    collection: str
    points: int
