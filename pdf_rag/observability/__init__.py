"""Logging, correlation IDs and request middleware."""

from pdf_rag.observability.logger import configure_logging

__all__ = ["configure_logging"]
