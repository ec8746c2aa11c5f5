"""FastAPI dependencies."""

from .dependencies import (
    ServiceCache,
    get_api_settings,
    get_orchestrator,
    get_processing_config,
    get_service_cache,
)

__all__ = [
    "ServiceCache",
    "get_api_settings",
    "get_orchestrator",
    "get_processing_config",
    "get_service_cache",
]
