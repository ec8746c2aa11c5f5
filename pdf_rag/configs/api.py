"""
HTTP server configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Upload and server bind configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """Settings for the FastAPI server."""

    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3001, description="Bind port")
    upload_dir: str = Field(default="uploads", description="Directory for uploaded PDFs")
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Largest accepted upload (10MB)",
    )
