"""
Google Generative AI credentials.

Dependencies: pydantic, pydantic_settings
System role: Credential source for embedding and chat models
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSettings(BaseSettings):
    """Credentials for Gemini embedding and chat models."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str = Field(default="", description="Google Generative AI API key (GOOGLE_API_KEY)")
