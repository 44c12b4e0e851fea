"""
Application configuration using Pydantic Settings.

Automatically loads environment variables from .env files. Every external
service the upload pipeline talks to is configured here; the settings are
validated once at process start and a missing value stops the service.
"""

from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Object storage (Google Cloud Storage)
    storage_bucket: str
    google_service_account: dict[str, Any] = Field(
        ...,
        description="Service account JSON used for object storage",
    )
    storage_timeout_seconds: float = 60.0
    signed_url_expires: datetime = datetime(2500, 3, 1, tzinfo=timezone.utc)

    # Document store (required - must be set in .env or environment)
    database_url: str

    # OpenAI
    openai_api_key: str
    extraction_model: str = "gpt-4.1"
    extraction_timeout_seconds: float = 120.0

    # Google Sheets mirror
    google_sheet_id: str
    google_service_account_email: str
    google_private_key: str
    sheets_timeout_seconds: float = 30.0

    # Debug flags
    sql_debug: bool = False
    debug: bool = False

    model_config = SettingsConfigDict(
        # Load from .env file in the package directory
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        # Case insensitive environment variable names
        case_sensitive=False,
    )

    @field_validator("google_service_account")
    @classmethod
    def require_project_id(cls, v: dict[str, Any]) -> dict[str, Any]:
        """The service account is unusable without a project id."""
        if not v.get("project_id"):
            raise ValueError(
                "Service account configuration is missing or invalid (no project_id)"
            )
        return v

    @field_validator("google_private_key")
    @classmethod
    def unescape_private_key(cls, v: str) -> str:
        """Keys pasted into .env files carry literal \\n sequences."""
        return v.replace("\\n", "\n")

    @property
    def project_id(self) -> str:
        return self.google_service_account["project_id"]


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration loaded from environment.

    Raises:
        pydantic.ValidationError: If a required setting is missing or invalid.
    """
    return Settings()
