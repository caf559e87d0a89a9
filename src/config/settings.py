"""Application settings using Pydantic Settings.

Centralized configuration for the reporting pipeline.

Environment variables:
- REPORTS_API_BASE_URL: Backend REST API root (e.g. https://rent.example.com/api)
- REPORTS_API_TOKEN: Bearer token sent with every backend request
- REPORTS_EXPORT_DOWNLOAD_DIR: Directory exported files are written into
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class ApiSettings(BaseSettings):
    """Backend API connection settings."""

    model_config = SettingsConfigDict(
        env_prefix="REPORTS_API_",
        extra="ignore",
    )

    base_url: str = Field(default="http://localhost:5000/api", description="Backend API root")
    token: Optional[str] = Field(default=None, description="Bearer token for the backend")
    timeout: float = Field(default=20.0, description="Request timeout in seconds")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class ExportSettings(BaseSettings):
    """Export rendering configuration."""

    model_config = SettingsConfigDict(
        env_prefix="REPORTS_EXPORT_",
        extra="ignore",
    )

    download_dir: Path = Field(default=Path("downloads"), description="Where exported files land")
    currency_symbol: str = Field(default="KSh", description="Prefix for money values")
    date_format: str = Field(default="%d %b %Y", description="strftime format for dates")
    datetime_format: str = Field(default="%d %b %Y, %H:%M", description="strftime format for timestamps")

    # Logo settings
    logo_size_mm: float = Field(default=28.0, description="Rendered logo edge in millimetres")
    max_logo_bytes: int = Field(default=5 * 1024 * 1024, description="Reject logos larger than this")
    circular_logo: bool = Field(default=True, description="Crop the logo to a circle")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="REPORTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application info
    name: str = Field(default="Rental Reports", description="Application name")
    environment: str = Field(default="development", description="Environment name")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_json: bool = Field(default=False, description="Emit JSON formatted logs")
    log_file: Optional[Path] = Field(default=None, description="Optional JSON log file")

    # Branding cache
    company_info_ttl: float = Field(default=300.0, description="Company info cache TTL in seconds (5 min)")

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    # Nested settings (loaded separately)
    @property
    def api(self) -> ApiSettings:
        return ApiSettings()

    @property
    def export(self) -> ExportSettings:
        return ExportSettings()

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment in ("production", "prod", "staging")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings instance.

    Returns:
        Settings: Cached settings loaded from environment.
    """
    return Settings()
