"""Configuration models for the species catalog.

This module contains all configuration-related Pydantic models used throughout the application.
"""

import secrets

from pydantic import BaseModel, Field, field_validator


class LoggingConfig(BaseModel):
    """Structlog-based logging configuration."""

    level: str = "INFO"
    json_logs: bool | None = None  # None = auto-detect based on environment
    include_caller: bool = False  # Include file:line info (useful for debugging)
    extra_fields: dict[str, str] = Field(default_factory=lambda: {"service": "biocatalog"})


class LookupConfig(BaseModel):
    """Reference encyclopedia lookup used to autofill species forms."""

    api_url: str = "https://en.wikipedia.org/w/api.php"
    timeout: float = 10.0  # Seconds per request
    thumbnail_size: int = 500  # Pixel width of the requested thumbnail
    user_agent: str = "biocatalog/1.0 (species data entry)"

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Reject non-positive timeouts."""
        if v <= 0:
            raise ValueError(f"Invalid lookup timeout {v}. Must be greater than zero.")
        return v


class SessionConfig(BaseModel):
    """Signed cookie session settings."""

    secret_key: str = Field(default_factory=lambda: secrets.token_urlsafe(32))
    https_only: bool = False  # Set when served behind TLS
    lifetime: int = 14 * 24 * 3600  # Seconds


class CatalogConfig(BaseModel):
    """Configuration settings for the species catalog application."""

    site_name: str = "Species Catalog"

    # Logging settings
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Wikipedia autofill
    lookup: LookupConfig = Field(default_factory=LookupConfig)

    # Browser sessions
    session: SessionConfig = Field(default_factory=SessionConfig)

    # Number of description characters shown on a species card
    preview_length: int = 150
