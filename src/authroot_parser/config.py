"""
Configuration — typed, validated settings loaded from environment/.env.

Uses pydantic-settings to:
  - Load from environment variables (prefix AUTHROOT_)
  - Fall back to .env file
  - Validate types and constraints at startup

Only AppSettings is a BaseSettings instance. Sub-settings are plain BaseModel
classes populated via env_nested_delimiter="__", so AUTHROOT_FETCH__URL maps
to fetch.url, AUTHROOT_DECODER__STRICT_CONTENT_TYPES to
decoder.strict_content_types, etc.

The decoder itself is configuration-free; everything here is handed to the
adapters explicitly by the composition root.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from authroot_parser.adapters.http_client import DEFAULT_AUTHROOT_URL

# Resolve the .env file relative to the project root (two levels above this file),
# so settings load correctly regardless of the working directory at runtime.
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"


class FetchSettings(BaseModel):
    """
    Download of authrootstl.cab.

    `timeout_seconds` bounds each HTTP request; `deadline_seconds` bounds the
    whole download including retries.
    """

    url: str = Field(default=DEFAULT_AUTHROOT_URL, description="authrootstl.cab URL")
    timeout_seconds: float = Field(default=30.0, ge=1, description="Per-request timeout")
    deadline_seconds: float = Field(default=120.0, ge=1, description="Overall download deadline")
    max_attempts: int = Field(default=3, ge=1, le=10, description="Attempts on transient errors")


class DecoderSettings(BaseModel):
    """authroot.stl decoding options."""

    strict_content_types: bool = Field(
        default=True,
        description="Reject PKCS#7 envelopes whose content types are not signedData / szOID_CTL",
    )


class AppSettings(BaseSettings):
    """
    Root application settings — aggregates all sub-settings.

    Load order (highest priority first):
      1. Environment variables
      2. .env file
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTHROOT_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    fetch: FetchSettings = Field(default_factory=lambda: FetchSettings())
    decoder: DecoderSettings = Field(default_factory=lambda: DecoderSettings())

    log_level: str = Field(default="WARNING")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Reject names the logging module does not know."""
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level
