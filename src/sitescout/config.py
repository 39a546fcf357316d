"""
Configuration for sitescout.

Uses Pydantic Settings for type-safe environment variable loading. These are
the defaults the CLI and MCP server build requests from; the library itself
only needs an ExtractionRequest.
"""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from sitescout.exceptions import ConfigurationError
from sitescout.models import (
    DEFAULT_CRAWL_DELAY_MS,
    DEFAULT_MAX_URLS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)

load_dotenv()

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class SitescoutSettings(BaseSettings):
    """sitescout settings."""

    model_config = ConfigDict(
        env_prefix="SITESCOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Extraction defaults
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent sent with every request")
    max_urls: int = Field(default=DEFAULT_MAX_URLS, ge=1, le=10000, description="Maximum URLs per extraction")
    timeout_seconds: int = Field(
        default=DEFAULT_TIMEOUT_SECONDS, ge=1, le=600, description="Overall extraction timeout (seconds)"
    )
    crawl_delay_ms: int = Field(
        default=DEFAULT_CRAWL_DELAY_MS, ge=0, le=5000, description="Delay between crawled pages (ms)"
    )

    # HTTP
    request_timeout: float = Field(default=30.0, gt=0, le=600, description="Per-request timeout (seconds)")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        upper = v.upper()
        if upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {VALID_LOG_LEVELS}")
        return upper


@lru_cache
def get_settings() -> SitescoutSettings:
    """
    Get cached settings instance.

    Raises:
        ConfigurationError: If an environment value is out of range or malformed.
    """
    try:
        return SitescoutSettings()
    except ValidationError as e:
        first = e.errors()[0]
        setting = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigurationError(f"Invalid configuration: {first.get('msg')}", setting=setting or None) from e
