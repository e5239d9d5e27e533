"""
Configuration management for orsr_parser.

Uses pydantic-settings for type-safe configuration with automatic
environment variable loading (ORSR_* variables or a .env file) and validation.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from orsr_parser.constants import (
    CACHE_TTL_PAGES,
    ORSR_DELAY_EVERY,
    ORSR_RATE_LIMIT,
    ORSR_REQUEST_DELAY,
    ORSR_REQUEST_TIMEOUT,
    OUTPUT_FORMATS,
    URL_BASE,
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every field can be overridden with an ORSR_-prefixed variable,
    e.g. ORSR_CACHE_ENABLED=1 or ORSR_OUTPUT_FORMAT=json.
    """

    model_config = SettingsConfigDict(
        env_prefix="ORSR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars
    )

    # Register access
    base_url: str = Field(
        default=URL_BASE,
        description="Base URL of the register web site",
    )
    request_timeout: float = Field(
        default=ORSR_REQUEST_TIMEOUT,
        gt=0,
        description="Timeout in seconds for a single HTTP request",
    )
    requests_per_second: float = Field(
        default=ORSR_RATE_LIMIT,
        gt=0,
        description="Upper bound on request rate",
    )
    request_delay: float = Field(
        default=ORSR_REQUEST_DELAY,
        ge=0,
        description="Pause in seconds inserted after every Nth request",
    )
    delay_every: int = Field(
        default=ORSR_DELAY_EVERY,
        ge=1,
        description="N for request_delay",
    )
    user_agent: str = Field(
        default="orsr_parser (+https://www.orsr.sk)",
        description="User-Agent header sent to the register",
    )

    # Response cache
    cache_enabled: bool = Field(
        default=False,
        description="Read and write fetched pages from the local disk cache",
    )
    cache_dir: Path = Field(
        default=Path("data/cache"),
        description="Directory for the disk cache",
    )
    cache_ttl_days: int | None = Field(
        default=CACHE_TTL_PAGES,
        description="Expiry of cached pages in days (None = never)",
    )

    # Markup handling
    repair_markup: bool = Field(
        default=True,
        description="Repair malformed HTML before building the tree",
    )
    strict_markup: bool = Field(
        default=True,
        description="Raise MarkupError on unusable pages instead of returning an empty record",
    )

    # Output
    output_format: str = Field(
        default="",
        description="Default output format: json, xml, raw or empty (python objects)",
    )

    @field_validator("base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Strip whitespace and trailing slash from the base URL."""
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    @field_validator("output_format", mode="before")
    @classmethod
    def normalize_output_format(cls, v: str | None) -> str:
        """Lowercase the format and reject unknown values."""
        if v is None:
            return ""
        if isinstance(v, str):
            v = v.strip().lower()
            if v not in OUTPUT_FORMATS:
                raise ValueError(f"Output format [{v}] not supported.")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


def get_base_url() -> str:
    """Get register base URL from settings."""
    return get_settings().base_url


def get_cache_dir() -> Path:
    """Get disk cache directory from settings."""
    return get_settings().cache_dir
