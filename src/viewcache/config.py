"""
Configuration management using pydantic-settings.

Loads configuration from VIEWCACHE_* environment variables and .env files.
These settings are the defaults a TemplateCache falls back to; callers can
override every value explicitly through CacheConfig or the setters.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Optional:
        VIEWCACHE_TEMPLATE_DIR: Base directory for relative template paths
        VIEWCACHE_CACHE_DIR: Application cache root
        VIEWCACHE_PAGE_CACHE_DIR: Subdirectory of CACHE_DIR for rendered pages
        VIEWCACHE_CACHE_LIFETIME: Seconds a rendered page stays fresh
        VIEWCACHE_CACHING: Whether rendered output is cached
        VIEWCACHE_RENDER_ON_READ_ERROR: Re-render when a fresh entry can't be read
        VIEWCACHE_LOG_LEVEL: Logging level
        VIEWCACHE_LOG_FILE: JSON log file path
    """

    model_config = SettingsConfigDict(
        env_prefix="VIEWCACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    TEMPLATE_DIR: Path | None = Field(
        default=None, description="Base directory for relative template paths"
    )

    # Directories
    CACHE_DIR: Path = Field(default=Path(".cache"), description="Cache directory")
    PAGE_CACHE_DIR: str = Field(
        default="pages", description="Page cache subdirectory under CACHE_DIR"
    )

    # Caching behaviour
    CACHE_LIFETIME: int = Field(
        default=3000, ge=0, description="Seconds a cache entry is considered fresh"
    )
    CACHING: bool = Field(default=False, description="Enable the output cache")
    RENDER_ON_READ_ERROR: bool = Field(
        default=False,
        description="Re-render instead of failing when a fresh entry can't be read",
    )

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    LOG_FILE: Path | None = Field(default=None, description="JSON log file")

    @field_validator("PAGE_CACHE_DIR")
    @classmethod
    def validate_page_cache_dir(cls, v: str) -> str:
        """Validate that PAGE_CACHE_DIR is a single relative path segment."""
        path = Path(v)
        if not v or path.is_absolute() or len(path.parts) != 1 or v in (".", ".."):
            raise ValueError(
                "PAGE_CACHE_DIR must be a single relative directory name"
            )
        return v

    @property
    def page_cache_dir(self) -> Path:
        """Default page cache directory (CACHE_DIR / PAGE_CACHE_DIR)."""
        return self.CACHE_DIR / self.PAGE_CACHE_DIR

    def redacted_display(self) -> dict[str, str | int | bool | None]:
        """Return settings for display."""
        return {
            "TEMPLATE_DIR": str(self.TEMPLATE_DIR) if self.TEMPLATE_DIR else None,
            "CACHE_DIR": str(self.CACHE_DIR),
            "PAGE_CACHE_DIR": self.PAGE_CACHE_DIR,
            "CACHE_LIFETIME": self.CACHE_LIFETIME,
            "CACHING": self.CACHING,
            "RENDER_ON_READ_ERROR": self.RENDER_ON_READ_ERROR,
            "LOG_LEVEL": self.LOG_LEVEL,
            "LOG_FILE": str(self.LOG_FILE) if self.LOG_FILE else None,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
