"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from urllib.parse import urlsplit

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.common.logging import LOG_LEVELS

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = PROJECT_ROOT / "data"
DATA_EXPORTS_DIR = DATA_DIR / "exports"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_API_URL = "https://wonderful-kindness-cbe166af41.strapiapp.com/api"

# Upstream page-size cap for slug pre-enumeration
MAX_STATIC_PARAMS = 100


class RemotePatternSettings(BaseModel):
    """One allowed origin for externally hosted media."""
    protocol: str = "https"
    hostname: str
    pathname: str = "/**"


def _default_remote_patterns() -> list[RemotePatternSettings]:
    return [
        RemotePatternSettings(hostname="wonderful-kindness-cbe166af41.strapiapp.com"),
        RemotePatternSettings(hostname="wonderful-kindness-cbe166af41.media.strapiapp.com"),
        RemotePatternSettings(hostname="*.strapiapp.com"),
        RemotePatternSettings(hostname="*.media.strapiapp.com"),
    ]


class APISettings(BaseModel):
    """Content API connection settings."""
    base_url: str = DEFAULT_API_URL
    request_timeout: float | None = None  # None = transport default

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class SiteSettings(BaseModel):
    """Presentation strings shared by every page."""
    title: str = "EzyFleet Blog"
    description: str = "A blog powered by Strapi"
    owner: str = "EzyFleet"


class CacheSettings(BaseModel):
    """Page regeneration settings."""
    enabled: bool = True
    revalidate_seconds: int = Field(default=60, ge=0)


class ImageSettings(BaseModel):
    """Media allow-list."""
    remote_patterns: list[RemotePatternSettings] = Field(
        default_factory=_default_remote_patterns
    )


class BlogSettings(BaseModel):
    """Top-level application settings."""
    api: APISettings = Field(default_factory=APISettings)
    site: SiteSettings = Field(default_factory=SiteSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    images: ImageSettings = Field(default_factory=ImageSettings)
    static_params_limit: int = Field(default=MAX_STATIC_PARAMS, ge=0, le=MAX_STATIC_PARAMS)
    log_level: str = "INFO"

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(LOG_LEVELS)}")
        return value

    @classmethod
    def load(cls, settings_path: Path | None = None) -> BlogSettings:
        """Load settings from config/settings.yaml, then apply env overrides."""
        settings_path = settings_path or CONFIG_DIR / "settings.yaml"
        data: dict = {}
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        settings = cls(**data)
        settings.apply_env_overrides()
        return settings

    def apply_env_overrides(self) -> None:
        """Load overrides from environment."""
        if url := os.getenv("STRAPI_API_URL") or os.getenv("NEXT_PUBLIC_STRAPI_API_URL"):
            self.api = self.api.model_copy(update={"base_url": url.rstrip("/")})
        if timeout := os.getenv("REQUEST_TIMEOUT"):
            self.api = self.api.model_copy(update={"request_timeout": float(timeout)})
        if seconds := os.getenv("REVALIDATE_SECONDS"):
            self.cache = self.cache.model_copy(update={"revalidate_seconds": int(seconds)})
        if level := os.getenv("LOG_LEVEL"):
            self.log_level = level.upper()

    @property
    def media_origin(self) -> str:
        """Scheme and host of the CMS, used to absolutize relative media URLs."""
        parts = urlsplit(self.api.base_url)
        return f"{parts.scheme}://{parts.netloc}"
