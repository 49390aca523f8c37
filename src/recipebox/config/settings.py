"""Typed settings resolved from the configuration hierarchy."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from recipebox.cache.keys import KeyScheme
from recipebox.config import defaults
from recipebox.config.hierarchy import load_config_hierarchy


def default_cache_root() -> Path:
    """Platform cache-storage location ($XDG_CACHE_HOME or ~/.cache)."""
    xdg = os.environ.get("XDG_CACHE_HOME")
    root = Path(xdg) if xdg else Path.home() / ".cache"
    return root / "recipebox"


def default_cache_dir() -> Path:
    return default_cache_root() / defaults.DEFAULT_CACHE_DIR_NAME


class Settings(BaseModel):
    feed_url: str = defaults.DEFAULT_FEED_URL
    feed_timeout: float = defaults.DEFAULT_FEED_TIMEOUT
    feed_max_retries: int = Field(default=defaults.DEFAULT_FEED_MAX_RETRIES, ge=1)
    cache_dir: Path = Field(default_factory=default_cache_dir)
    memory_count_limit: int = Field(default=defaults.DEFAULT_MEMORY_COUNT_LIMIT, ge=1)
    memory_cost_limit_mb: float = Field(default=defaults.DEFAULT_MEMORY_COST_LIMIT_MB, gt=0)
    max_age_days: float = Field(default=defaults.DEFAULT_MAX_AGE_DAYS, gt=0)
    jpeg_quality: int = Field(default=defaults.DEFAULT_JPEG_QUALITY, ge=1, le=95)
    key_scheme: KeyScheme = KeyScheme(defaults.DEFAULT_KEY_SCHEME)
    image_timeout: float = defaults.DEFAULT_IMAGE_TIMEOUT
    single_flight: bool = defaults.DEFAULT_SINGLE_FLIGHT
    prefetch_concurrency: int = Field(default=defaults.DEFAULT_PREFETCH_CONCURRENCY, ge=1)
    skip_invalid: bool = defaults.DEFAULT_SKIP_INVALID
    log_level: str = defaults.DEFAULT_LOG_LEVEL

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _resolve_cache_dir(cls, value: Any) -> Any:
        if value is None or value == "":
            return default_cache_dir()
        return Path(value).expanduser()

    @classmethod
    def load(cls, **overrides: Any) -> Settings:
        """Resolve the full hierarchy and validate it."""
        merged = load_config_hierarchy(**overrides)
        known = {k: v for k, v in merged.items() if k in cls.model_fields}
        return cls(**known)
