"""Package-level default configuration values."""

from __future__ import annotations

from typing import Any

# Default recipe feed
DEFAULT_FEED_URL = "https://d3jbb8n5wk0qxi.cloudfront.net/recipes.json"
DEFAULT_FEED_TIMEOUT = 10.0
DEFAULT_FEED_MAX_RETRIES = 3

# Default image cache settings
DEFAULT_CACHE_DIR_NAME = "ImageCache"
DEFAULT_MEMORY_COUNT_LIMIT = 100
DEFAULT_MEMORY_COST_LIMIT_MB = 50.0
DEFAULT_MAX_AGE_DAYS = 7.0
DEFAULT_JPEG_QUALITY = 80
DEFAULT_KEY_SCHEME = "sanitized"

# Default image loading settings
DEFAULT_IMAGE_TIMEOUT = 15.0
DEFAULT_SINGLE_FLIGHT = False
DEFAULT_PREFETCH_CONCURRENCY = 8

# Validation
DEFAULT_SKIP_INVALID = False

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "feed_url": DEFAULT_FEED_URL,
        "feed_timeout": DEFAULT_FEED_TIMEOUT,
        "feed_max_retries": DEFAULT_FEED_MAX_RETRIES,
        "cache_dir": None,
        "memory_count_limit": DEFAULT_MEMORY_COUNT_LIMIT,
        "memory_cost_limit_mb": DEFAULT_MEMORY_COST_LIMIT_MB,
        "max_age_days": DEFAULT_MAX_AGE_DAYS,
        "jpeg_quality": DEFAULT_JPEG_QUALITY,
        "key_scheme": DEFAULT_KEY_SCHEME,
        "image_timeout": DEFAULT_IMAGE_TIMEOUT,
        "single_flight": DEFAULT_SINGLE_FLIGHT,
        "prefetch_concurrency": DEFAULT_PREFETCH_CONCURRENCY,
        "skip_invalid": DEFAULT_SKIP_INVALID,
        "log_level": DEFAULT_LOG_LEVEL,
    }
