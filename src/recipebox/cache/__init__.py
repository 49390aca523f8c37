"""Image cache subsystem — two-tier (memory + disk) with URL-derived keys."""

from recipebox.cache.disk import DiskCache
from recipebox.cache.keys import KeyScheme, derive_cache_key, digest_cache_key
from recipebox.cache.loader import ImageLoader, LoaderState
from recipebox.cache.manager import ImageCache
from recipebox.cache.memory import MemoryCache
from recipebox.cache.stats import CacheStats

__all__ = [
    "ImageCache",
    "ImageLoader",
    "LoaderState",
    "MemoryCache",
    "DiskCache",
    "CacheStats",
    "KeyScheme",
    "derive_cache_key",
    "digest_cache_key",
]
