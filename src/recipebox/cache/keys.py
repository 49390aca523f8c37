"""Cache key derivation — map an image locator to a filesystem-safe key."""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from enum import StrEnum

import httpx

# Reserved file-name characters, substituted in this order.
_RESERVED_CHARS = ("/", ":", "?", "&", "=")

Locator = str | httpx.URL


class KeyScheme(StrEnum):
    SANITIZED = "sanitized"
    SHA256 = "sha256"


def canonical_locator(locator: Locator) -> str:
    """Canonical string form of a locator."""
    return str(locator)


def derive_cache_key(locator: Locator) -> str:
    """Derive a cache key by substituting reserved characters with '_'.

    Not collision-free: "a/b" and "a:b" map to the same key. Use
    digest_cache_key where that matters.
    """
    key = canonical_locator(locator)
    for char in _RESERVED_CHARS:
        key = key.replace(char, "_")
    return key


def digest_cache_key(locator: Locator) -> str:
    """SHA256 hex digest of the canonical locator."""
    return hashlib.sha256(canonical_locator(locator).encode("utf-8")).hexdigest()


def key_function(scheme: KeyScheme | str = KeyScheme.SANITIZED) -> Callable[[Locator], str]:
    """Return the key deriver for a scheme name."""
    scheme = KeyScheme(scheme)
    if scheme == KeyScheme.SHA256:
        return digest_cache_key
    return derive_cache_key
