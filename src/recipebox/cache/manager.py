"""Image cache facade — orchestrates L1 (memory) and L2 (disk) tiers."""

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import timedelta
from pathlib import Path

from PIL import Image

from recipebox.cache.disk import DiskCache
from recipebox.cache.keys import KeyScheme, Locator, key_function
from recipebox.cache.memory import MemoryCache
from recipebox.cache.stats import CacheStats
from recipebox.config import defaults
from recipebox.config.settings import default_cache_dir
from recipebox.utils.image import decode_image, encode_jpeg, image_cost

logger = logging.getLogger(__name__)


class ImageCache:
    """Two-tier image cache: L1 in-memory LRU → L2 flat directory on disk.

    One instance is built by the application's composition root and shared
    by every loader. The cache never fetches from the network and never
    raises for I/O or decoding trouble: any failure degrades to a miss.

    Host lifecycle events map onto on_low_memory(), on_background() and
    on_terminate().
    """

    def __init__(
        self,
        directory: Path | None = None,
        count_limit: int = defaults.DEFAULT_MEMORY_COUNT_LIMIT,
        cost_limit_mb: float = defaults.DEFAULT_MEMORY_COST_LIMIT_MB,
        max_age: timedelta = timedelta(days=defaults.DEFAULT_MAX_AGE_DAYS),
        jpeg_quality: int = defaults.DEFAULT_JPEG_QUALITY,
        key_scheme: KeyScheme | str = KeyScheme.SANITIZED,
        sweep_on_start: bool = True,
    ) -> None:
        self._memory: MemoryCache[Image.Image] = MemoryCache(
            count_limit=count_limit, cost_limit_mb=cost_limit_mb
        )
        self._disk = DiskCache(directory or default_cache_dir())
        self._max_age = max_age
        self._jpeg_quality = jpeg_quality
        self._key_for = key_function(key_scheme)
        self._stats = CacheStats()
        self._stats_lock = threading.Lock()

        if sweep_on_start:
            self._disk.sweep_expired(self._max_age)

    @property
    def directory(self) -> Path:
        return self._disk.directory

    @property
    def max_age(self) -> timedelta:
        return self._max_age

    def key_for(self, locator: Locator) -> str:
        return self._key_for(locator)

    # ── Lookup ──

    def image_for(self, locator: Locator) -> Image.Image | None:
        """Return the cached image for a locator, or None. L1 first, then L2."""
        key = self._key_for(locator)
        img = self._lookup_memory(key)
        if img is not None:
            return img
        return self._lookup_disk(key)

    async def aimage_for(self, locator: Locator) -> Image.Image | None:
        """Like image_for, with the disk tier read on a worker thread."""
        key = self._key_for(locator)
        img = self._lookup_memory(key)
        if img is not None:
            return img
        return await asyncio.to_thread(self._lookup_disk, key)

    def cached_in_memory(self, locator: Locator) -> bool:
        return self._key_for(locator) in self._memory

    # ── Store / remove ──

    def store_image(self, image: Image.Image, locator: Locator) -> None:
        """Store in L1 immediately, then encode and write to L2."""
        key = self._key_for(locator)
        self._memory.set(key, image, image_cost(image))
        self._write_disk(key, image)

    async def astore_image(self, image: Image.Image, locator: Locator) -> None:
        """Like store_image; the memory write is visible before the first await."""
        key = self._key_for(locator)
        self._memory.set(key, image, image_cost(image))
        await asyncio.to_thread(self._write_disk, key, image)

    def store_data(self, data: bytes, locator: Locator) -> Image.Image | None:
        """Decode fetched bytes and store them. Returns None if undecodable."""
        try:
            img = decode_image(data)
        except ValueError as e:
            logger.debug("Not caching %s: %s", locator, e)
            return None
        self.store_image(img, locator)
        return img

    def remove_image(self, locator: Locator) -> None:
        key = self._key_for(locator)
        self._memory.remove(key)
        self._disk.remove(key)

    def clear_all_cache(self) -> None:
        self._memory.clear()
        self._disk.clear()
        with self._stats_lock:
            self._stats = CacheStats()

    # ── Maintenance ──

    def clear_memory(self) -> None:
        self._memory.clear()

    def sweep_expired(self) -> int:
        return self._disk.sweep_expired(self._max_age)

    def on_low_memory(self) -> None:
        logger.info("Low-memory signal: dropping %d in-memory image(s)", len(self._memory))
        self.clear_memory()

    def on_background(self) -> int:
        return self.sweep_expired()

    def on_terminate(self) -> None:
        # Disk entries persist across restarts.
        self.clear_memory()

    def stats(self) -> CacheStats:
        """Return aggregate cache statistics."""
        with self._stats_lock:
            counters = self._stats.model_copy()
        return counters.model_copy(
            update={
                "memory_entries": len(self._memory),
                "memory_cost_bytes": self._memory.total_cost,
                "disk_entries": self._disk.entry_count,
                "disk_size_bytes": self._disk.size_bytes,
                "disk_available": self._disk.available,
            }
        )

    # ── Internals ──

    def _lookup_memory(self, key: str) -> Image.Image | None:
        img = self._memory.get(key)
        if img is not None:
            self._count(memory_hit=True)
        return img

    def _lookup_disk(self, key: str) -> Image.Image | None:
        data = self._disk.read(key)
        if data is None:
            self._count(miss=True)
            return None
        try:
            img = decode_image(data)
        except ValueError as e:
            # Drop the corrupt file so the next lookup goes to the network.
            logger.warning("Discarding corrupt cache entry %s: %s", key, e)
            self._disk.remove(key)
            self._count(miss=True)
            return None
        self._memory.set(key, img, image_cost(img))
        self._count(disk_hit=True)
        return img

    def _write_disk(self, key: str, image: Image.Image) -> None:
        try:
            data = encode_jpeg(image, quality=self._jpeg_quality)
        except (OSError, ValueError) as e:
            logger.warning("Cannot encode image for %s; keeping memory copy only: %s", key, e)
            return
        self._disk.write(key, data)

    def _count(
        self, memory_hit: bool = False, disk_hit: bool = False, miss: bool = False
    ) -> None:
        with self._stats_lock:
            if memory_hit:
                self._stats.hits += 1
                self._stats.memory_hits += 1
            elif disk_hit:
                self._stats.hits += 1
                self._stats.disk_hits += 1
            elif miss:
                self._stats.misses += 1
