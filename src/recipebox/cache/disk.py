"""L2 disk cache: one flat directory, one file per key, mtime as freshness."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import threading
import time
from datetime import timedelta
from pathlib import Path

logger = logging.getLogger(__name__)

_DEFAULT_MAX_AGE = timedelta(days=7)
_TEMP_PREFIX = ".tmp-"


class DiskCache:
    """File-per-key persistent cache with age-based sweeping.

    All I/O errors are swallowed: a failed read is a miss and a failed
    write leaves no file. If the directory cannot be created the cache is
    unavailable and every operation becomes a no-op.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)
        self._lock = threading.Lock()
        self._available = False
        self.ensure_directory()

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def available(self) -> bool:
        return self._available

    def ensure_directory(self) -> bool:
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            self._available = True
        except OSError as e:
            logger.warning(
                "Cannot create image cache directory %s (%s); disk tier disabled",
                self._directory,
                e,
            )
            self._available = False
        return self._available

    def path_for(self, key: str) -> Path:
        return self._directory / key

    def read(self, key: str) -> bytes | None:
        if not self._available:
            return None
        path = self.path_for(key)
        try:
            data = path.read_bytes()
        except OSError:
            return None
        self._touch(path)
        return data

    def write(self, key: str, data: bytes) -> bool:
        """Atomically write data under key. Returns False on failure."""
        if not self._available:
            return False
        fd = -1
        tmp_name = ""
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=_TEMP_PREFIX, dir=self._directory)
            with os.fdopen(fd, "wb") as f:
                fd = -1
                f.write(data)
            os.replace(tmp_name, self.path_for(key))
            return True
        except OSError as e:
            logger.warning("Failed to write cache entry %s: %s", key, e)
            if fd >= 0:
                os.close(fd)
            if tmp_name:
                Path(tmp_name).unlink(missing_ok=True)
            return False

    def remove(self, key: str) -> None:
        if not self._available:
            return
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as e:
            logger.debug("Failed to remove cache entry %s: %s", key, e)

    def sweep_expired(self, max_age: timedelta | float = _DEFAULT_MAX_AGE) -> int:
        """Delete entries whose mtime is older than now - max_age.

        The threshold is fixed before the directory is enumerated, so a
        file written during the sweep always has a newer mtime and survives.
        Returns the number of entries removed.
        """
        if not self._available:
            return 0
        seconds = max_age.total_seconds() if isinstance(max_age, timedelta) else float(max_age)
        threshold = time.time() - seconds
        removed = 0
        with self._lock:
            try:
                with os.scandir(self._directory) as it:
                    candidates = list(it)
            except OSError as e:
                logger.warning("Cannot enumerate cache directory %s: %s", self._directory, e)
                return 0
            for item in candidates:
                if item.name.startswith("."):
                    continue
                try:
                    if not item.is_file(follow_symlinks=False):
                        continue
                    if item.stat(follow_symlinks=False).st_mtime < threshold:
                        os.unlink(item.path)
                        removed += 1
                except OSError as e:
                    logger.debug("Skipping %s during sweep: %s", item.path, e)
        if removed:
            logger.info("Swept %d expired image(s) from %s", removed, self._directory)
        return removed

    def clear(self) -> None:
        """Delete and recreate the cache directory."""
        with self._lock:
            try:
                shutil.rmtree(self._directory)
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning("Failed to clear cache directory %s: %s", self._directory, e)
            self.ensure_directory()

    @property
    def entry_count(self) -> int:
        return len(self._entries())

    @property
    def size_bytes(self) -> int:
        total = 0
        for item in self._entries():
            try:
                total += item.stat().st_size
            except OSError:
                continue
        return total

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._available and self.path_for(key).is_file()

    def _entries(self) -> list[os.DirEntry[str]]:
        if not self._available:
            return []
        try:
            with os.scandir(self._directory) as it:
                return [
                    item
                    for item in it
                    if not item.name.startswith(".") and item.is_file(follow_symlinks=False)
                ]
        except OSError:
            return []

    @staticmethod
    def _touch(path: Path) -> None:
        try:
            os.utime(path, None)
        except OSError as e:
            logger.debug("Failed to refresh mtime of %s: %s", path, e)
