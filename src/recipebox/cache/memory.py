"""L1 in-memory LRU cache bounded by entry count and total cost."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

_DEFAULT_COUNT_LIMIT = 100
_DEFAULT_COST_LIMIT_MB = 50

T = TypeVar("T")


@dataclass(frozen=True)
class MemoryEntry(Generic[T]):
    key: str
    value: T
    cost: int


class MemoryCache(Generic[T]):
    """Thread-safe in-memory LRU cache with count- and cost-based eviction."""

    def __init__(
        self,
        count_limit: int = _DEFAULT_COUNT_LIMIT,
        cost_limit_mb: float = _DEFAULT_COST_LIMIT_MB,
    ) -> None:
        self._store: OrderedDict[str, MemoryEntry[T]] = OrderedDict()
        self._count_limit = count_limit
        self._cost_limit_bytes = int(cost_limit_mb * 1024 * 1024)
        self._total_cost = 0
        self._lock = threading.Lock()

    def get(self, key: str) -> T | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            # Move to end (most recently used)
            self._store.move_to_end(key)
            return entry.value

    def set(self, key: str, value: T, cost: int = 0) -> bool:
        """Insert or replace an entry. Returns False if it can never fit."""
        cost = max(cost, 0)
        with self._lock:
            self._remove(key)
            if cost > self._cost_limit_bytes:
                logger.debug("Entry %s (%d bytes) exceeds memory cost limit", key, cost)
                return False
            # Evict until both bounds hold with the new entry
            while self._store and (
                len(self._store) >= self._count_limit
                or self._total_cost + cost > self._cost_limit_bytes
            ):
                self._evict_oldest()
            self._store[key] = MemoryEntry(key=key, value=value, cost=cost)
            self._total_cost += cost
            return True

    def remove(self, key: str) -> None:
        with self._lock:
            self._remove(key)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._total_cost = 0

    def keys(self) -> list[str]:
        """Keys from least to most recently used."""
        with self._lock:
            return list(self._store)

    @property
    def count_limit(self) -> int:
        return self._count_limit

    @property
    def cost_limit_bytes(self) -> int:
        return self._cost_limit_bytes

    @property
    def total_cost(self) -> int:
        return self._total_cost

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def _remove(self, key: str) -> None:
        entry = self._store.pop(key, None)
        if entry:
            self._total_cost -= entry.cost

    def _evict_oldest(self) -> None:
        _, entry = self._store.popitem(last=False)
        self._total_cost -= entry.cost
        logger.debug("Evicted %s from memory cache", entry.key)
