"""Image cache statistics model."""

from __future__ import annotations

from pydantic import BaseModel


class CacheStats(BaseModel):
    """Aggregate cache statistics."""

    memory_entries: int = 0
    memory_cost_bytes: int = 0
    disk_entries: int = 0
    disk_size_bytes: int = 0
    disk_available: bool = True
    hits: int = 0
    memory_hits: int = 0
    disk_hits: int = 0
    misses: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    @property
    def disk_size_mb(self) -> float:
        return self.disk_size_bytes / (1024 * 1024)
