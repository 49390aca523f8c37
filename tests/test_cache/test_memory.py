"""Tests for in-memory LRU cache."""

import threading

from recipebox.cache.memory import MemoryCache


class TestMemoryCache:
    def test_get_set(self):
        cache = MemoryCache()
        cache.set("k1", "value", cost=10)
        assert cache.get("k1") == "value"

    def test_get_miss(self):
        cache = MemoryCache()
        assert cache.get("nonexistent") is None

    def test_count_limit_never_exceeded(self):
        cache = MemoryCache(count_limit=100)
        for i in range(250):
            cache.set(f"k{i}", i, cost=1)
            assert len(cache) <= 100
        assert len(cache) == 100
        assert cache.get("k0") is None
        assert cache.get("k249") == 249

    def test_lru_order_preserved(self):
        cache = MemoryCache(count_limit=2)
        cache.set("k1", 1)
        cache.set("k2", 2)
        # Access k1 to make it most recently used
        cache.get("k1")
        cache.set("k3", 3)
        assert cache.get("k1") == 1
        assert cache.get("k2") is None
        assert cache.get("k3") == 3

    def test_cost_limit_evicts_oldest(self):
        # 1 MB limit, three 400 KB entries
        cache = MemoryCache(cost_limit_mb=1)
        cache.set("k1", "a", cost=400 * 1024)
        cache.set("k2", "b", cost=400 * 1024)
        cache.set("k3", "c", cost=400 * 1024)
        assert cache.get("k1") is None
        assert cache.get("k2") == "b"
        assert cache.total_cost == 800 * 1024

    def test_oversized_entry_not_stored(self):
        cache = MemoryCache(cost_limit_mb=1)
        cache.set("small", "s", cost=10)
        assert cache.set("huge", "h", cost=2 * 1024 * 1024) is False
        assert cache.get("huge") is None
        assert cache.get("small") == "s"

    def test_overwrite_existing_key(self):
        cache = MemoryCache()
        cache.set("k1", "first", cost=100)
        cache.set("k1", "second", cost=50)
        assert cache.get("k1") == "second"
        assert len(cache) == 1
        assert cache.total_cost == 50

    def test_remove(self):
        cache = MemoryCache()
        cache.set("k1", "v", cost=5)
        cache.remove("k1")
        cache.remove("missing")
        assert "k1" not in cache
        assert cache.total_cost == 0

    def test_clear(self):
        cache = MemoryCache()
        cache.set("k1", 1, cost=1)
        cache.set("k2", 2, cost=1)
        cache.clear()
        assert len(cache) == 0
        assert cache.total_cost == 0
        assert cache.get("k1") is None

    def test_keys_lru_order(self):
        cache = MemoryCache()
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        assert cache.keys() == ["b", "a"]

    def test_concurrent_writers_respect_bounds(self):
        cache = MemoryCache(count_limit=50, cost_limit_mb=1)

        def writer(prefix):
            for i in range(200):
                cache.set(f"{prefix}-{i}", i, cost=1024)
                cache.get(f"{prefix}-{i // 2}")

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) <= 50
        assert cache.total_cost == len(cache) * 1024
