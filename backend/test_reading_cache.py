from __future__ import annotations

import os
import unittest
from unittest.mock import patch

from backend.reading_cache import ReadingCache, reading_cache_key


class TestReadingCache(unittest.TestCase):
    def test_ttl_expiry(self) -> None:
        cache = ReadingCache(max_items=10, default_ttl=60)
        with patch.object(cache, "_now", return_value=1000.0):
            cache.set("k", "v", ttl=1)
            self.assertEqual(cache.get("k"), "v")
        with patch.object(cache, "_now", return_value=1001.5):
            self.assertIsNone(cache.get("k"))

    def test_non_positive_ttl_never_expires(self) -> None:
        cache = ReadingCache(max_items=10, default_ttl=0)
        with patch.object(cache, "_now", return_value=1000.0):
            cache.set("k", "v")
        with patch.object(cache, "_now", return_value=10 ** 9):
            self.assertEqual(cache.get("k"), "v")

    def test_lru_eviction_when_capacity_exceeded(self) -> None:
        cache = ReadingCache(max_items=2, default_ttl=0)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        self.assertIsNone(cache.get("a"))
        self.assertEqual(cache.get("b"), 2)
        self.assertEqual(cache.get("c"), 3)
        self.assertEqual(len(cache), 2)

    def test_get_refreshes_lru_order(self) -> None:
        cache = ReadingCache(max_items=2, default_ttl=0)
        cache.set("a", 1)
        cache.set("b", 2)
        _ = cache.get("a")
        cache.set("c", 3)
        self.assertEqual(cache.get("a"), 1)
        self.assertIsNone(cache.get("b"))

    def test_env_defaults(self) -> None:
        with patch.dict(os.environ, {"READING_CACHE_MAX_ITEMS": "1", "READING_CACHE_TTL_SEC": "42"}):
            cache = ReadingCache()
        self.assertEqual(cache.default_ttl, 42)
        cache.set("a", 1)
        cache.set("b", 2)
        self.assertEqual(len(cache), 1)

    def test_clear(self) -> None:
        cache = ReadingCache(max_items=4, default_ttl=0)
        cache.set("a", 1)
        cache.clear()
        self.assertEqual(len(cache), 0)


class TestReadingCacheKey(unittest.TestCase):
    def test_key_normalizes_model(self) -> None:
        self.assertEqual(
            reading_cache_key("abc123", "name_reading_v1", " GPT-4o-mini "),
            "reading::name_reading_v1::gpt-4o-mini::abc123",
        )


if __name__ == "__main__":
    unittest.main()
