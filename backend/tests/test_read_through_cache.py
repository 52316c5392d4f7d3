from __future__ import annotations

import unittest

from walk_randomizer.core.errors import NotFoundFailure, UpstreamFailure
from walk_randomizer.lookups.cache import ReadThroughCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class RecordingLookup:
    def __init__(self):
        self.calls: list[str] = []
        self.failure: Exception | None = None

    def __call__(self, key: str) -> str:
        self.calls.append(key)
        if self.failure is not None:
            raise self.failure
        return f"{key}#{len(self.calls)}"


class TestReadThroughCache(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.lookup = RecordingLookup()
        self.cache = ReadThroughCache(ttl_seconds=60, lookup=self.lookup, clock=self.clock, name="test")

    def test_second_read_within_ttl_is_served_from_cache(self):
        first = self.cache.get("k")
        self.clock.now += 59.9
        second = self.cache.get("k")

        self.assertFalse(first.cached)
        self.assertTrue(second.cached)
        self.assertEqual(second.value, first.value)
        self.assertAlmostEqual(second.age_seconds, 59.9)
        self.assertEqual(self.lookup.calls, ["k"])

    def test_entry_at_exact_ttl_is_refreshed(self):
        self.cache.get("k")
        self.clock.now += 60
        result = self.cache.get("k")

        self.assertFalse(result.cached)
        self.assertEqual(result.value, "k#2")
        self.assertEqual(self.lookup.calls, ["k", "k"])

    def test_refresh_restarts_the_ttl_window(self):
        self.cache.get("k")
        self.clock.now += 61
        self.cache.get("k")
        self.clock.now += 30
        self.assertTrue(self.cache.get("k").cached)

    def test_keys_are_independent(self):
        self.cache.get("a")
        self.cache.get("b")
        self.assertEqual(self.cache.get("a").value, "a#1")
        self.assertEqual(self.cache.get("b").value, "b#2")
        self.assertEqual(len(self.cache), 2)

    def test_failed_lookup_is_not_cached(self):
        self.lookup.failure = NotFoundFailure("nothing")
        with self.assertRaises(NotFoundFailure):
            self.cache.get("k")
        self.assertNotIn("k", self.cache)

        self.lookup.failure = None
        result = self.cache.get("k")
        self.assertFalse(result.cached)
        self.assertEqual(len(self.lookup.calls), 2)

    def test_stale_entry_is_neither_served_nor_replaced_on_failure(self):
        self.cache.get("k")
        self.clock.now += 120
        self.lookup.failure = UpstreamFailure("down", status_code=503)

        with self.assertRaises(UpstreamFailure):
            self.cache.get("k")
        with self.assertRaises(UpstreamFailure):
            self.cache.get("k")
        self.assertIn("k", self.cache)

        self.lookup.failure = None
        self.assertEqual(self.cache.get("k").value, "k#4")

    def test_invalidate_and_clear(self):
        self.cache.get("a")
        self.cache.get("b")
        self.assertTrue(self.cache.invalidate("a"))
        self.assertFalse(self.cache.invalidate("a"))
        self.assertEqual(self.cache.clear(), 1)
        self.assertEqual(len(self.cache), 0)

    def test_ttl_must_be_positive(self):
        with self.assertRaises(ValueError):
            ReadThroughCache(ttl_seconds=0, lookup=self.lookup)


if __name__ == "__main__":
    unittest.main()
