"""
tests/test_quote_cache.py
-------------------------
TTL expiry and stale-write protection in QuoteCache.
"""

import unittest

from sharesathi.schemas.stock import BatchQuote
from sharesathi.services.quote_cache import QuoteCache


class _FakeClock:

    def __init__(self, start=1000.0):
        self.t = start

    def __call__(self):
        return self.t


def _quote(symbol, price):
    return BatchQuote(
        symbol=symbol,
        name=symbol,
        short_name=symbol,
        price=price,
        change=0,
        change_percent=0,
    )


class TestQuoteCache(unittest.TestCase):

    def setUp(self):
        self.clock = _FakeClock()
        self.cache = QuoteCache(ttl_seconds=300, clock=self.clock)

    def test_hit_within_ttl(self):
        self.cache.put("A", _quote("A", 10))
        self.clock.t += 299
        self.assertEqual(self.cache.get("A").price, 10)

    def test_miss_after_ttl(self):
        self.cache.put("A", _quote("A", 10))
        self.clock.t += 300
        self.assertIsNone(self.cache.get("A"))

    def test_get_many_omits_misses(self):
        self.cache.put("A", _quote("A", 10))
        found = self.cache.get_many(["A", "B"])
        self.assertEqual(list(found), ["A"])

    def test_older_fetch_does_not_overwrite_newer(self):
        self.assertTrue(self.cache.put("A", _quote("A", 20), fetched_at=1010))
        self.assertFalse(self.cache.put("A", _quote("A", 10), fetched_at=1005))
        self.assertEqual(self.cache.get("A").price, 20)

    def test_newer_fetch_overwrites(self):
        self.cache.put("A", _quote("A", 10), fetched_at=1000)
        self.assertTrue(self.cache.put("A", _quote("A", 20), fetched_at=1001))
        self.assertEqual(self.cache.get("A").price, 20)

    def test_purge_expired(self):
        self.cache.put("A", _quote("A", 10))
        self.clock.t += 200
        self.cache.put("B", _quote("B", 10))
        self.clock.t += 150
        self.assertEqual(self.cache.purge_expired(), 1)
        self.assertEqual(len(self.cache), 1)
        self.assertIsNotNone(self.cache.get("B"))

    def test_clear(self):
        self.cache.put("A", _quote("A", 10))
        self.cache.clear()
        self.assertEqual(len(self.cache), 0)


if __name__ == "__main__":
    unittest.main()
