"""
Quote cache
In-memory TTL cache for batch quotes, keyed by symbol

- entries expire after QUOTE_CACHE_TTL_SECONDS
- a write carrying an older fetch time than the cached entry is dropped,
  so a slow response can't overwrite a newer one
"""
import logging
import threading
import time
from typing import Callable, Dict, Iterable, NamedTuple, Optional

from sharesathi.config import settings
from sharesathi.schemas.stock import BatchQuote

logger = logging.getLogger(__name__)


class CacheEntry(NamedTuple):
    quote: BatchQuote
    fetched_at: float


class QuoteCache:
    """Per-symbol quote cache"""

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.QUOTE_CACHE_TTL_SECONDS
        self._clock = clock or time.time
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._clock()

    def _is_fresh(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.fetched_at < self.ttl_seconds

    def get(self, symbol: str) -> Optional[BatchQuote]:
        with self._lock:
            entry = self._entries.get(symbol)
            if entry is None or not self._is_fresh(entry):
                return None
            return entry.quote

    def get_many(self, symbols: Iterable[str]) -> Dict[str, BatchQuote]:
        """Fresh cached quotes for the given symbols (misses omitted)"""
        found = {}
        for symbol in symbols:
            quote = self.get(symbol)
            if quote is not None:
                found[symbol] = quote
        return found

    def put(self, symbol: str, quote: BatchQuote, fetched_at: Optional[float] = None) -> bool:
        """
        Store a quote fetched at fetched_at (defaults to now)

        Returns:
            False when the cache already holds a newer snapshot
        """
        fetched_at = fetched_at if fetched_at is not None else self._clock()

        with self._lock:
            current = self._entries.get(symbol)
            if current is not None and current.fetched_at > fetched_at:
                logger.debug(f"Dropping stale quote for {symbol}")
                return False
            self._entries[symbol] = CacheEntry(quote, fetched_at)
            return True

    def purge_expired(self) -> int:
        """Drop expired entries, returns how many were removed"""
        with self._lock:
            expired = [s for s, entry in self._entries.items() if not self._is_fresh(entry)]
            for symbol in expired:
                del self._entries[symbol]

        if expired:
            logger.info(f"Purged {len(expired)} expired quotes")
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


# Shared instance
quote_cache = QuoteCache()
