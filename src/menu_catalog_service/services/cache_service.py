"""In-memory memoization cache with per-entry TTL and LRU eviction.

One instance is created per process and injected into the catalog service.
Values are stored by reference and never copied: callers must treat what
``get`` returns as read-only.
"""

import asyncio
import contextlib
import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from menu_catalog_service.observability.metrics import (
    record_cache_eviction,
    record_cache_hit,
    record_cache_miss,
    record_cache_size_change,
)

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A cached value and the monotonic time at which it expires."""

    value: Any
    expires_at: float


@dataclass
class CacheStats:
    """Point-in-time cache counters.

    Attributes:
        hits: Lookups that returned a live entry
        misses: Lookups that found nothing or an expired entry
        keys: Entries currently held (expired ones may linger until swept)
        evictions: Entries removed by expiry or to make room
        max_entries: Configured capacity
    """

    hits: int
    misses: int
    keys: int
    evictions: int
    max_entries: int


class MemoryCache:
    """Thread-safe TTL cache bounded by entry count.

    When a new key is inserted into a full cache, expired entries are purged
    first and then the least-recently-used entry is evicted. A background
    asyncio task started with ``start()`` sweeps expired entries every
    ``check_period`` seconds and logs statistics every ``stats_period``.

    Every public operation degrades instead of raising: an internal failure
    is logged and reported as a miss, ``False`` or a no-op.
    """

    def __init__(
        self,
        default_ttl: int = 300,
        max_entries: int = 100,
        check_period: int = 60,
        stats_period: int = 300,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            default_ttl: TTL in seconds used when ``set`` is called without one
            max_entries: Maximum number of entries held at once
            check_period: Seconds between background sweeps of expired entries
            stats_period: Seconds between statistics log lines
            clock: Monotonic time source, injectable for tests
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")

        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self.check_period = check_period
        self.stats_period = stats_period
        self._clock = clock

        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._sweeper: asyncio.Task[None] | None = None

    def get(self, key: str) -> Any | None:
        """Return the live value for ``key``, or None.

        Expired entries are removed on read and never returned.
        """
        try:
            with self._lock:
                entry = self._entries.get(key)
                if entry is not None and entry.expires_at <= self._clock():
                    del self._entries[key]
                    self._evictions += 1
                    record_cache_eviction("expired")
                    record_cache_size_change(-1)
                    entry = None

                if entry is None:
                    self._misses += 1
                else:
                    self._entries.move_to_end(key)
                    self._hits += 1
        except Exception:
            logger.exception(f"Cache get error for key {key}")
            return None

        if entry is None:
            record_cache_miss()
            logger.debug(f"Cache MISS: {key}")
            return None

        record_cache_hit()
        logger.debug(f"Cache HIT: {key}")
        return entry.value

    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Insert or overwrite ``key``.

        Args:
            key: Cache key
            value: Value to store (not copied)
            ttl: Seconds until expiry; None, zero or negative means ``default_ttl``

        Returns:
            True if stored, False if the operation failed
        """
        if ttl is None or ttl <= 0:
            ttl = self.default_ttl

        try:
            with self._lock:
                now = self._clock()
                is_new = key not in self._entries
                if is_new and len(self._entries) >= self.max_entries:
                    self._make_room(now)

                self._entries[key] = CacheEntry(value=value, expires_at=now + ttl)
                self._entries.move_to_end(key)
        except Exception:
            logger.exception(f"Cache set error for key {key}")
            return False

        if is_new:
            record_cache_size_change(1)
        logger.debug(f"Cache SET: {key} (TTL: {ttl}s)")
        return True

    def delete(self, key: str) -> bool:
        """Remove ``key``; True if an entry was removed."""
        try:
            with self._lock:
                removed = self._entries.pop(key, None) is not None
        except Exception:
            logger.exception(f"Cache delete error for key {key}")
            return False

        if removed:
            record_cache_size_change(-1)
        logger.debug(f"Cache DELETE: {key} (success: {removed})")
        return removed

    def clear(self) -> None:
        """Drop every entry."""
        try:
            with self._lock:
                count = len(self._entries)
                self._entries.clear()
        except Exception:
            logger.exception("Error clearing cache")
            return

        if count:
            record_cache_size_change(-count)
        logger.info("Cache cleared")

    def get_stats(self) -> CacheStats:
        """Return current hit/miss/key/eviction counters.

        If the entry count cannot be read, ``keys`` is reported as 0.
        """
        try:
            with self._lock:
                keys = len(self._entries)
        except Exception:
            logger.exception("Error reading cache size")
            keys = 0

        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            keys=keys,
            evictions=self._evictions,
            max_entries=self.max_entries,
        )

    def sweep(self) -> int:
        """Remove all expired entries.

        Returns:
            Number of entries removed, 0 if the sweep failed
        """
        try:
            with self._lock:
                now = self._clock()
                expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
                for key in expired:
                    del self._entries[key]
                self._evictions += len(expired)
        except Exception:
            logger.exception("Cache sweep error")
            return 0

        if expired:
            record_cache_eviction("expired", len(expired))
            record_cache_size_change(-len(expired))
            logger.debug(f"Cache sweep removed {len(expired)} expired entries")
        return len(expired)

    def start(self) -> None:
        """Start the background sweeper on the running event loop."""
        if self._sweeper is not None and not self._sweeper.done():
            return
        self._sweeper = asyncio.get_running_loop().create_task(self._sweep_loop())
        logger.info(f"Cache sweeper started (every {self.check_period}s)")

    async def stop(self) -> None:
        """Cancel the background sweeper and wait for it to finish."""
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._sweeper
        self._sweeper = None
        logger.info("Cache sweeper stopped")

    async def _sweep_loop(self) -> None:
        last_stats = self._clock()
        while True:
            await asyncio.sleep(self.check_period)
            try:
                self.sweep()
                if self._clock() - last_stats >= self.stats_period:
                    last_stats = self._clock()
                    self._log_stats()
            except Exception:
                logger.exception("Cache sweep failed")

    def _log_stats(self) -> None:
        stats = self.get_stats()
        if stats.keys > 0:
            logger.debug(
                "Cache stats",
                extra={
                    "keys": stats.keys,
                    "hits": stats.hits,
                    "misses": stats.misses,
                    "evictions": stats.evictions,
                },
            )

    def _make_room(self, now: float) -> None:
        # Caller holds the lock
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]
        if expired:
            self._evictions += len(expired)
            record_cache_eviction("expired", len(expired))
            record_cache_size_change(-len(expired))

        while len(self._entries) >= self.max_entries:
            key, _ = self._entries.popitem(last=False)
            self._evictions += 1
            record_cache_eviction("capacity")
            record_cache_size_change(-1)
            logger.debug(f"Cache EVICT: {key} (capacity {self.max_entries})")
