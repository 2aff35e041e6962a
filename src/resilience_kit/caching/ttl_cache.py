"""
TTL Cache - Per-Entry Expiry with Optional LRU Bound.

Backs the fallback executor's cache strategies.

Design Notes:
    - An entry is visible iff clock() < expires_at
    - Expired entries are purged lazily when their key is next read
    - TTL <= 0 stores nothing: the entry is already expired
    - No method awaits, so a read and the following write of one
      strategy cannot be interleaved by another task
    - Guarded by a reentrant lock for multi-threaded hosts
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional

from resilience_kit.config.models import CacheConfig

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass
class CacheEntry:
    """A single cache entry with its expiry."""

    value: Any
    expires_at: float
    created_at: float = 0.0

    def is_expired(self, now: float) -> bool:
        """Check if entry has expired at ``now``."""
        return now >= self.expires_at


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0
    current_entries: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class TTLCache:
    """
    Key-value store with per-entry time-to-live.

    Features:
        - Lazy expiry on access, no background sweep
        - Optional max entry count with LRU eviction
        - Injectable clock for deterministic tests
        - Statistics tracking

    Cache Key Format:
        Any string; ``make_key`` builds f"{operation}:{params_hash}".
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Initialize cache.

        Args:
            config: Cache configuration
            clock: Monotonic time source in seconds (default time.monotonic)
        """
        self.config = config or CacheConfig()
        self._clock = clock or time.monotonic
        self._cache: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.RLock()
        self._stats = CacheStats()

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found/expired
        """
        if not self.config.enabled:
            return None

        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                self._stats.misses += 1
                if self.config.log_access:
                    logger.debug(f"Cache MISS: {key}")
                return None

            self._cache.move_to_end(key)
            self._stats.hits += 1
            if self.config.log_access:
                logger.debug(f"Cache HIT: {key}")
            return entry.value

    def has(self, key: str) -> bool:
        """Check whether an unexpired entry exists (does not count as a hit)."""
        if not self.config.enabled:
            return False
        with self._lock:
            return self._live_entry(key) is not None

    def set(
        self,
        key: str,
        value: Any,
        ttl_seconds: Optional[float] = None,
    ) -> None:
        """
        Set value in cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl_seconds: TTL in seconds (uses default if None, <= 0 stores nothing)
        """
        if not self.config.enabled:
            return

        ttl = ttl_seconds if ttl_seconds is not None else self.config.default_ttl_seconds

        with self._lock:
            # A non-positive TTL is "already expired": drop any previous value too.
            self._cache.pop(key, None)
            if ttl <= 0:
                if self.config.log_access:
                    logger.debug(f"Cache SKIP: {key} (TTL={ttl}s)")
                return

            now = self._clock()
            self._evict_if_needed()
            self._cache[key] = CacheEntry(
                value=value,
                expires_at=now + ttl,
                created_at=now,
            )
            if self.config.log_access:
                logger.debug(f"Cache SET: {key} (TTL={ttl}s)")

    def invalidate(self, key: str) -> bool:
        """
        Invalidate a cache entry.

        Returns:
            True if entry was removed, False if not found
        """
        with self._lock:
            if key not in self._cache:
                return False
            del self._cache[key]
            logger.debug(f"Cache INVALIDATED: {key}")
            return True

    def clear(self, key: Optional[str] = None) -> None:
        """Clear one entry, or all entries when no key is given."""
        if key is not None:
            self.invalidate(key)
            return
        with self._lock:
            self._cache.clear()
            logger.info("Cache CLEARED")

    def get_stats(self) -> CacheStats:
        """Get cache statistics."""
        with self._lock:
            return CacheStats(
                hits=self._stats.hits,
                misses=self._stats.misses,
                evictions=self._stats.evictions,
                expirations=self._stats.expirations,
                current_entries=len(self._cache),
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def _live_entry(self, key: str) -> Optional[CacheEntry]:
        """Return the entry for key, purging it if expired (must hold lock)."""
        entry = self._cache.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._cache[key]
            self._stats.expirations += 1
            if self.config.log_access:
                logger.debug(f"Cache EXPIRED: {key}")
            return None
        return entry

    def _evict_if_needed(self) -> None:
        """Evict least recently used entries to make room for one more."""
        max_entries = self.config.max_entries
        if max_entries is None:
            return
        while len(self._cache) >= max_entries and self._cache:
            key, _ = self._cache.popitem(last=False)
            self._stats.evictions += 1
            logger.debug(f"Cache EVICTED (LRU): {key}")

    @staticmethod
    def make_key(operation: str, **params: Any) -> str:
        """
        Create a cache key from operation and parameters.

        Args:
            operation: Operation name (e.g., "list_products")
            **params: Parameters to hash

        Returns:
            Cache key in format "operation:params_hash"
        """
        if not params:
            return operation
        param_str = str(sorted(params.items()))
        param_hash = hashlib.sha256(param_str.encode()).hexdigest()[:16]
        return f"{operation}:{param_hash}"
