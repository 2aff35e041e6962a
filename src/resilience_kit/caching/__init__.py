"""
Caching Layer.

Provides the in-memory store behind the fallback strategies:
    - TTLCache: Per-entry expiry with lazy purge and optional LRU bound
    - CacheEntry: Stored value plus expiry
    - CacheStats: Statistics tracking for cache operations
"""

from resilience_kit.caching.ttl_cache import CacheEntry, CacheStats, TTLCache

__all__ = ["CacheEntry", "CacheStats", "TTLCache"]
