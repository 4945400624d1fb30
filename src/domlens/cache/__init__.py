"""
Cache module for domlens.

Fingerprint keyed TTL/LRU cache for parse results.
"""

from domlens.cache.fingerprint_cache import (
    FingerprintCache,
    CacheEntry,
    CacheStats,
    HASH_ALGORITHMS,
    simple_hash,
)

__all__ = [
    "FingerprintCache",
    "CacheEntry",
    "CacheStats",
    "HASH_ALGORITHMS",
    "simple_hash",
]
