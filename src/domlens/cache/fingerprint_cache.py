"""
Fingerprint keyed result cache.

Stores computed parse results under a hash of the input and the
options that produced them, with per-entry TTL and a bounded size.

Example:
    >>> cache = FingerprintCache(max_size=10)
    >>> key = cache.generate_key("<p>Hi</p>", {"max_depth": 100})
    >>> cache.set(key, result)
    >>> cache.get(key) is result
    True
"""

import hashlib
import json
import threading
import time
from collections import OrderedDict
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable

from domlens.config.settings import CacheSettings
from domlens.core.exceptions import CacheError
from domlens.utils.logging import get_logger, get_logger_with_context
from domlens.utils.metrics import record_cache_eviction, record_cache_lookup

logger = get_logger(__name__)

DEFAULT_TTL_SECONDS = 3600
DEFAULT_MAX_SIZE = 100

HASH_ALGORITHMS = ("sha256", "md5", "simple")

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def simple_hash(text: str) -> str:
    """
    Weak 32-bit rolling hash (h * 31 + unit) over UTF-16 code units.

    Returns the absolute value of the signed result in base 36. Only
    suitable where collisions are acceptable.
    """
    data = text.encode("utf-16-le")
    value = 0
    for index in range(0, len(data), 2):
        unit = data[index] | (data[index + 1] << 8)
        value = (value * 31 + unit) & 0xFFFFFFFF

    if value >= 0x80000000:
        value -= 0x100000000
    return _to_base36(abs(value))


def _payload_size(data: Any) -> int:
    to_dict = getattr(data, "to_dict", None)
    plain = to_dict() if callable(to_dict) else data
    return len(json.dumps(plain, ensure_ascii=False, default=str).encode("utf-8"))


@dataclass
class CacheEntry:
    """A cached value and its timestamps (clock seconds)."""

    key: str
    data: Any
    created_at: float
    last_accessed: float
    expires_at: float | None = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


@dataclass
class CacheStats:
    """Point-in-time cache statistics."""

    size: int
    max_size: int
    expired: int
    total_size: int
    hits: int
    misses: int

    @property
    def hit_rate(self) -> float:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "size": self.size,
            "maxSize": self.max_size,
            "expired": self.expired,
            "totalSize": self.total_size,
            "hits": self.hits,
            "misses": self.misses,
            "hitRate": round(self.hit_rate, 4),
        }


class FingerprintCache:
    """
    Thread-safe TTL cache with least-recently-used eviction.

    Entries live in an OrderedDict kept in access order: ``get`` moves an
    entry to the end, so the first entry is always the least recently
    used. Inserting a new key at capacity evicts exactly one entry, the
    first expired one if any, otherwise the least recently used.

    A TTL of 0 means the entry never expires. Expired entries are
    removed lazily by ``get``/``has`` and in bulk by ``cleanup``.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        enabled: bool = True,
        hash_algorithm: str = "sha256",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the cache.

        Args:
            max_size: Maximum number of entries
            default_ttl: Lifetime in seconds used when set() gets no ttl
            enabled: When False, get() always misses and set() does nothing
            hash_algorithm: One of sha256, md5, simple
            clock: Time source in seconds, injectable for tests

        Raises:
            CacheError: If max_size, default_ttl or hash_algorithm is invalid
        """
        if max_size < 1:
            raise CacheError("Cache max_size must be at least 1", details={"max_size": max_size})
        if default_ttl < 0:
            raise CacheError("Cache TTL must not be negative", details={"ttl": default_ttl})
        if hash_algorithm not in HASH_ALGORITHMS:
            raise CacheError(
                f"Unknown hash algorithm: {hash_algorithm}",
                details={"supported": list(HASH_ALGORITHMS)},
            )

        self.max_size = max_size
        self.default_ttl = default_ttl
        self.enabled = enabled
        self.hash_algorithm = hash_algorithm
        self._clock = clock

        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._in_flight: dict[str, Future] = {}
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    @classmethod
    def from_settings(cls, settings: CacheSettings) -> "FingerprintCache":
        return cls(
            max_size=settings.max_size,
            default_ttl=settings.ttl_seconds,
            enabled=settings.enabled,
            hash_algorithm=settings.hash_algorithm,
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # =========================================================================
    # Keys
    # =========================================================================

    def generate_key(self, input_data: Any, options: Any = None) -> str:
        """
        Fingerprint input and options.

        Both are serialized as canonical JSON (sorted keys, compact
        separators) before hashing, so equal options in a different key
        order produce the same key.

        Raises:
            CacheError: If input or options are not JSON serializable
        """
        try:
            payload = json.dumps(
                {"input": input_data, "options": options or {}},
                sort_keys=True,
                separators=(",", ":"),
                ensure_ascii=False,
            )
        except (TypeError, ValueError) as e:
            raise CacheError("Cache key input is not JSON serializable", details={"error": str(e)}) from e

        if self.hash_algorithm == "simple":
            return simple_hash(payload)
        if self.hash_algorithm == "md5":
            return hashlib.md5(payload.encode("utf-8")).hexdigest()
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    # =========================================================================
    # Map operations
    # =========================================================================

    def get(self, key: str) -> Any | None:
        """Cached value for key, or None on a miss. Refreshes recency."""
        with self._lock:
            found, value = self._lookup(key)
            return value if found else None

    def _lookup(self, key: str) -> tuple[bool, Any]:
        if not self.enabled:
            self._record_lookup(False)
            return False, None

        entry = self._entries.get(key)
        now = self._clock()

        if entry is None:
            self._record_lookup(False)
            return False, None

        if entry.is_expired(now):
            del self._entries[key]
            logger.debug(f"Cache entry expired: {key[:16]}")
            self._record_lookup(False)
            return False, None

        entry.last_accessed = now
        self._entries.move_to_end(key)
        self._record_lookup(True)
        return True, entry.data

    def _record_lookup(self, hit: bool) -> None:
        if hit:
            self._hits += 1
        else:
            self._misses += 1
        record_cache_lookup(hit)

    def set(self, key: str, data: Any, ttl: float | None = None) -> None:
        """
        Store data under key.

        Args:
            key: Cache key
            data: Value to store
            ttl: Lifetime in seconds. None uses the default, 0 never expires.
        """
        if not self.enabled:
            return

        ttl = self.default_ttl if ttl is None else ttl
        if ttl < 0:
            raise CacheError("Cache TTL must not be negative", details={"ttl": ttl})

        with self._lock:
            now = self._clock()
            if key not in self._entries and len(self._entries) >= self.max_size:
                self._evict_one(now)

            self._entries[key] = CacheEntry(
                key=key,
                data=data,
                created_at=now,
                last_accessed=now,
                expires_at=now + ttl if ttl > 0 else None,
            )
            self._entries.move_to_end(key)

    def _evict_one(self, now: float) -> None:
        for key, entry in self._entries.items():
            if entry.is_expired(now):
                break
        else:
            key = next(iter(self._entries))

        del self._entries[key]
        record_cache_eviction()
        logger.debug(f"Evicted cache entry {key[:16]}")

    def has(self, key: str) -> bool:
        """True if key holds a live entry. Does not refresh recency."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return False
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Remove every entry and reset hit/miss counters."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
        logger.debug("Cache cleared")

    def cleanup(self) -> int:
        """
        Remove all expired entries.

        Returns:
            Number of entries removed
        """
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]

        if expired:
            logger.info(f"Removed {len(expired)} expired cache entries")
        return len(expired)

    def get_stats(self) -> CacheStats:
        with self._lock:
            now = self._clock()
            entries = list(self._entries.values())
            return CacheStats(
                size=len(entries),
                max_size=self.max_size,
                expired=sum(1 for entry in entries if entry.is_expired(now)),
                total_size=sum(_payload_size(entry.data) for entry in entries),
                hits=self._hits,
                misses=self._misses,
            )

    # =========================================================================
    # Compute-through
    # =========================================================================

    def get_or_compute(
        self,
        key: str,
        compute: Callable[[], Any],
        ttl: float | None = None,
        should_store: Callable[[Any], bool] | None = None,
    ) -> Any:
        """
        Return the cached value for key, computing and storing it on a miss.

        Concurrent callers with the same key share one computation: the
        first registers an in-flight future, the others wait on it. The
        future is always resolved, so waiters never block once the owner
        finishes. If compute raises, every waiter gets the same exception
        and nothing is stored.

        Args:
            key: Cache key
            compute: Zero-argument callable producing the value
            ttl: Lifetime in seconds. None uses the default, 0 never expires.
            should_store: Predicate deciding whether a computed value is
                cached. Values it rejects are still returned to every caller.

        Raises:
            CacheError: If ttl is negative
        """
        if ttl is not None and ttl < 0:
            raise CacheError("Cache TTL must not be negative", details={"ttl": ttl})

        log = get_logger_with_context(__name__, key=key[:16])

        with self._lock:
            found, value = self._lookup(key)
            if found:
                log.debug("Cache hit")
                return value

            future = self._in_flight.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._in_flight[key] = future

        if not owner:
            log.debug("Waiting on in-flight computation")
            return future.result()

        log.debug("Cache miss, computing")
        try:
            try:
                value = compute()
            except BaseException as e:
                future.set_exception(e)
                raise
            future.set_result(value)

            if should_store is None or should_store(value):
                self.set(key, value, ttl)
            else:
                log.debug("Computed value not stored")
            return value
        finally:
            with self._lock:
                self._in_flight.pop(key, None)
