"""
Lightweight in-memory metrics for the parse pipeline.

Counters and timings kept in process, without Prometheus or
OpenTelemetry. The document parser and fingerprint cache feed them.
"""

import threading
import time
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from domlens.utils.logging import get_logger

logger = get_logger(__name__)

DOCUMENTS_PARSED = "documents_parsed"
PARSE_FAILURES = "parse_failures"
CACHE_HITS = "cache_hits"
CACHE_MISSES = "cache_misses"
CACHE_EVICTIONS = "cache_evictions"
PARSE_LATENCY_MS = "parse_latency_ms"


@dataclass
class TimingStats:
    """Statistics for timing measurements."""

    count: int = 0
    total_ms: float = 0.0
    min_ms: float = float("inf")
    max_ms: float = 0.0

    @property
    def avg_ms(self) -> float:
        """Average latency in milliseconds."""
        return self.total_ms / self.count if self.count > 0 else 0.0

    def record(self, duration_ms: float) -> None:
        """Record a timing measurement."""
        self.count += 1
        self.total_ms += duration_ms
        self.min_ms = min(self.min_ms, duration_ms)
        self.max_ms = max(self.max_ms, duration_ms)

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "total_ms": round(self.total_ms, 2),
            "avg_ms": round(self.avg_ms, 2),
            "min_ms": round(self.min_ms, 2) if self.count > 0 else 0.0,
            "max_ms": round(self.max_ms, 2),
        }


class Metrics:
    """
    Thread-safe counters and timings, shared through Metrics.get().

    Example:
        >>> metrics = Metrics.get()
        >>> metrics.increment(DOCUMENTS_PARSED)
        >>> with metrics.timer(PARSE_LATENCY_MS):
        ...     result = parser.parse_html(html)
        >>> metrics.snapshot()["counters"]
    """

    _instance: "Metrics | None" = None
    _instance_lock = threading.Lock()

    def __init__(self) -> None:
        self._counters: dict[str, int] = defaultdict(int)
        self._timings: dict[str, TimingStats] = defaultdict(TimingStats)
        self._lock = threading.Lock()

    @classmethod
    def get(cls) -> "Metrics":
        """Get the process-wide metrics instance, creating it on first use."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Clear all counters and timings (useful for testing)."""
        if cls._instance is not None:
            with cls._instance._lock:
                cls._instance._counters.clear()
                cls._instance._timings.clear()

    def increment(self, name: str, value: int = 1) -> int:
        """
        Increment a counter.

        Returns:
            New counter value
        """
        with self._lock:
            self._counters[name] += value
            return self._counters[name]

    def get_counter(self, name: str) -> int:
        with self._lock:
            return self._counters.get(name, 0)

    def observe(self, name: str, duration_ms: float) -> None:
        """Record one timing observation in milliseconds."""
        with self._lock:
            self._timings[name].record(duration_ms)

    def get_timing(self, name: str) -> TimingStats | None:
        """Get a copy of the timing statistics for a metric."""
        with self._lock:
            stats = self._timings.get(name)
            if stats is None:
                return None
            return TimingStats(
                count=stats.count,
                total_ms=stats.total_ms,
                min_ms=stats.min_ms,
                max_ms=stats.max_ms,
            )

    @contextmanager
    def timer(self, name: str) -> Iterator[None]:
        """Time the enclosed block and record it under name."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.observe(name, (time.perf_counter() - start) * 1000)

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "counters": dict(self._counters),
                "timings": {
                    name: stats.to_dict()
                    for name, stats in self._timings.items()
                },
            }

    def summary(self) -> str:
        """Human-readable dump of all metrics."""
        snap = self.snapshot()
        lines = ["=== domlens metrics ==="]

        for name, value in sorted(snap["counters"].items()):
            lines.append(f"  {name}: {value:,}")

        for name, stats in sorted(snap["timings"].items()):
            lines.append(
                f"  {name}: {stats['count']} calls, "
                f"avg={stats['avg_ms']:.1f}ms, max={stats['max_ms']:.1f}ms"
            )

        return "\n".join(lines)


def record_parse(success: bool, duration_ms: float) -> None:
    """Count a finished parse and record its latency."""
    metrics = Metrics.get()
    metrics.increment(DOCUMENTS_PARSED if success else PARSE_FAILURES)
    metrics.observe(PARSE_LATENCY_MS, duration_ms)


def record_cache_lookup(hit: bool) -> None:
    Metrics.get().increment(CACHE_HITS if hit else CACHE_MISSES)


def record_cache_eviction(count: int = 1) -> None:
    Metrics.get().increment(CACHE_EVICTIONS, count)
