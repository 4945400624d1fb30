"""
Utilities module for domlens.

Provides logging setup and in-memory metrics.
"""

from domlens.utils.logging import (
    setup_logging,
    get_logger,
    get_logger_with_context,
    reset_logging,
    ContextLoggerAdapter,
)
from domlens.utils.metrics import (
    Metrics,
    TimingStats,
    record_parse,
    record_cache_lookup,
    record_cache_eviction,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "get_logger_with_context",
    "ContextLoggerAdapter",
    "reset_logging",
    # Metrics
    "Metrics",
    "TimingStats",
    "record_parse",
    "record_cache_lookup",
    "record_cache_eviction",
]
