"""
Cross-cutting helpers for the data layer.

Provides:
- Logging of remote calls with timing
- Metrics on remote hits, local fallbacks and cache hits
"""
import logging
import time
from collections import Counter
from datetime import datetime, timedelta
from functools import wraps
from typing import Callable, Dict


logger = logging.getLogger(__name__)


def with_logging(
    func: Callable
) -> Callable:
    """
    Decorator that logs an async call's target and duration.

    The first positional argument after ``self`` is logged as the target
    (for `ApiClient.request` that is the endpoint). Failures are logged at
    DEBUG and re-raised; the caller decides how loudly to report them.

    Args:
        func: Coroutine function to wrap

    Returns:
        Wrapped coroutine function with logging
    """
    @wraps(func)
    async def wrapper(self, target, *args, **kwargs):
        method = kwargs.get("method", "GET")
        logger.debug(f"{func.__qualname__}: {method} {target}")

        start_time = time.monotonic()

        try:
            result = await func(self, target, *args, **kwargs)
        except Exception as e:
            duration = time.monotonic() - start_time
            logger.debug(
                f"{method} {target} failed after {duration:.2f}s: {e}"
            )
            raise

        duration = time.monotonic() - start_time
        logger.debug(f"{method} {target} completed in {duration:.2f}s")
        return result

    return wrapper


class MetricsCollector:
    """
    Collector for data facade metrics.

    Tracks:
    - Operations answered by the remote API
    - Operations answered by local fallback storage
    - Community lookups answered by the cache
    """

    def __init__(self):
        """Initialize metrics collector."""
        self.remote_hits: Counter = Counter()
        self.fallbacks: Counter = Counter()
        self.cache_hits = 0
        self.start_time = datetime.now()

    def record_remote(self, operation: str) -> None:
        """Record an operation served by the remote API."""
        self.remote_hits[operation] += 1

    def record_fallback(self, operation: str) -> None:
        """Record an operation served by local storage."""
        self.fallbacks[operation] += 1

    def record_cache_hit(self) -> None:
        self.cache_hits += 1

    def get_stats(self) -> Dict:
        """
        Get current metrics.

        Returns:
            Dictionary with metrics
        """
        uptime = datetime.now() - self.start_time
        remote_total = sum(self.remote_hits.values())
        fallback_total = sum(self.fallbacks.values())
        served = remote_total + fallback_total

        return {
            "uptime_seconds": uptime.total_seconds(),
            "remote_hits": remote_total,
            "fallbacks": fallback_total,
            "cache_hits": self.cache_hits,
            "fallback_ratio": fallback_total / served if served else 0.0,
            "fallbacks_by_operation": dict(self.fallbacks),
        }

    def format_stats(self) -> str:
        """Format stats for display."""
        stats = self.get_stats()

        uptime_str = str(timedelta(seconds=int(stats["uptime_seconds"])))

        return (
            f"Uptime: {uptime_str}\n"
            f"Remote: {stats['remote_hits']}\n"
            f"Local fallbacks: {stats['fallbacks']} "
            f"({stats['fallback_ratio']:.0%})\n"
            f"Cache hits: {stats['cache_hits']}"
        )


__all__ = [
    "with_logging",
    "MetricsCollector",
]
