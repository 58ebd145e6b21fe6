"""
In-process fixed-window rate limiter.

Each endpoint keeps its own TTL cache of counters keyed by client
identifier. Counters vanish when their window expires.
"""

import logging
import time
from dataclasses import dataclass
from typing import Dict

from cachetools import TTLCache

from app.config import get_settings

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60
MAX_TRACKED_CLIENTS = 10000


@dataclass
class RateLimitResult:
    success: bool
    limit: int
    remaining: int
    reset_time: int  # epoch milliseconds

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_time),
        }


@dataclass
class _Window:
    count: int
    reset_time: int


class RateLimiter:
    """
    Fixed-window request counter.

    Windows start on the first request from an identifier and last
    window_seconds. State is per process, so limits apply per worker.
    """

    def __init__(self, window_seconds: int = WINDOW_SECONDS):
        self.window_seconds = window_seconds
        self._caches: Dict[str, TTLCache] = {}

    def _cache_for(self, endpoint: str) -> TTLCache:
        if endpoint not in self._caches:
            self._caches[endpoint] = TTLCache(
                maxsize=MAX_TRACKED_CLIENTS, ttl=self.window_seconds
            )
        return self._caches[endpoint]

    def check(self, identifier: str, endpoint: str, limit: int) -> RateLimitResult:
        """
        Count a request and report whether it is within the limit.

        Args:
            identifier: Client key, usually the IP address.
            endpoint: Name of the limited endpoint.
            limit: Allowed requests per window.
        """
        cache = self._cache_for(endpoint)
        now_ms = int(time.time() * 1000)

        window = cache.get(identifier)
        if window is None or window.reset_time <= now_ms:
            window = _Window(count=0, reset_time=now_ms + self.window_seconds * 1000)
            cache[identifier] = window

        window.count += 1
        success = window.count <= limit
        if not success:
            logger.warning(f"Rate limit exceeded on {endpoint} for {identifier}")

        return RateLimitResult(
            success=success,
            limit=limit,
            remaining=max(0, limit - window.count),
            reset_time=window.reset_time,
        )

    def check_search(self, identifier: str) -> RateLimitResult:
        return self.check(identifier, "search", get_settings().rate_limit_search)

    def check_click(self, identifier: str) -> RateLimitResult:
        return self.check(identifier, "click", get_settings().rate_limit_click)

    def reset(self) -> None:
        """Forget all counters."""
        self._caches.clear()


# Global limiter instance
rate_limiter = RateLimiter()
