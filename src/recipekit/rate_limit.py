"""In-memory sliding-window rate limiting, injected into routes as a dependency."""

import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import Protocol

from recipekit.config import Settings, get_settings
from recipekit.logging_config import get_logger

logger = get_logger(__name__)

SEARCH_LIMITER = "search"
API_READ_LIMITER = "api-read"
API_WRITE_LIMITER = "api-write"


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of one rate limit check."""

    allowed: bool
    remaining: int
    reset_at: float  # clock time when the oldest counted request expires
    retry_after: float = 0.0  # seconds until a refused caller may retry


class RateLimiter(Protocol):
    """Anything that can decide whether a caller may make another request."""

    def check(self, key: str) -> RateLimitResult: ...


class SlidingWindowRateLimiter:
    """
    Allow at most max_requests per key within any window_seconds span.

    Refused requests are not counted, so a caller that keeps retrying is
    let through as soon as its oldest request leaves the window. Keys whose
    requests have all expired are swept at most once per window, so the
    number of tracked keys stays bounded by recent callers.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ):
        if max_requests < 1:
            raise ValueError(f"max_requests must be at least 1, got {max_requests}")
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive, got {window_seconds}")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    @property
    def tracked_keys(self) -> int:
        """Number of keys currently tracked."""
        with self._lock:
            return len(self._requests)

    def _sweep(self, window_start: float) -> None:
        """Forget keys whose newest request is outside the window."""
        expired = [
            key
            for key, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for key in expired:
            del self._requests[key]

        if expired:
            logger.debug(f"Swept {len(expired)} expired rate limit keys")

    def check(self, key: str) -> RateLimitResult:
        """Record a request for key if it is allowed."""
        with self._lock:
            now = self._clock()
            window_start = now - self.window_seconds

            if now - self._last_sweep >= self.window_seconds:
                self._sweep(window_start)
                self._last_sweep = now

            timestamps = self._requests.setdefault(key, deque())
            while timestamps and timestamps[0] <= window_start:
                timestamps.popleft()

            oldest = timestamps[0] if timestamps else now
            reset_at = oldest + self.window_seconds

            if len(timestamps) >= self.max_requests:
                return RateLimitResult(
                    allowed=False,
                    remaining=0,
                    reset_at=reset_at,
                    retry_after=max(0.0, reset_at - now),
                )

            timestamps.append(now)
            return RateLimitResult(
                allowed=True,
                remaining=self.max_requests - len(timestamps),
                reset_at=reset_at,
            )

    def reset(self, key: str | None = None) -> None:
        """Forget recorded requests for one key, or for all keys."""
        with self._lock:
            if key is None:
                self._requests.clear()
            else:
                self._requests.pop(key, None)


class RateLimiterRegistry:
    """Named rate limiters shared by the API routers."""

    def __init__(self, limiters: dict[str, RateLimiter]):
        self._limiters = dict(limiters)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        clock: Callable[[], float] = time.time,
    ) -> "RateLimiterRegistry":
        """Build the search, api-read and api-write limiters from settings."""
        return cls(
            {
                SEARCH_LIMITER: SlidingWindowRateLimiter(
                    settings.search_rate_limit_requests,
                    settings.search_rate_limit_window_seconds,
                    clock,
                ),
                API_READ_LIMITER: SlidingWindowRateLimiter(
                    settings.api_read_rate_limit_requests,
                    settings.api_rate_limit_window_seconds,
                    clock,
                ),
                API_WRITE_LIMITER: SlidingWindowRateLimiter(
                    settings.api_write_rate_limit_requests,
                    settings.api_rate_limit_window_seconds,
                    clock,
                ),
            }
        )

    def get(self, name: str) -> RateLimiter:
        """Get a limiter by name. Raises KeyError for unknown names."""
        return self._limiters[name]

    def __contains__(self, name: object) -> bool:
        return name in self._limiters


@lru_cache
def get_rate_limiters() -> RateLimiterRegistry:
    """Get the process-wide limiter registry."""
    logger.info("Initializing rate limiters")
    return RateLimiterRegistry.from_settings(get_settings())
