"""Sliding window rate limiter for chat requests."""

import asyncio
import logging
import math
import time

from autodevelop_api.config import Settings, get_settings
from autodevelop_api.ratelimit.models import RateLimitStatus
from autodevelop_api.ratelimit.store import RateLimitStore, create_rate_limit_store

logger = logging.getLogger(__name__)


def now_millis() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


class SlidingWindowRateLimiter:
    """Per-client sliding window counter.

    Each client keeps the timestamps of its admitted requests. A check drops
    timestamps older than the window and rejects once ``max_requests`` remain,
    so a client never gets more than ``max_requests`` admissions in any
    rolling window.

    When the store tracks more than ``max_tracked_keys`` clients, every client
    is swept after an admission and clients with an empty window are dropped.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        store: RateLimitStore | None = None,
    ):
        """Initialize rate limiter.

        Args:
            settings: Application settings.
            store: Timestamp store (defaults to the configured backend).
        """
        self._settings = settings or get_settings()
        self._store = store if store is not None else create_rate_limit_store(self._settings)
        self._lock = asyncio.Lock()

        self.window_ms = self._settings.rate_limit_window_seconds * 1000
        self.max_requests = self._settings.rate_limit_max_requests
        self.max_tracked_keys = self._settings.rate_limit_max_tracked_keys

    @property
    def store(self) -> RateLimitStore:
        return self._store

    def _in_window(self, timestamps: list[int], now_ms: int) -> list[int]:
        cutoff = now_ms - self.window_ms
        return [t for t in timestamps if t > cutoff]

    def _retry_after(self, timestamps: list[int], now_ms: int) -> int:
        """Seconds until the oldest timestamp leaves the window."""
        wait_ms = min(timestamps) + self.window_ms - now_ms
        return max(1, math.ceil(wait_ms / 1000))

    async def check(self, client_key: str, now_ms: int | None = None) -> RateLimitStatus:
        """Check the window for a client and record the request if admitted.

        Args:
            client_key: Client identifier.
            now_ms: Current time in milliseconds (wall clock when omitted).

        Returns:
            Rate limit status for this request.
        """
        if now_ms is None:
            now_ms = now_millis()

        async with self._lock:
            timestamps = self._in_window(await self._store.get(client_key), now_ms)

            if len(timestamps) >= self.max_requests:
                await self._store.set(client_key, timestamps)
                return RateLimitStatus(
                    client_key=client_key,
                    requests_in_window=len(timestamps),
                    limit=self.max_requests,
                    window_seconds=self._settings.rate_limit_window_seconds,
                    is_rate_limited=True,
                    retry_after_seconds=self._retry_after(timestamps, now_ms),
                )

            timestamps.append(now_ms)
            await self._store.set(client_key, timestamps)
            await self._evict_expired(now_ms)

        return RateLimitStatus(
            client_key=client_key,
            requests_in_window=len(timestamps),
            limit=self.max_requests,
            window_seconds=self._settings.rate_limit_window_seconds,
        )

    async def _evict_expired(self, now_ms: int) -> int:
        """Drop clients whose window is empty once too many are tracked.

        Stores that expire idle keys on their own are never swept.

        Args:
            now_ms: Current time in milliseconds.

        Returns:
            Number of clients removed.
        """
        if self._store.expires_entries:
            return 0

        keys = await self._store.keys()
        if len(keys) <= self.max_tracked_keys:
            return 0

        removed = 0
        for key in keys:
            timestamps = self._in_window(await self._store.get(key), now_ms)
            if timestamps:
                await self._store.set(key, timestamps)
            else:
                await self._store.delete(key)
                removed += 1

        logger.info(
            "Swept rate limit table: removed %d of %d clients",
            removed,
            len(keys),
            extra={"tracked": len(keys), "removed": removed},
        )
        return removed

    async def get_usage(self, client_key: str, now_ms: int | None = None) -> int:
        """Get the number of requests a client has in the current window.

        Args:
            client_key: Client identifier.
            now_ms: Current time in milliseconds.

        Returns:
            Request count inside the window.
        """
        if now_ms is None:
            now_ms = now_millis()
        return len(self._in_window(await self._store.get(client_key), now_ms))

    async def reset(self, client_key: str) -> None:
        """Forget every request recorded for a client.

        Args:
            client_key: Client identifier.
        """
        async with self._lock:
            await self._store.delete(client_key)
        logger.info("Rate limit reset for client: %s", client_key)


# Global rate limiter instance
_rate_limiter: SlidingWindowRateLimiter | None = None


def get_rate_limiter() -> SlidingWindowRateLimiter:
    """Get the global rate limiter instance.

    Returns:
        SlidingWindowRateLimiter instance.
    """
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = SlidingWindowRateLimiter()
    return _rate_limiter
