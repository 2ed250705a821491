"""Key-value stores holding per-client admission timestamps.

The limiter only needs four operations, so the in-process table can be
swapped for a shared Redis instance without touching the sliding window
algorithm.
"""

import asyncio
import json
import logging
from typing import Protocol

import redis.asyncio as redis

from autodevelop_api.config import Settings, get_settings

logger = logging.getLogger(__name__)


class RateLimitStore(Protocol):
    """Async store mapping a client key to its admission timestamps (ms)."""

    # True when the backend drops idle keys itself
    expires_entries: bool

    async def get(self, key: str) -> list[int]:
        ...

    async def set(self, key: str, timestamps: list[int]) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...

    async def keys(self) -> list[str]:
        ...


class InMemoryRateLimitStore:
    """Process-local store backed by a dict."""

    expires_entries = False

    def __init__(self) -> None:
        self._entries: dict[str, list[int]] = {}

    async def get(self, key: str) -> list[int]:
        return list(self._entries.get(key, ()))

    async def set(self, key: str, timestamps: list[int]) -> None:
        self._entries[key] = list(timestamps)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def keys(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class RedisRateLimitStore:
    """Redis-backed store shared by every process pointing at the same server.

    Each client is a JSON encoded list under ``ratelimit:chat:<client>`` that
    expires two windows after its last write.
    """

    KEY_PREFIX = "ratelimit:chat"
    expires_entries = True

    def __init__(
        self,
        settings: Settings | None = None,
        client: redis.Redis | None = None,
    ):
        """Initialize the store.

        Args:
            settings: Application settings.
            client: Pre-built Redis client (a connection is created lazily otherwise).
        """
        self._settings = settings or get_settings()
        self._redis = client
        self._lock = asyncio.Lock()
        self._ttl_seconds = self._settings.rate_limit_window_seconds * 2

    async def _get_redis(self) -> redis.Redis:
        """Get Redis connection.

        Returns:
            Redis client.
        """
        if self._redis is None:
            async with self._lock:
                if self._redis is None:
                    self._redis = redis.from_url(  # type: ignore[no-untyped-call]
                        self._settings.redis_url,
                        encoding="utf-8",
                        decode_responses=True,
                    )
        return self._redis

    async def close(self) -> None:
        """Close Redis connection."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    def _get_key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}:{key}"

    async def get(self, key: str) -> list[int]:
        r = await self._get_redis()
        raw = await r.get(self._get_key(key))
        if not raw:
            return []
        try:
            return [int(t) for t in json.loads(raw)]
        except (TypeError, ValueError):
            logger.warning("Discarding malformed rate limit entry for %s", key)
            return []

    async def set(self, key: str, timestamps: list[int]) -> None:
        r = await self._get_redis()
        await r.set(self._get_key(key), json.dumps(timestamps), ex=self._ttl_seconds)

    async def delete(self, key: str) -> None:
        r = await self._get_redis()
        await r.delete(self._get_key(key))

    async def keys(self) -> list[str]:
        r = await self._get_redis()
        prefix = f"{self.KEY_PREFIX}:"
        found: list[str] = []
        cursor = 0
        while True:
            cursor, batch = await r.scan(cursor, match=f"{prefix}*", count=100)
            found.extend(k[len(prefix):] for k in batch)
            if cursor == 0:
                break
        return found


def create_rate_limit_store(settings: Settings | None = None) -> RateLimitStore:
    """Build the store selected by ``RATE_LIMIT_BACKEND``.

    Args:
        settings: Application settings.

    Returns:
        A rate limit store.
    """
    settings = settings or get_settings()
    if settings.rate_limit_backend == "redis":
        logger.info("Using Redis rate limit store at %s", settings.redis_url)
        return RedisRateLimitStore(settings)
    return InMemoryRateLimitStore()
