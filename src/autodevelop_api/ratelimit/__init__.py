"""Rate limiting module.

This module implements the per-client chat rate limit:
- Sliding window counter (requests per rolling window)
- Opportunistic sweep of expired clients
- Pluggable in-memory or Redis timestamp store
"""

from autodevelop_api.ratelimit.limiter import (
    SlidingWindowRateLimiter,
    get_rate_limiter,
    now_millis,
)
from autodevelop_api.ratelimit.models import RateLimitStatus
from autodevelop_api.ratelimit.store import (
    InMemoryRateLimitStore,
    RateLimitStore,
    RedisRateLimitStore,
    create_rate_limit_store,
)

__all__ = [
    # Limiter
    "SlidingWindowRateLimiter",
    "get_rate_limiter",
    "now_millis",
    # Models
    "RateLimitStatus",
    # Stores
    "InMemoryRateLimitStore",
    "RateLimitStore",
    "RedisRateLimitStore",
    "create_rate_limit_store",
]
