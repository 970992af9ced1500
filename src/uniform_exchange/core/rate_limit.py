"""
Rate Limiting Module

Sliding-window rate limiting backed by the shared Redis client.
Falls back to in-memory storage if Redis is unavailable.

Limits are keyed per user and action, for example
"school_submissions:create:<user_id>".
"""

import logging
import time

from fastapi import HTTPException, status

from uniform_exchange.core import redis as redis_module

logger = logging.getLogger(__name__)

# In-memory rate limit storage (fallback when Redis unavailable)
# Format: {key: [timestamp, ...]}
_memory_store: dict[str, list[float]] = {}
# Format: {key: time after which every entry for the key has expired}
_memory_expiry: dict[str, float] = {}
_last_sweep = 0.0

MEMORY_SWEEP_INTERVAL = 60


class RateLimitExceeded(HTTPException):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": (
                    f"Too many requests. Maximum {limit} requests per {window_seconds} seconds."
                ),
                "code": "RATE_LIMIT_EXCEEDED",
                "retryAfterSeconds": window_seconds,
            },
            headers={"Retry-After": str(window_seconds)},
        )


async def _check_rate_limit_redis(
    client,
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check rate limit using Redis.

    Uses a sliding window algorithm with Redis sorted sets.

    Args:
        client: Redis client
        key: Rate limit key
        limit: Maximum requests allowed
        window_seconds: Time window in seconds

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    now = time.time()
    window_start = now - window_seconds

    # Use a pipeline for atomic operations
    pipe = client.pipeline()

    # Remove old entries outside the window
    pipe.zremrangebyscore(key, 0, window_start)

    # Count current requests in window
    pipe.zcard(key)

    # Add current request
    pipe.zadd(key, {str(now): now})

    # Set expiry on the key
    pipe.expire(key, window_seconds)

    results = await pipe.execute()
    current_count = results[1]

    return current_count < limit


def _sweep_memory_store(now: float) -> None:
    """Drop keys whose newest entry has left its window."""
    expired = [key for key, expires_at in _memory_expiry.items() if expires_at <= now]
    for key in expired:
        _memory_store.pop(key, None)
        _memory_expiry.pop(key, None)


def _check_rate_limit_memory(
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check rate limit using in-memory storage.

    Fallback when Redis is unavailable. Does not work across multiple
    server instances. Idle keys are swept at most once per
    MEMORY_SWEEP_INTERVAL seconds.
    """
    global _last_sweep

    now = time.time()
    window_start = now - window_seconds

    if now - _last_sweep >= MEMORY_SWEEP_INTERVAL:
        _sweep_memory_store(now)
        _last_sweep = now

    entries = [ts for ts in _memory_store.get(key, []) if ts > window_start]

    if len(entries) >= limit:
        if entries:
            _memory_store[key] = entries
            _memory_expiry[key] = entries[-1] + window_seconds
        else:
            _memory_store.pop(key, None)
            _memory_expiry.pop(key, None)
        return False

    entries.append(now)
    _memory_store[key] = entries
    _memory_expiry[key] = now + window_seconds
    return True


def reset_memory_store() -> None:
    """Forget every in-memory counter."""
    global _last_sweep

    _memory_store.clear()
    _memory_expiry.clear()
    _last_sweep = 0.0


async def check_rate_limit(
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check if a request is within rate limits.

    Tries Redis first, falls back to in-memory storage.

    Args:
        key: Unique key for this rate limit
        limit: Maximum requests allowed in the window
        window_seconds: Time window in seconds

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    client = redis_module.redis_client

    if client is not None:
        try:
            return await _check_rate_limit_redis(client, key, limit, window_seconds)
        except Exception as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")

    return _check_rate_limit_memory(key, limit, window_seconds)


async def enforce_rate_limit(
    key: str,
    limit: int,
    window_seconds: int,
) -> None:
    """
    Raise RateLimitExceeded when ``key`` is over its limit.

    Raises:
        RateLimitExceeded: HTTP 429 with a Retry-After header
    """
    allowed = await check_rate_limit(key, limit, window_seconds)

    if not allowed:
        logger.warning(f"Rate limit exceeded for {key}: {limit}/{window_seconds}s")
        raise RateLimitExceeded(limit, window_seconds)


__all__ = [
    "check_rate_limit",
    "enforce_rate_limit",
    "reset_memory_store",
    "RateLimitExceeded",
]
