"""Redis store for the services cache.

Handles:
- Caching with TTL
- Atomic get / set / delete (no application-level locking)

TTL policies:
- Services records: 1 hour
"""

import json
import logging
from typing import Any

import redis.asyncio as redis

from tableproxy.settings import get_settings

# TTL constants (in seconds)
TTL_SERVICES_CACHE = 3600  # 1 hour

# Keys
SERVICES_CACHE_KEY = "services-data"

# Redis client (initialized on startup)
_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


async def init_redis(url: str | None = None) -> None:
    """Initialize Redis connection."""
    global _redis
    _redis = redis.from_url(
        url or get_settings().redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    # Validate connectivity early (especially for `rediss://` in production).
    await _redis.ping()
    logger.info("Redis connected")


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def _get_redis() -> redis.Redis:
    """Get Redis client instance."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


# ============================================================
# Generic cache operations
# ============================================================


async def cache_get(key: str) -> str | None:
    """Get value from cache.

    Args:
        key: Cache key.

    Returns:
        Cached value or None if not found.
    """
    return await _get_redis().get(key)


async def cache_set(key: str, value: str, ttl: int) -> None:
    """Set value in cache with TTL.

    Args:
        key: Cache key.
        value: Value to cache.
        ttl: Time-to-live in seconds.
    """
    await _get_redis().setex(key, ttl, value)


async def cache_delete(key: str) -> None:
    """Delete value from cache. Missing keys are a no-op.

    Args:
        key: Cache key.
    """
    await _get_redis().delete(key)


async def cache_get_json(key: str) -> Any | None:
    """Get JSON value from cache.

    Returns:
        Parsed JSON value or None if not found.
    """
    value = await cache_get(key)
    if value is None:
        return None
    return json.loads(value)


async def cache_set_json(key: str, value: Any, ttl: int) -> None:
    """Set JSON value in cache."""
    await cache_set(key, json.dumps(value), ttl)


# ============================================================
# Services records cache
# ============================================================


async def get_services_cache() -> list[dict[str, Any]] | None:
    """Get cached services records, or None on a miss.

    An empty list is a hit: the table was empty when it was cached.
    """
    return await cache_get_json(SERVICES_CACHE_KEY)


async def set_services_cache(records: list[dict[str, Any]]) -> None:
    """Cache services records (TTL 1 hour)."""
    await cache_set_json(SERVICES_CACHE_KEY, records, TTL_SERVICES_CACHE)


async def delete_services_cache() -> None:
    """Drop the cached services records."""
    await cache_delete(SERVICES_CACHE_KEY)
