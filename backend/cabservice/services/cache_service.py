"""
Redis caching service for the public catalog.

CACHING STRATEGY
================

What we cache:
  - City search responses: "catalog:cities:search={text}&limit={n}"
  - The customer-facing cab type list: "catalog:cab-types"

Why:
  - Every search form keystroke hits the city endpoint
  - Cities and cab types change only when staff edit them

Invalidation strategy:
  - Admin writes to cities delete every "catalog:cities:*" key
  - Admin writes to cab types delete "catalog:cab-types*"
  - TTL-based expiry as safety net (5 minutes)

What is never cached:
  - Route availability and prices. A stale price shown to a customer is a
    price we have to honour.

Redis is optional: when disabled or unreachable every call degrades to a
cache miss and the database answers.
"""

import json
from typing import Any, Optional

import redis.asyncio as redis
from cabservice.core.config import get_settings
from cabservice.core.logging import get_logger
from cabservice.core.metrics import record_cache_operation, redis_connection_errors

logger = get_logger(__name__)
settings = get_settings()

CITIES_PREFIX = "catalog:cities:"
CAB_TYPES_KEY = "catalog:cab-types"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            redis_connection_errors.inc()
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def city_search_key(search: str, limit: int) -> str:
    return f"{CITIES_PREFIX}search={search.strip().lower()}&limit={limit}"


async def get_cached(key: str) -> Optional[Any]:
    client = await get_redis()
    if not client:
        return None

    try:
        data = await client.get(key)
        record_cache_operation("get", hit=data is not None)
        if data:
            logger.debug("cache_hit", key=key)
            return json.loads(data)
        logger.debug("cache_miss", key=key)
    except Exception as e:
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached(key: str, data: Any) -> None:
    client = await get_redis()
    if not client:
        return

    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        record_cache_operation("set", hit=False)
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_prefix(prefix: str) -> None:
    """Delete every key starting with prefix, using SCAN to stay non-blocking."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{prefix}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", prefix=prefix, keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", prefix=prefix, error=str(e))


async def invalidate_cities() -> None:
    await invalidate_prefix(CITIES_PREFIX)


async def invalidate_cab_types() -> None:
    await invalidate_prefix(CAB_TYPES_KEY)


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}
