"""
Redis caching for the movie catalog.

CACHING STRATEGY
================

What we cache:
  - One snapshot of the whole store-backed catalog (JSON list of movies with
    their showtime availability) under "catalog:movies"

Why one snapshot instead of one key per filter:
  - The catalog is small (tens of movies) and filtering it in-process is
    cheaper than a Redis round trip per filter combination
  - Only one key needs invalidating after a purchase

Invalidation strategy:
  - On purchase: delete every "catalog:*" key (availability changed)
  - TTL-based expiry as safety net (REDIS_CACHE_TTL)

Failure mode:
  - Redis is advisory. Any Redis error is logged and treated as a miss, so
    the catalog falls through to the store.

Why NOT cache individual showtimes:
  - Purchases need real-time seat counts; the guarded UPDATE in
    booking_service is the only authority on capacity
"""

import json
from typing import Optional

import redis.asyncio as redis
from flicktix.core.config import get_settings
from flicktix.core.logging import get_logger
from flicktix.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

CATALOG_KEY = "catalog:movies"
CATALOG_KEY_PATTERN = "catalog:*"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled or down."""
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
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


async def get_cached_catalog() -> Optional[list[dict]]:
    client = await get_redis()
    if not client:
        return None

    try:
        data = await client.get(CATALOG_KEY)
        record_cache_operation("get", hit=data is not None)
        if data:
            logger.debug("cache_hit", key=CATALOG_KEY)
            return json.loads(data)
        logger.debug("cache_miss", key=CATALOG_KEY)
    except Exception as e:
        logger.error("cache_get_error", key=CATALOG_KEY, error=str(e))

    return None


async def set_cached_catalog(movies: list[dict]) -> None:
    client = await get_redis()
    if not client:
        return

    try:
        await client.setex(CATALOG_KEY, settings.REDIS_CACHE_TTL, json.dumps(movies, default=str))
        record_cache_operation("set", hit=False)
        logger.debug("cache_set", key=CATALOG_KEY, ttl=settings.REDIS_CACHE_TTL, movies=len(movies))
    except Exception as e:
        logger.error("cache_set_error", key=CATALOG_KEY, error=str(e))


async def invalidate_catalog_cache() -> None:
    """Drop every catalog key. SCAN keeps this non-blocking on a shared Redis."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=CATALOG_KEY_PATTERN, count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Redis keyspace hit/miss counters for the health endpoint."""
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
