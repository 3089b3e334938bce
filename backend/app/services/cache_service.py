"""
Redis caching for the public event feed.

What we cache:
  - The serialized newest-first event list under a single key ("events:feed")

Invalidation:
  - Every event create, update and delete deletes the key and bumps a
    generation counter ("events:feed:generation")
  - A feed read from the database is only stored if the generation it was
    read under is still current, so a slow reader cannot put back a feed
    that a concurrent write already invalidated
  - TTL-based expiry as a safety net

The cache is optional. When Redis is disabled or unreachable the feed is
read from the database and the failure is only logged. After a failed
connect no new attempt is made for REDIS_RETRY_BACKOFF seconds.
"""

import json
import time
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError, WatchError

from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.metrics import record_cache_operation

logger = get_logger(__name__)

FEED_CACHE_KEY = "events:feed"
FEED_GENERATION_KEY = "events:feed:generation"

_redis_client: Optional[redis.Redis] = None
_retry_after: float = 0.0


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled or down."""
    global _redis_client, _retry_after
    settings = get_settings()

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        if time.monotonic() < _retry_after:
            return None

        client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
        )
        try:
            await client.ping()
        except (RedisError, OSError) as e:
            _retry_after = time.monotonic() + settings.REDIS_RETRY_BACKOFF
            logger.error(
                "redis_connection_failed",
                error=str(e),
                retry_in_seconds=settings.REDIS_RETRY_BACKOFF,
            )
            await client.aclose()
            return None
        logger.info("redis_connected", url=settings.REDIS_URL)
        _redis_client = client

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


async def get_cached_feed() -> Optional[list[dict]]:
    client = await get_redis()
    if not client:
        return None

    try:
        data = await client.get(FEED_CACHE_KEY)
    except RedisError as e:
        logger.error("cache_get_error", key=FEED_CACHE_KEY, error=str(e))
        return None

    record_cache_operation("get", hit=data is not None)
    if data is None:
        return None
    return json.loads(data)


async def get_feed_generation() -> Optional[str]:
    """Current write generation; read it before loading the feed from the database."""
    client = await get_redis()
    if not client:
        return None

    try:
        return await client.get(FEED_GENERATION_KEY)
    except RedisError as e:
        logger.error("cache_get_error", key=FEED_GENERATION_KEY, error=str(e))
        return None


async def set_cached_feed(events: list[dict], generation: Optional[str]) -> None:
    """Store the feed unless a write happened since `generation` was read."""
    client = await get_redis()
    if not client:
        return

    settings = get_settings()
    try:
        async with client.pipeline(transaction=True) as pipe:
            await pipe.watch(FEED_GENERATION_KEY)
            if await pipe.get(FEED_GENERATION_KEY) != generation:
                await pipe.unwatch()
                logger.debug("cache_set_skipped", key=FEED_CACHE_KEY, reason="stale")
                return
            pipe.multi()
            pipe.setex(FEED_CACHE_KEY, settings.REDIS_CACHE_TTL, json.dumps(events, default=str))
            await pipe.execute()
        logger.debug("cache_set", key=FEED_CACHE_KEY, ttl=settings.REDIS_CACHE_TTL)
    except WatchError:
        logger.debug("cache_set_skipped", key=FEED_CACHE_KEY, reason="stale")
    except RedisError as e:
        logger.error("cache_set_error", key=FEED_CACHE_KEY, error=str(e))


async def invalidate_feed_cache() -> None:
    client = await get_redis()
    if not client:
        return

    try:
        async with client.pipeline(transaction=True) as pipe:
            pipe.incr(FEED_GENERATION_KEY)
            pipe.delete(FEED_CACHE_KEY)
            generation, deleted = await pipe.execute()
        logger.info("cache_invalidated", keys_deleted=deleted, generation=generation)
    except RedisError as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for the health endpoint."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
    except RedisError as e:
        return {"status": "error", "error": str(e)}

    hits = info.get("keyspace_hits", 0)
    misses = info.get("keyspace_misses", 0)
    return {
        "status": "connected",
        "hits": hits,
        "misses": misses,
        "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
    }
