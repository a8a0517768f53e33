"""
Redis Configuration

Async Redis client used for rate limiting. Redis is optional: when it is
unreachable the rate limiter falls back to process memory.
"""

import logging

from redis.asyncio import Redis, from_url

from placement_portal.core.config import settings

logger = logging.getLogger(__name__)

redis_client: Redis | None = None


async def init_redis(url: str | None = None) -> Redis:
    """
    Initialize the Redis connection and verify it with a PING.

    Call this on application startup.
    """
    global redis_client
    client = from_url(url or settings.redis_url, encoding="utf-8", decode_responses=True)
    await client.ping()
    redis_client = client
    return redis_client


def get_redis() -> Redis | None:
    """Return the Redis client, or None if Redis is not available."""
    return redis_client


async def close_redis() -> None:
    """Close Redis connection."""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
        logger.info("Redis connection closed")
