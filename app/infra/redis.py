"""Redis configuration and client management."""

import json
import logging
from typing import Any

from redis.asyncio import ConnectionPool, Redis

from app.core.config import settings

logger = logging.getLogger(__name__)

# Redis connection pool
redis_pool: ConnectionPool | None = None
redis_client: Redis | None = None


async def init_redis() -> Redis:
    """Initialize Redis connection pool and client."""
    global redis_pool, redis_client

    redis_pool = ConnectionPool.from_url(
        str(settings.REDIS_URL),
        max_connections=settings.REDIS_MAX_CONNECTIONS,
        decode_responses=True,
    )
    redis_client = Redis(connection_pool=redis_pool)

    # Test connection
    await redis_client.ping()

    return redis_client


def get_redis_client() -> Redis | None:
    """Get the Redis client if it was initialized, otherwise None."""
    return redis_client


async def close_redis() -> None:
    """Close Redis connections."""
    global redis_pool, redis_client

    if redis_client:
        await redis_client.aclose()
        redis_client = None

    if redis_pool:
        await redis_pool.disconnect()
        redis_pool = None


class CacheService:
    """Service for caching operations."""

    def __init__(self, redis: Redis, default_ttl: int | None = None) -> None:
        self.redis = redis
        self.default_ttl = default_ttl or settings.REDIS_DEFAULT_TTL

    async def get(self, key: str) -> str | None:
        """Get a value from cache."""
        return await self.redis.get(key)

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        """Set a value in cache with optional TTL."""
        return await self.redis.set(key, value, ex=ttl or self.default_ttl)

    async def set_json(self, key: str, data: Any, ttl: int | None = None) -> bool:
        """Set a JSON value in cache."""
        return await self.set(key, json.dumps(data), ttl)

    async def get_json(self, key: str) -> Any | None:
        """Get a JSON value from cache."""
        value = await self.get(key)
        if value:
            return json.loads(value)
        return None
