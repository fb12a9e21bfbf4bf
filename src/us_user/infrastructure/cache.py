"""RedisUserCache — concrete implementation of UserCacheProtocol.

Best-effort by contract: Redis and socket failures are logged and returned
as a failed CacheResult, never raised. asyncio.CancelledError is not an
Exception subclass and propagates untouched.
"""

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.us_common.errors import CacheUnavailableError
from src.us_user.domain.cache import MISS, CacheResult

logger = logging.getLogger(__name__)


def _failed(operation: str, key: str, exc: Exception) -> CacheResult:
    logger.warning("Cache %s failed for key=%s: %s", operation, key, exc)
    return CacheResult(error=CacheUnavailableError(f"Cache {operation} failed: {exc}"))


class RedisUserCache:
    """Keys are raw usernames; values are JSON-encoded user records."""

    def __init__(self, client: aioredis.Redis) -> None:
        self._client = client

    async def get(self, key: str) -> CacheResult:
        try:
            value = await self._client.get(key)
        except (RedisError, OSError, UnicodeDecodeError) as exc:
            # decode_responses=True: a non-UTF-8 value from a foreign writer
            # fails here rather than in the codec
            return _failed("get", key, exc)
        if value is None:
            return MISS
        return CacheResult(value=value)

    async def set(self, key: str, value: str, ttl_seconds: int) -> CacheResult:
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except (RedisError, OSError) as exc:
            return _failed("set", key, exc)
        return CacheResult()

    async def delete(self, key: str) -> CacheResult:
        try:
            await self._client.delete(key)
        except (RedisError, OSError) as exc:
            return _failed("delete", key, exc)
        return CacheResult()
