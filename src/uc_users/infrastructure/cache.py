"""RedisUserCache — concrete implementation of UserCacheProtocol.

Thin wrapper over the shared redis.asyncio client. No retries and no
fallback: every RedisError surfaces as CacheUnavailableError.
"""

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.uc_common.errors import CacheUnavailableError


class RedisUserCache:
    def __init__(self, client: aioredis.Redis) -> None:
        self._client = client

    async def get(self, key: str) -> str | None:
        try:
            return await self._client.get(key)
        except RedisError as exc:
            raise CacheUnavailableError("get") from exc

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except RedisError as exc:
            raise CacheUnavailableError("set") from exc

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except RedisError as exc:
            raise CacheUnavailableError("delete") from exc
