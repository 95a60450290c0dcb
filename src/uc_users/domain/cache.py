"""Cache Protocol for the users collection snapshot.

Storage semantics only: the cache knows nothing about users or SQL.
Whether a failure fails the request is the application service's call.

Snapshot lifecycle:
  - Read: cache-aside (check cache → DB on miss → populate cache with TTL)
  - Write: DB first (one transaction), then delete the key
"""

from typing import Protocol


class UserCacheProtocol(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def delete(self, key: str) -> None: ...
