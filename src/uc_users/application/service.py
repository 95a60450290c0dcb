"""UserApplicationService — cache-aside coordination for the users collection.

The whole collection is cached as one snapshot under one key:
  - Read: cache probe → (miss) full ordered DB fetch → populate with TTL.
    A hit never touches the database.
  - Write: upsert every record in one transaction → commit → delete the key.
    The snapshot is never patched in place; the next read repopulates it.

Cache failure policy:
  - probe (get) fails: the read fails, unless read_fallback is set, in which
    case the read goes to the database.
  - populate (set) fails: logged, the fetched users are still returned.
  - invalidate (delete) fails: logged, the committed write is still reported
    as successful. The TTL bounds how long the stale snapshot can live.

Every other failure ends the request with UsersFetchError / UsersWriteError.
The original exception is logged here and never reaches the response body.
"""

import logging
from collections.abc import Sequence
from typing import Any

from config.settings import settings
from src.uc_common.errors import (
    CacheUnavailableError,
    InvalidUserPayloadError,
    UsersFetchError,
    UsersWriteError,
)
from src.uc_users.application.schemas import decode_snapshot, encode_snapshot
from src.uc_users.domain.cache import UserCacheProtocol
from src.uc_users.domain.models import User
from src.uc_users.domain.repository import UserStoreProtocol
from src.uc_users.infrastructure.persistence import UserStore

logger = logging.getLogger("uc.users")


class UserApplicationService:
    def __init__(
        self,
        cache: UserCacheProtocol,
        store: UserStoreProtocol | None = None,
        *,
        cache_key: str | None = None,
        ttl_seconds: int | None = None,
        read_fallback: bool | None = None,
    ) -> None:
        self._cache = cache
        self._store: UserStoreProtocol = store or UserStore()
        self._cache_key = cache_key or settings.USERS_CACHE_KEY
        self._ttl_seconds = ttl_seconds or settings.USERS_CACHE_TTL_SECONDS
        self._read_fallback = (
            settings.USERS_CACHE_READ_FALLBACK if read_fallback is None else read_fallback
        )

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    async def fetch_all(self) -> list[User]:
        try:
            return await self._read_through()
        except Exception as exc:
            logger.exception("Reading users failed")
            raise UsersFetchError() from exc

    async def _read_through(self) -> list[User]:
        cached = await self._probe()
        if cached is not None:
            users = decode_snapshot(cached)
            if users is not None:
                logger.debug("Users cache hit (%d users)", len(users))
                return users
            logger.warning("Discarding malformed users snapshot at key %r", self._cache_key)

        logger.debug("Users cache miss, reading from database")
        users = await self._store.fetch_all()
        await self._populate(users)
        return users

    async def _probe(self) -> str | None:
        try:
            return await self._cache.get(self._cache_key)
        except CacheUnavailableError:
            if not self._read_fallback:
                raise
            logger.warning("Users cache probe failed, falling back to database", exc_info=True)
            return None

    async def _populate(self, users: list[User]) -> None:
        try:
            await self._cache.set_with_expiry(
                self._cache_key, encode_snapshot(users), self._ttl_seconds
            )
        except CacheUnavailableError:
            logger.warning("Users cache populate failed, serving uncached result", exc_info=True)

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    async def upsert_many(self, records: Sequence[User]) -> int:
        """Upsert all records atomically, then invalidate the snapshot.

        Returns the number of records accepted (duplicates included).
        Duplicate ids in one batch: the last occurrence wins.
        """
        users = list(records)
        _check_batch(users)

        async def upsert_all(db: Any) -> None:
            for user in users:
                await self._store.upsert(db, user)

        try:
            await self._store.with_transaction(upsert_all)
        except Exception as exc:
            logger.exception("Writing %d users failed, transaction rolled back", len(users))
            raise UsersWriteError() from exc

        await self._invalidate()
        return len(users)

    async def _invalidate(self) -> None:
        try:
            await self._cache.delete(self._cache_key)
        except CacheUnavailableError:
            logger.warning(
                "Users cache invalidation failed, snapshot may be stale for up to %ds",
                self._ttl_seconds,
                exc_info=True,
            )


def _check_batch(users: list[User]) -> None:
    if not users:
        raise InvalidUserPayloadError("empty user list")
    for index, user in enumerate(users):
        if not user.id:
            raise InvalidUserPayloadError(f"record {index} has an empty id")
