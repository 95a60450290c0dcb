"""UserStore — concrete implementation of UserStoreProtocol.

All queries use raw text() SQL (no ORM).
Alembic migration 001_create_users.py is the authoritative DDL source.

Each public call opens its own session from the shared pool and closes it
before returning, so a connection is never held across requests.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.uc_common.database import async_session_factory
from src.uc_users.domain.models import User

logger = logging.getLogger("uc.users.store")

T = TypeVar("T")

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_FETCH_ALL_SQL = text("""
    SELECT id, name, email, age
    FROM users
    ORDER BY id
""")

_UPSERT_USER_SQL = text("""
    INSERT INTO users (id, name, email, age)
    VALUES (:id, :name, :email, :age)
    ON CONFLICT (id) DO UPDATE SET
        name = EXCLUDED.name,
        email = EXCLUDED.email,
        age = EXCLUDED.age
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------

def _row_to_user(row: object) -> User:
    return User(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        email=row.email,  # type: ignore[attr-defined]
        age=row.age,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class UserStore:
    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession] | None = None
    ) -> None:
        self._session_factory = session_factory or async_session_factory

    async def fetch_all(self) -> list[User]:
        async with self._session_factory() as session:
            result = await session.execute(_FETCH_ALL_SQL)
            rows = result.fetchall()
        return [_row_to_user(row) for row in rows]

    async def with_transaction(
        self, fn: Callable[[AsyncSession], Awaitable[T]]
    ) -> T:
        """Run fn inside one transaction on one pooled connection.

        Commits when fn returns. Any exception from fn or from the commit
        rolls the transaction back and is re-raised unchanged, even when the
        rollback itself fails (that failure is only logged). Leaving the
        session context returns the connection to the pool on every path.
        """
        async with self._session_factory() as session:
            await session.begin()
            try:
                result = await fn(session)
                await session.commit()
            except Exception:
                logger.debug("Rolling back users transaction")
                try:
                    await session.rollback()
                except Exception:
                    logger.exception("Rollback of users transaction failed")
                raise
        return result

    async def upsert(self, db: AsyncSession, user: User) -> None:
        """Insert the user, or overwrite name/email/age if the id exists."""
        await db.execute(_UPSERT_USER_SQL, user.to_dict())
