"""Shared test fixtures.

FakeUserCache and FakeUserStore implement the two adapter Protocols in
memory, so the cache-aside rules can be checked without Redis or PostgreSQL.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any, TypeVar

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.uc_common.errors import CacheUnavailableError
from src.uc_users.api.router import get_user_service
from src.uc_users.application.service import UserApplicationService
from src.uc_users.domain.models import User

T = TypeVar("T")


class FakeUserCache:
    """Dict-backed cache. Put an operation name in fail_on to make it raise."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_on: set[str] = set()

    def _record(self, op: str, key: str) -> None:
        self.calls.append((op, key))
        if op in self.fail_on:
            raise CacheUnavailableError(op)

    async def get(self, key: str) -> str | None:
        self._record("get", key)
        return self.values.get(key)

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        self._record("set", key)
        self.values[key] = value
        self.ttls[key] = ttl_seconds

    async def delete(self, key: str) -> None:
        self._record("delete", key)
        self.values.pop(key, None)
        self.ttls.pop(key, None)


class FakeUserStore:
    """In-memory store with all-or-nothing transactions.

    A transaction works on a staged copy of the rows; the copy replaces the
    committed rows only when fn returns normally.
    """

    def __init__(self, users: list[User] | None = None) -> None:
        self.rows: dict[str, User] = {u.id: u for u in users or []}
        self.fetch_count = 0
        self.fail_fetch = False
        self.fail_on_id: str | None = None
        self.upserted: list[str] = []
        self.commits = 0
        self.rollbacks = 0
        self.releases = 0

    async def fetch_all(self) -> list[User]:
        self.fetch_count += 1
        if self.fail_fetch:
            raise ConnectionError("database unavailable")
        return [self.rows[key] for key in sorted(self.rows)]

    async def with_transaction(self, fn: Callable[[Any], Awaitable[T]]) -> T:
        staged = dict(self.rows)
        try:
            result = await fn(staged)
        except Exception:
            self.rollbacks += 1
            raise
        else:
            self.rows = staged
            self.commits += 1
            return result
        finally:
            self.releases += 1

    async def upsert(self, db: dict[str, User], user: User) -> None:
        self.upserted.append(user.id)
        if user.id == self.fail_on_id:
            raise RuntimeError(f"insert failed for {user.id}")
        db[user.id] = user


@pytest.fixture
def fake_cache() -> FakeUserCache:
    return FakeUserCache()


@pytest.fixture
def fake_store() -> FakeUserStore:
    return FakeUserStore()


@pytest.fixture
def service(fake_cache: FakeUserCache, fake_store: FakeUserStore) -> UserApplicationService:
    return UserApplicationService(
        cache=fake_cache, store=fake_store, cache_key="users", ttl_seconds=60, read_fallback=False
    )


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def users_client(
    client: AsyncClient, service: UserApplicationService
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose users endpoints run against the in-memory fakes."""
    app.dependency_overrides[get_user_service] = lambda: service
    yield client
    app.dependency_overrides.pop(get_user_service, None)
