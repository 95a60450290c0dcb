"""Integration-test fixtures.

Requires PostgreSQL + Redis (docker compose up) and migrations
(alembic upgrade head). The whole directory is skipped when either
service or the users table is missing.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool remain valid across the session.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from config.settings import settings
from src.main import app
from src.uc_common.database import engine
from src.uc_common.redis_client import get_redis

TEST_ID_PREFIX = "it-"


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def services_ready() -> None:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1 FROM users LIMIT 1"))
        await (await get_redis()).ping()
    except Exception as exc:  # noqa: BLE001
        pytest.skip(f"PostgreSQL/Redis not available: {exc}")


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client(services_ready: None) -> AsyncGenerator[AsyncClient, None]:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session")
async def clean_users(services_ready: None) -> AsyncGenerator[None, None]:
    """Remove test rows and the snapshot before and after each test."""

    async def _clean() -> None:
        async with engine.begin() as conn:
            await conn.execute(
                text("DELETE FROM users WHERE id LIKE :prefix"),
                {"prefix": f"{TEST_ID_PREFIX}%"},
            )
        await (await get_redis()).delete(settings.USERS_CACHE_KEY)

    await _clean()
    yield
    await _clean()
