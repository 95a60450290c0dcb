"""Store Protocol — dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar

from src.uc_users.domain.models import User

T = TypeVar("T")


class UserStoreProtocol(Protocol):
    async def fetch_all(self) -> list[User]: ...

    async def with_transaction(
        self, fn: Callable[[Any], Awaitable[T]]
    ) -> T: ...

    async def upsert(self, db: Any, user: User) -> None: ...
