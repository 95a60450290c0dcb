"""Pydantic schemas for uc_users: write-input normalization and the cache snapshot.

A write body is either one user object or an array of them; both normalize
to list[User] here, before any validation or persistence logic runs.
The cached snapshot is the JSON array form of list[UserRecord].
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from src.uc_common.errors import InvalidUserPayloadError
from src.uc_users.domain.models import User


class UserRecord(BaseModel):
    """Wire form of a user. Strict: "30" is not an age, 30 is."""

    model_config = ConfigDict(strict=True)

    id: str = Field(..., min_length=1)
    name: str
    email: str
    age: int

    @classmethod
    def from_domain(cls, user: User) -> "UserRecord":
        return cls(id=user.id, name=user.name, email=user.email, age=user.age)

    def to_domain(self) -> User:
        return User(id=self.id, name=self.name, email=self.email, age=self.age)


_USER_LIST = TypeAdapter(list[UserRecord])


def _summarize(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
        for err in exc.errors()
    )


def normalize_users_payload(body: Any) -> list[User]:
    """Turn a parsed write body (object or array) into a non-empty list of users.

    Raises InvalidUserPayloadError for an empty array, a non-object item,
    a missing or empty id, or a field of the wrong type.
    """
    items = body if isinstance(body, list) else [body]
    if not items:
        raise InvalidUserPayloadError("empty user list")
    try:
        records = _USER_LIST.validate_python(items)
    except ValidationError as exc:
        raise InvalidUserPayloadError(_summarize(exc)) from exc
    return [record.to_domain() for record in records]


def encode_snapshot(users: list[User]) -> str:
    records = [UserRecord.from_domain(u) for u in users]
    return _USER_LIST.dump_json(records).decode()


def decode_snapshot(raw: str) -> list[User] | None:
    """Parse a cached snapshot. None means the value is not a usable snapshot."""
    try:
        records = _USER_LIST.validate_json(raw)
    except ValidationError:
        return None
    return [record.to_domain() for record in records]
