"""Domain models for uc_users — pure dataclasses, no business logic."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    age: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
