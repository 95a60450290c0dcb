"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Users
  9xxx: System

Every error renders as {"error": message}. The message is the only part a
client ever sees, so it never carries driver or validation detail.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Users ---

class UsersFetchError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Failed to fetch users", 500)


class UsersWriteError(AppError):
    def __init__(self, code: int = 1002) -> None:
        super().__init__(code, "Failed to write users", 500)


class InvalidUserPayloadError(UsersWriteError):
    """Malformed write input. Reported to clients as a plain write failure."""

    def __init__(self, detail: str) -> None:
        super().__init__(1003)
        self.detail = detail

    def __str__(self) -> str:
        return f"{self.message}: {self.detail}"


# --- 9xxx: System ---

class CacheUnavailableError(AppError):
    def __init__(self, operation: str) -> None:
        super().__init__(9001, "Cache unavailable", 500)
        self.operation = operation

