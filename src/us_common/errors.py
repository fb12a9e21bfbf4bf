"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: User records
  9xxx: System

CacheUnavailableError is never raised to callers of the record service.
The cache accessor carries it inside a CacheResult and the service
downgrades it to a miss.
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


# --- 1xxx: User records ---

class UserNotFoundError(AppError):
    def __init__(self, username: str) -> None:
        super().__init__(1001, f"User not found: {username}", 404)


class UsernameExistsError(AppError):
    def __init__(self, username: str) -> None:
        super().__init__(1002, f"Username already exists: {username}", 409)


# --- 9xxx: System ---

class StoreUnavailableError(AppError):
    def __init__(self, detail: str = "Durable store unavailable") -> None:
        super().__init__(9001, detail, 503)


class CacheUnavailableError(AppError):
    def __init__(self, detail: str = "Cache unavailable") -> None:
        super().__init__(9003, detail, 503)
