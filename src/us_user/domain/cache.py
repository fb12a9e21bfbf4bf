"""Cache Protocol for user records.

Every cache operation returns a CacheResult instead of raising. A failed
result carries a CacheUnavailableError that the record service downgrades
to "absent"; it never reaches the caller of the service.
"""

from dataclasses import dataclass
from typing import Protocol

from src.us_common.errors import CacheUnavailableError


@dataclass(frozen=True)
class CacheResult:
    value: str | None = None
    error: CacheUnavailableError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def hit(self) -> bool:
        return self.error is None and self.value is not None


MISS = CacheResult()


class UserCacheProtocol(Protocol):
    async def get(self, key: str) -> CacheResult: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> CacheResult: ...

    async def delete(self, key: str) -> CacheResult: ...
