"""Shared test fixtures.

FakeUserRepository counts every call per operation so tests can assert how
often the store was consulted. FakeUserCache records a call log and can be
switched into an "unavailable" mode where every operation fails.
"""

from collections import Counter
from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.us_common.database import get_db_session
from src.us_common.errors import (
    CacheUnavailableError,
    UsernameExistsError,
    UserNotFoundError,
)
from src.us_user.api.dependencies import get_user_service
from src.us_user.application.service import UserRecordService
from src.us_user.domain.cache import MISS, CacheResult
from src.us_user.domain.models import User


class FakeUserRepository:
    def __init__(self) -> None:
        self.rows: dict[str, User] = {}
        self.calls: Counter[str] = Counter()
        self.fail_with: Exception | None = None
        self._next_id = 1

    def _enter(self, op: str) -> None:
        self.calls[op] += 1
        if self.fail_with is not None:
            raise self.fail_with

    async def list_all(self, db) -> list[User]:
        self._enter("list_all")
        return sorted(self.rows.values(), key=lambda u: u.id)

    async def get_by_username(self, db, username: str) -> User:
        self._enter("get_by_username")
        if username not in self.rows:
            raise UserNotFoundError(username)
        return self.rows[username]

    async def insert(self, db, username: str, email: str) -> int:
        self._enter("insert")
        if username in self.rows:
            raise UsernameExistsError(username)
        user_id = self._next_id
        self._next_id += 1
        self.rows[username] = User(id=user_id, username=username, email=email)
        return user_id

    async def update_email(self, db, username: str, email: str) -> User | None:
        self._enter("update_email")
        current = self.rows.get(username)
        if current is None:
            return None
        updated = User(id=current.id, username=username, email=email)
        self.rows[username] = updated
        return updated

    async def delete_by_username(self, db, username: str) -> int:
        self._enter("delete_by_username")
        return 1 if self.rows.pop(username, None) is not None else 0


class FakeUserCache:
    def __init__(self) -> None:
        self.entries: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.calls: list[tuple[str, str]] = []
        self.unavailable = False

    def _failed(self, op: str) -> CacheResult:
        return CacheResult(error=CacheUnavailableError(f"Cache {op} failed"))

    async def get(self, key: str) -> CacheResult:
        self.calls.append(("get", key))
        if self.unavailable:
            return self._failed("get")
        value = self.entries.get(key)
        return MISS if value is None else CacheResult(value=value)

    async def set(self, key: str, value: str, ttl_seconds: int) -> CacheResult:
        self.calls.append(("set", key))
        if self.unavailable:
            return self._failed("set")
        self.entries[key] = value
        self.ttls[key] = ttl_seconds
        return CacheResult()

    async def delete(self, key: str) -> CacheResult:
        self.calls.append(("delete", key))
        if self.unavailable:
            return self._failed("delete")
        self.entries.pop(key, None)
        self.ttls.pop(key, None)
        return CacheResult()

    def ops(self, op: str) -> list[str]:
        return [key for name, key in self.calls if name == op]


@pytest.fixture
def fake_repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def fake_cache() -> FakeUserCache:
    return FakeUserCache()


@pytest.fixture
def db() -> MagicMock:
    session = MagicMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
def service(fake_repo: FakeUserRepository, fake_cache: FakeUserCache) -> UserRecordService:
    return UserRecordService(repo=fake_repo, cache=fake_cache, cache_ttl_seconds=3600)


@pytest.fixture
async def client(service: UserRecordService, db: MagicMock) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the fake-backed service."""

    async def _db_override() -> AsyncGenerator[MagicMock, None]:
        yield db

    app.dependency_overrides[get_user_service] = lambda: service
    app.dependency_overrides[get_db_session] = _db_override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
