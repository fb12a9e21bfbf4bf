"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and the Redis client remain valid across the
entire test session. ASGITransport does not run the lifespan, so the
service is wired here the same way the lifespan wires it.
"""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from config.settings import settings
from src.main import app
from src.us_common.redis_client import close_redis, create_redis
from src.us_user.application.service import UserRecordService
from src.us_user.infrastructure.cache import RedisUserCache
from src.us_user.infrastructure.persistence import UserRepository


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def redis_client():
    client = create_redis(settings)
    yield client
    await close_redis(client)


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client(redis_client) -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    app.state.user_service = UserRecordService(
        repo=UserRepository(),
        cache=RedisUserCache(redis_client),
        cache_ttl_seconds=settings.USER_CACHE_TTL_SECONDS,
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
