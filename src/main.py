"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 5000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from redis.exceptions import RedisError
from sqlalchemy import text

from config.settings import settings
from src.us_common.database import engine
from src.us_common.errors import AppError
from src.us_common.logging_config import setup_logging
from src.us_common.redis_client import close_redis, create_redis
from src.us_common.response import error_response
from src.us_gateway.middleware.request_log import RequestLogMiddleware
from src.us_user.api.router import router as user_router
from src.us_user.application.service import UserRecordService
from src.us_user.infrastructure.cache import RedisUserCache
from src.us_user.infrastructure.persistence import UserRepository

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB, probe Redis, build the service. Shutdown: dispose."""
    # Startup
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    redis = create_redis(settings)
    try:
        await redis.ping()
    except (RedisError, OSError) as exc:
        # Cache is best-effort; serve from the store until Redis returns
        logger.warning("Redis unreachable at startup: %s", exc)
    app.state.user_service = UserRecordService(
        repo=UserRepository(),
        cache=RedisUserCache(redis),
        cache_ttl_seconds=settings.USER_CACHE_TTL_SECONDS,
    )
    yield
    # Shutdown
    await engine.dispose()
    await close_redis(redis)


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(
        exc.code, exc.message, request_id=getattr(request.state, "request_id", None)
    )
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(user_router, prefix="/api/v1")


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Hello World!"


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
