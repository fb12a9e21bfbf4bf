"""Translation of durable-store failures into StoreUnavailableError.

Used by the repository around statements and by application services
around commit/rollback, so no raw SQLAlchemy or socket error reaches a
request handler.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.us_common.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """TimeoutError is an OSError subclass, so driver timeouts land here too."""
    try:
        yield
    except (SQLAlchemyError, OSError) as exc:
        raise StoreUnavailableError(f"Store {operation} failed: {exc}") from exc


async def commit(db: AsyncSession) -> None:
    with store_errors("commit"):
        await db.commit()


async def rollback_quietly(db: AsyncSession) -> None:
    """Roll back without masking the error already in flight."""
    try:
        await db.rollback()
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Rollback failed: %s", exc)
