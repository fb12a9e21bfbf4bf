"""UserRecordService — cache-aside consistency for user records.

Reads are read-through: cache first, store on miss, then populate the cache
with a fixed TTL. Negative results are never cached.

Writes are write-invalidate: the store mutation is committed first, then the
cache entry for the username is deleted. The cache is never updated in place.
Create leaves the cache cold, and list always bypasses it.

Cache failures never abort an operation. A failed get is a miss; a failed
set or delete is logged by the cache accessor and ignored. Store failures
roll back the transaction and propagate as AppError subclasses; a failed
commit surfaces as StoreUnavailableError, and a failed rollback never
masks the original error.

Operations on the same username are deliberately not serialized. A read can
miss, fetch the pre-update row, lose the race with a concurrent update's
invalidation, and then write the old value back into the cache. That entry
survives until TTL expiry; the TTL is the staleness bound.

If the task is cancelled between commit and invalidation, the entry is left
as-is and expires with its TTL.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.us_common.errors import UserNotFoundError
from src.us_common.store_errors import commit, rollback_quietly
from src.us_user.application.schemas import UserResponse
from src.us_user.domain.cache import UserCacheProtocol
from src.us_user.domain.models import User
from src.us_user.domain.repository import UserRepositoryProtocol

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 3600


class UserRecordService:
    """Long-lived; construct once at startup and share across requests."""

    def __init__(
        self,
        repo: UserRepositoryProtocol,
        cache: UserCacheProtocol,
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
    ) -> None:
        self._repo = repo
        self._cache = cache
        self._ttl = cache_ttl_seconds

    async def list_users(self, db: AsyncSession) -> list[UserResponse]:
        users = await self._repo.list_all(db)
        return [UserResponse.from_domain(u) for u in users]

    async def get_user(self, db: AsyncSession, username: str) -> UserResponse:
        cached = await self._cached_user(username)
        if cached is not None:
            return UserResponse.from_domain(cached)

        # Raises UserNotFoundError; nothing is cached for missing users
        user = await self._repo.get_by_username(db, username)
        await self._cache.set(username, user.to_json(), self._ttl)
        return UserResponse.from_domain(user)

    async def create_user(
        self, db: AsyncSession, username: str, email: str
    ) -> UserResponse:
        try:
            user_id = await self._repo.insert(db, username, email)
            await commit(db)
        except Exception:
            await rollback_quietly(db)
            raise
        logger.info("Created user %s (id=%d)", username, user_id)
        return UserResponse(id=user_id, username=username, email=email)

    async def update_user(
        self, db: AsyncSession, username: str, email: str
    ) -> UserResponse:
        try:
            updated = await self._repo.update_email(db, username, email)
            await commit(db)
        except Exception:
            await rollback_quietly(db)
            raise
        if updated is None:
            raise UserNotFoundError(username)

        await self._invalidate(username)
        return UserResponse.from_domain(updated)

    async def delete_user(self, db: AsyncSession, username: str) -> None:
        try:
            affected = await self._repo.delete_by_username(db, username)
            await commit(db)
        except Exception:
            await rollback_quietly(db)
            raise
        if affected == 0:
            raise UserNotFoundError(username)

        await self._invalidate(username)
        logger.info("Deleted user %s", username)

    # ------------------------------------------------------------------
    # Cache helpers
    # ------------------------------------------------------------------

    async def _cached_user(self, username: str) -> User | None:
        result = await self._cache.get(username)
        if not result.hit:
            logger.debug("Cache miss for %s", username)
            return None
        try:
            user = User.from_json(result.value)  # type: ignore[arg-type]
        except ValueError as exc:
            # Unreadable entry: fall through to the store, which overwrites it
            logger.warning("Discarding undecodable cache entry for %s: %s", username, exc)
            return None
        logger.debug("Cache hit for %s", username)
        return user

    async def _invalidate(self, username: str) -> None:
        result = await self._cache.delete(username)
        if not result.ok:
            logger.warning(
                "Cache invalidation skipped for %s; entry expires with TTL", username
            )
