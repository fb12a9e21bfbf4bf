"""Repository Protocol — dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.

Error contract:
  get_by_username  -> UserNotFoundError when no row matches
  insert           -> UsernameExistsError on unique-constraint violation
  any operation    -> StoreUnavailableError on connectivity/query failure
Missing users are not errors for the mutations: update_email returns None
(0 rows affected) and delete_by_username returns its affected count, 0 or 1.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.us_user.domain.models import User


class UserRepositoryProtocol(Protocol):
    async def list_all(self, db: AsyncSession) -> list[User]: ...

    async def get_by_username(self, db: AsyncSession, username: str) -> User: ...

    async def insert(self, db: AsyncSession, username: str, email: str) -> int: ...

    async def update_email(
        self, db: AsyncSession, username: str, email: str
    ) -> User | None: ...

    async def delete_by_username(self, db: AsyncSession, username: str) -> int: ...
