"""UserRepository — concrete implementation of UserRepositoryProtocol.

All queries use raw parameterized text() SQL (no ORM, no string building).
Every statement touches at most one row, so single-row atomicity of the
store is all that is relied on.

Transaction ownership: the CALLER (application service) commits or rolls
back. The repository only executes statements.
"""

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.us_common.errors import (
    StoreUnavailableError,
    UsernameExistsError,
    UserNotFoundError,
)
from src.us_common.store_errors import store_errors
from src.us_user.domain.models import User

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_LIST_USERS_SQL = text("""
    SELECT id, username, email
    FROM users
    ORDER BY id
""")

_GET_USER_SQL = text("""
    SELECT id, username, email
    FROM users
    WHERE username = :username
""")

_INSERT_USER_SQL = text("""
    INSERT INTO users (username, email)
    VALUES (:username, :email)
    RETURNING id
""")

_UPDATE_EMAIL_SQL = text("""
    UPDATE users
    SET email = :email
    WHERE username = :username
    RETURNING id, username, email
""")

_DELETE_USER_SQL = text("""
    DELETE FROM users
    WHERE username = :username
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------

def _row_to_user(row: object) -> User:
    return User(
        id=row.id,  # type: ignore[attr-defined]
        username=row.username,  # type: ignore[attr-defined]
        email=row.email,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class UserRepository:
    async def list_all(self, db: AsyncSession) -> list[User]:
        with store_errors("list"):
            result = await db.execute(_LIST_USERS_SQL)
            rows = result.fetchall()
        return [_row_to_user(row) for row in rows]

    async def get_by_username(self, db: AsyncSession, username: str) -> User:
        with store_errors("get"):
            result = await db.execute(_GET_USER_SQL, {"username": username})
            row = result.fetchone()
        if row is None:
            raise UserNotFoundError(username)
        return _row_to_user(row)

    async def insert(self, db: AsyncSession, username: str, email: str) -> int:
        try:
            result = await db.execute(
                _INSERT_USER_SQL, {"username": username, "email": email}
            )
        except IntegrityError as exc:
            # uq_users_username is the only unique constraint on the table
            raise UsernameExistsError(username) from exc
        except (SQLAlchemyError, OSError) as exc:
            raise StoreUnavailableError(f"Store insert failed: {exc}") from exc
        return int(result.scalar_one())

    async def update_email(
        self, db: AsyncSession, username: str, email: str
    ) -> User | None:
        with store_errors("update"):
            result = await db.execute(
                _UPDATE_EMAIL_SQL, {"username": username, "email": email}
            )
            row = result.fetchone()
        return _row_to_user(row) if row else None

    async def delete_by_username(self, db: AsyncSession, username: str) -> int:
        with store_errors("delete"):
            result = await db.execute(_DELETE_USER_SQL, {"username": username})
        return result.rowcount
