"""001: create users table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE users (
            id          BIGSERIAL       PRIMARY KEY,
            username    VARCHAR(255)    NOT NULL,
            email       VARCHAR(255)    NOT NULL,
            CONSTRAINT uq_users_username UNIQUE (username)
        );
    """)
    op.execute("COMMENT ON TABLE users IS 'User records; username is the external key';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
