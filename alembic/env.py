"""Alembic environment for the users schema.

Revisions are raw SQL (op.execute), so there is no metadata to diff and
autogenerate is unused. The URL is injected from config.settings; the
migration engine uses NullPool so no connections outlive the run.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from config.settings import settings

config = context.config
# configparser interpolation: escape "%" in URL-encoded passwords
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL.replace("%", "%%"))

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _configure_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=None,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )


def _apply(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=None)
    with context.begin_transaction():
        context.run_migrations()


async def _apply_online() -> None:
    migration_engine = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    try:
        async with migration_engine.connect() as connection:
            await connection.run_sync(_apply)
    finally:
        await migration_engine.dispose()


if context.is_offline_mode():
    _configure_offline()
    with context.begin_transaction():
        context.run_migrations()
else:
    asyncio.run(_apply_online())
