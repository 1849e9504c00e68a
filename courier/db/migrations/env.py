"""Alembic environment for the Courier schema.

Migrations run over SQLAlchemy's asyncpg dialect against the same
database the broker uses: `storage.dsn` from settings, else the
environment lookup of PostgresPool.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from courier.config import get_settings
from courier.db.pool import PostgresPool

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Revisions are hand-written SQL; nothing to autogenerate from
target_metadata = None


def sqlalchemy_url() -> str:
    """The broker DSN rewritten for the postgresql+asyncpg dialect."""
    dsn = get_settings().storage.dsn or PostgresPool.dsn_from_env()
    scheme, sep, rest = dsn.partition("://")
    if scheme in ("postgres", "postgresql"):
        return f"postgresql+asyncpg{sep}{rest}"
    return dsn


def run_migrations_offline() -> None:
    """Render the migration SQL instead of executing it (`alembic upgrade --sql`)."""
    context.configure(
        url=sqlalchemy_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _apply(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine_config = config.get_section(config.config_ini_section, {})
    engine_config["sqlalchemy.url"] = sqlalchemy_url()
    engine = async_engine_from_config(
        engine_config, prefix="sqlalchemy.", poolclass=pool.NullPool
    )

    try:
        async with engine.connect() as connection:
            await connection.run_sync(_apply)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
