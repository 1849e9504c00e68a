"""asyncpg pool shared by the PostgreSQL subscription store and event ledger."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg

from courier.db.errors import ConnectionError
from courier.observability.logging import get_logger

logger = get_logger(__name__)

# Failures the stores translate into StoreError
DRIVER_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    TimeoutError,
)


class PostgresPool:
    """Lazily created asyncpg pool.

    `acquire()` connects on first use, so stores can be built before the
    database is reachable; `connect()` at startup surfaces a bad DSN early.
    """

    def __init__(
        self,
        dsn: str | None = None,
        min_size: int = 2,
        max_size: int = 10,
        max_inactive_connection_lifetime: float = 300.0,
        command_timeout: float = 30.0,
    ) -> None:
        self._dsn = dsn or self.dsn_from_env()
        self._pool_kwargs = {
            "min_size": min_size,
            "max_size": max_size,
            "max_inactive_connection_lifetime": max_inactive_connection_lifetime,
            "command_timeout": command_timeout,
        }
        self._pool: asyncpg.Pool | None = None

    @staticmethod
    def dsn_from_env() -> str:
        """Resolve the DSN from COURIER_DATABASE_URL, DATABASE_URL or POSTGRES_* parts."""
        for var in ("COURIER_DATABASE_URL", "DATABASE_URL"):
            if os.environ.get(var):
                return os.environ[var]

        env = os.environ.get
        return (
            f"postgresql://{env('POSTGRES_USER', 'webhook')}:{env('POSTGRES_PASSWORD', 'webhook')}"
            f"@{env('POSTGRES_HOST', 'localhost')}:{env('POSTGRES_PORT', '5432')}"
            f"/{env('POSTGRES_DB', 'webhook')}"
        )

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        """Create the pool; a no-op when already connected.

        Raises:
            ConnectionError: If the server cannot be reached
        """
        if self._pool is not None:
            return

        try:
            self._pool = await asyncpg.create_pool(dsn=self._dsn, **self._pool_kwargs)
        except DRIVER_ERRORS as e:
            logger.error("postgres_pool_connection_failed", error=str(e))
            raise ConnectionError(f"Failed to connect to PostgreSQL: {e}", cause=e) from e

        logger.info(
            "postgres_pool_connected",
            min_size=self._pool_kwargs["min_size"],
            max_size=self._pool_kwargs["max_size"],
        )

    async def close(self) -> None:
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        await pool.close()
        logger.info("postgres_pool_closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Borrow a connection, connecting first if needed."""
        if self._pool is None:
            await self.connect()

        try:
            async with self._pool.acquire() as connection:
                yield connection
        except (OSError, asyncpg.InterfaceError) as e:
            logger.error("postgres_connection_error", error=str(e))
            raise ConnectionError(f"PostgreSQL connection error: {e}", cause=e) from e

    async def health_check(self) -> bool:
        """True when the pool exists and answers SELECT 1."""
        if self._pool is None:
            return False

        try:
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
        except DRIVER_ERRORS as e:
            logger.warning("postgres_health_check_failed", error=str(e))
            return False
        return True
