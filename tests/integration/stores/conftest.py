"""Pytest fixtures for store integration tests.

Tests run against the database named by TEST_DATABASE_URL with the
alembic migrations applied (`alembic upgrade head`). They skip when the
variable is unset or the database is unreachable.
"""

import os
from collections.abc import AsyncIterator

import pytest

from courier.db.errors import ConnectionError
from courier.db.pool import PostgresPool


@pytest.fixture(scope="session")
def postgres_dsn() -> str:
    """Get PostgreSQL DSN for tests."""
    dsn = os.environ.get("TEST_DATABASE_URL")
    if not dsn:
        pytest.skip("TEST_DATABASE_URL not set")
    return dsn


@pytest.fixture
async def postgres_pool(postgres_dsn: str) -> AsyncIterator[PostgresPool]:
    """Connection pool over a freshly emptied schema.

    Uses function scope to avoid event loop issues across tests.
    """
    pool = PostgresPool(dsn=postgres_dsn, min_size=1, max_size=5)
    try:
        await pool.connect()
    except ConnectionError:
        pytest.skip("PostgreSQL not available")

    async with pool.acquire() as conn:
        await conn.execute("TRUNCATE event_results, events, subscribers")

    yield pool

    await pool.close()
