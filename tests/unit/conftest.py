"""Fixtures for exercising the PostgreSQL stores without a database."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest

from courier.db.pool import PostgresPool


@pytest.fixture
def mock_conn() -> AsyncMock:
    """asyncpg connection double; set fetch/fetchrow return values per test."""
    return AsyncMock()


@pytest.fixture
def mock_pool(mock_conn: AsyncMock) -> MagicMock:
    """PostgresPool whose acquire() hands out mock_conn."""
    pool = MagicMock(spec=PostgresPool)

    @asynccontextmanager
    async def acquire() -> AsyncIterator[AsyncMock]:
        yield mock_conn

    pool.acquire = acquire
    pool.health_check = AsyncMock(return_value=True)
    return pool
