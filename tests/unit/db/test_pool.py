"""Unit tests for PostgresPool."""

from unittest.mock import AsyncMock, patch

import pytest

from courier.db.errors import ConnectionError
from courier.db.pool import PostgresPool


class TestDsnResolution:
    """Tests for DSN lookup from the environment."""

    def test_explicit_dsn_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COURIER_DATABASE_URL", "postgresql://env/db")
        pool = PostgresPool(dsn="postgresql://explicit/db")
        assert pool._dsn == "postgresql://explicit/db"

    def test_courier_url_before_generic(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COURIER_DATABASE_URL", "postgresql://courier/db")
        monkeypatch.setenv("DATABASE_URL", "postgresql://generic/db")
        assert PostgresPool()._dsn == "postgresql://courier/db"

    def test_built_from_parts(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("COURIER_DATABASE_URL", raising=False)
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("POSTGRES_HOST", "db.internal")
        monkeypatch.setenv("POSTGRES_PORT", "6543")
        monkeypatch.setenv("POSTGRES_USER", "u")
        monkeypatch.setenv("POSTGRES_PASSWORD", "p")
        monkeypatch.setenv("POSTGRES_DB", "hooks")

        assert PostgresPool()._dsn == "postgresql://u:p@db.internal:6543/hooks"


class TestLifecycle:
    """Tests for connect, close and health checks."""

    async def test_connect_failure_wrapped(self) -> None:
        pool = PostgresPool(dsn="postgresql://nowhere/db")

        refused = AsyncMock(side_effect=OSError("refused"))
        with patch("courier.db.pool.asyncpg.create_pool", refused):
            with pytest.raises(ConnectionError, match="Failed to connect"):
                await pool.connect()

        assert not pool.is_connected

    async def test_connect_once(self) -> None:
        pool = PostgresPool(dsn="postgresql://db/hooks")
        create_pool = AsyncMock()

        with patch("courier.db.pool.asyncpg.create_pool", create_pool):
            await pool.connect()
            await pool.connect()

        create_pool.assert_awaited_once()
        assert pool.is_connected

    async def test_close(self) -> None:
        pool = PostgresPool(dsn="postgresql://db/hooks")
        raw_pool = AsyncMock()

        with patch("courier.db.pool.asyncpg.create_pool", AsyncMock(return_value=raw_pool)):
            await pool.connect()
        await pool.close()

        raw_pool.close.assert_awaited_once()
        assert not pool.is_connected

    async def test_health_check_when_disconnected(self) -> None:
        assert await PostgresPool(dsn="postgresql://db/hooks").health_check() is False
