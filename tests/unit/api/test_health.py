"""Tests for health and metrics endpoints."""

from unittest.mock import AsyncMock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from courier import __version__
from courier.api.app import create_app
from courier.api.dependencies import BrokerServices, get_event_ledger, get_services
from courier.config import Settings
from courier.db.errors import ConnectionError
from courier.ledger import EventLedger


class TestHealth:
    """Tests for GET /health."""

    def test_healthy(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert {c["name"] for c in data["components"]} == {
            "subscription_store",
            "event_ledger",
        }

    def test_unreachable_store_degrades(self, app: FastAPI, client: TestClient) -> None:
        ledger = AsyncMock(spec=EventLedger)
        ledger.health_check.return_value = False
        app.dependency_overrides[get_event_ledger] = lambda: ledger

        data = client.get("/health").json()

        assert data["status"] == "degraded"
        unhealthy = [c for c in data["components"] if c["status"] == "unhealthy"]
        assert [c["name"] for c in unhealthy] == ["event_ledger"]

    def test_store_error_degrades(self, app: FastAPI, client: TestClient) -> None:
        ledger = AsyncMock(spec=EventLedger)
        ledger.health_check.side_effect = ConnectionError("pool closed")
        app.dependency_overrides[get_event_ledger] = lambda: ledger

        data = client.get("/health").json()

        assert data["status"] == "degraded"


class TestMetrics:
    """Tests for GET /metrics."""

    def test_exposes_courier_metrics(self, client: TestClient) -> None:
        client.post("/trigger-event", json={"from": "erp-a", "event": "ping"})

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "courier_trigger_count_total" in response.text

    def test_disabled(self, settings: Settings, services: BrokerServices) -> None:
        settings.observability.metrics.enabled = False
        app = create_app(settings)
        app.dependency_overrides[get_services] = lambda: services

        assert TestClient(app).get("/metrics").status_code == 404
