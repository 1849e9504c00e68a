"""Tests for the application factory, lifespan and error handling."""

from fastapi.testclient import TestClient

from courier.api.app import create_app
from courier.api.dependencies import BrokerServices
from courier.config import Settings


class TestLifespan:
    """Services are created on startup and released on shutdown."""

    def test_services_created_and_closed(self, settings: Settings) -> None:
        app = create_app(settings)
        assert app.state.services is None

        with TestClient(app) as client:
            services = app.state.services
            assert isinstance(services, BrokerServices)
            assert services.pool is None

            response = client.post(
                "/subscribe", json={"who": "erp-a", "url": "http://a.test/hook"}
            )
            assert response.status_code == 200

        assert app.state.services is None
        assert services.http_client.is_closed

    def test_requests_before_startup_fail_cleanly(self, settings: Settings) -> None:
        """Without the lifespan the broker answers 500 instead of crashing."""
        client = TestClient(create_app(settings), raise_server_exceptions=False)

        response = client.get("/subscribers")

        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_ERROR"


class TestRequestContext:
    """Tests for request id propagation."""

    def test_request_id_generated(self, client: TestClient) -> None:
        response = client.post("/test")
        assert response.headers["X-Request-ID"]

    def test_request_id_echoed(self, client: TestClient) -> None:
        response = client.post("/test", headers={"X-Request-ID": "erp-call-17"})
        assert response.headers["X-Request-ID"] == "erp-call-17"


class TestCors:
    def test_preflight_allowed(self, client: TestClient) -> None:
        response = client.options(
            "/subscribe",
            headers={
                "Origin": "http://erp.test",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert "access-control-allow-origin" in response.headers
