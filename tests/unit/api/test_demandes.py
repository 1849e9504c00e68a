"""Tests for the /api/demandes notification endpoints."""

import json
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from courier.db.errors import ConnectionError
from courier.ledger import InMemoryEventLedger
from tests.conftest import FakeEndpoints

NOTIFICATION = {"message": "Demande créée", "from": "erp-a", "body": {"id": 5}}


@pytest.fixture
def registered(client: TestClient) -> None:
    client.post("/subscribe", json={"who": "erp-a", "url": "http://a.test/hook"})
    client.post("/subscribe", json={"who": "erp-b", "url": "http://b.test/hook"})
    client.post("/subscribe", json={"who": "erp-c", "url": "http://c.test/hook"})


class TestDemandeNotifications:
    """Each verb broadcasts its own event to everyone but the sender."""

    def test_create(
        self, client: TestClient, registered: None, endpoints: FakeEndpoints
    ) -> None:
        response = client.post("/api/demandes", json=NOTIFICATION)

        assert response.status_code == 200
        assert response.json() == {"message": "Webhook notifications sent"}
        assert sorted(str(r.url) for r in endpoints.requests) == [
            "http://b.test/hook",
            "http://c.test/hook",
        ]
        assert json.loads(endpoints.requests[0].content) == {
            "event": "add-demande",
            "from": "erp-a",
            "body": {"id": 5},
        }

    def test_update(
        self, client: TestClient, registered: None, endpoints: FakeEndpoints
    ) -> None:
        response = client.put("/api/demandes/42", json=NOTIFICATION)

        assert response.status_code == 200
        assert {json.loads(r.content)["event"] for r in endpoints.requests} == {"update-demande"}

    def test_delete(
        self, client: TestClient, registered: None, endpoints: FakeEndpoints
    ) -> None:
        response = client.request("DELETE", "/api/demandes/42", json=NOTIFICATION)

        assert response.status_code == 200
        assert {json.loads(r.content)["event"] for r in endpoints.requests} == {"delete-demande"}

    def test_unreachable_subscriber_still_succeeds(
        self, client: TestClient, registered: None, endpoints: FakeEndpoints
    ) -> None:
        endpoints.fail("http://b.test/hook")

        response = client.post("/api/demandes", json=NOTIFICATION)

        assert response.status_code == 200

    def test_nobody_else_registered(self, client: TestClient, endpoints: FakeEndpoints) -> None:
        client.post("/subscribe", json={"who": "erp-a", "url": "http://a.test/hook"})

        response = client.post("/api/demandes", json=NOTIFICATION)

        assert response.status_code == 200
        assert endpoints.requests == []


class TestDemandeValidation:
    """Required fields of a notification."""

    def test_message_required(self, client: TestClient, endpoints: FakeEndpoints) -> None:
        response = client.post("/api/demandes", json={"from": "erp-a", "body": {}})

        assert response.status_code == 400
        assert "message" in response.json()["error"]
        assert endpoints.requests == []

    def test_from_required(self, client: TestClient) -> None:
        response = client.put("/api/demandes/1", json={"message": "m", "body": {}})

        assert response.status_code == 400
        assert "from" in response.json()["error"].lower()

    def test_empty_body(self, client: TestClient) -> None:
        response = client.post("/api/demandes")

        assert response.status_code == 400


class TestDemandeLedgerOutage:
    """A notification that cannot be recorded is not sent."""

    @pytest.mark.parametrize(
        ("method", "path"), [("POST", "/api/demandes"), ("PUT", "/api/demandes/7")]
    )
    def test_unrecorded_event_is_store_error(
        self,
        client: TestClient,
        registered: None,
        event_ledger: InMemoryEventLedger,
        endpoints: FakeEndpoints,
        monkeypatch: pytest.MonkeyPatch,
        method: str,
        path: str,
    ) -> None:
        monkeypatch.setattr(
            event_ledger, "record_event", AsyncMock(side_effect=ConnectionError("down"))
        )

        response = client.request(method, path, json=NOTIFICATION)

        assert response.status_code == 500
        assert response.json()["code"] == "STORE_ERROR"
        assert endpoints.requests == []
