"""Fixtures for API tests.

The app is built by create_app with in-memory settings; get_services is
overridden so no lifespan is needed and outbound POSTs go to FakeEndpoints.
"""

from collections.abc import Iterator

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from courier.api.app import create_app
from courier.api.dependencies import BrokerServices, get_services
from courier.config import Settings
from courier.ledger import InMemoryEventLedger
from courier.subscriptions import InMemorySubscriptionStore
from courier.webhooks.dispatcher import WebhookDispatcher


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storage={"backend": "inmemory"},
        webhook={"secret": "test-secret"},
        observability={"logging": {"level": "WARNING", "format": "console"}},
    )


@pytest.fixture
def services(
    subscription_store: InMemorySubscriptionStore,
    event_ledger: InMemoryEventLedger,
    dispatcher: WebhookDispatcher,
    http_client: httpx.AsyncClient,
) -> BrokerServices:
    return BrokerServices(
        subscriptions=subscription_store,
        ledger=event_ledger,
        dispatcher=dispatcher,
        http_client=http_client,
    )


@pytest.fixture
def app(settings: Settings, services: BrokerServices) -> FastAPI:
    app = create_app(settings)
    app.dependency_overrides[get_services] = lambda: services
    return app


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    # No context manager: the lifespan would replace the overridden services
    yield TestClient(app)
