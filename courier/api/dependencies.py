"""Dependency injection for API routes.

The stores, the outbound HTTP client and the dispatcher live in one
BrokerServices container created at application startup and closed at
shutdown. Routes reach them through the dependencies below, which tests
replace with `app.dependency_overrides`.
"""

from dataclasses import dataclass
from typing import Annotated

import httpx
from fastapi import Depends, Request

from courier.config import Settings, get_settings
from courier.db.pool import PostgresPool
from courier.ledger import EventLedger, InMemoryEventLedger, PostgresEventLedger
from courier.observability.logging import get_logger
from courier.subscriptions import (
    InMemorySubscriptionStore,
    PostgresSubscriptionStore,
    SubscriptionStore,
)
from courier.webhooks.dispatcher import WebhookDispatcher
from courier.webhooks.signing import WebhookSigner

logger = get_logger(__name__)


@dataclass
class BrokerServices:
    """Process-wide components shared by every request."""

    subscriptions: SubscriptionStore
    ledger: EventLedger
    dispatcher: WebhookDispatcher
    http_client: httpx.AsyncClient
    pool: PostgresPool | None = None

    async def close(self) -> None:
        """Close the outbound HTTP client and the connection pool."""
        await self.http_client.aclose()
        if self.pool is not None:
            await self.pool.close()
        logger.info("broker_services_closed")


async def create_services(settings: Settings) -> BrokerServices:
    """Build the stores, HTTP client and dispatcher described by settings.

    Raises:
        ConnectionError: If the postgres backend is selected and unreachable
    """
    pool: PostgresPool | None = None
    subscriptions: SubscriptionStore
    ledger: EventLedger

    if settings.storage.backend == "postgres":
        pool = PostgresPool(
            dsn=settings.storage.dsn,
            min_size=settings.storage.min_pool_size,
            max_size=settings.storage.max_pool_size,
            max_inactive_connection_lifetime=settings.storage.max_inactive_connection_lifetime,
            command_timeout=settings.storage.command_timeout,
        )
        await pool.connect()
        subscriptions = PostgresSubscriptionStore(pool)
        ledger = PostgresEventLedger(pool)
    else:
        subscriptions = InMemorySubscriptionStore()
        ledger = InMemoryEventLedger()

    webhook = settings.webhook
    http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(webhook.timeout_seconds),
        limits=httpx.Limits(max_connections=webhook.max_connections),
    )
    dispatcher = WebhookDispatcher(
        subscriptions=subscriptions,
        ledger=ledger,
        signer=WebhookSigner(webhook.secret.get_secret_value()),
        client=http_client,
        user_agent=webhook.user_agent,
    )

    logger.info(
        "broker_services_initialized",
        store_type=settings.storage.backend,
        delivery_timeout_seconds=webhook.timeout_seconds,
    )
    return BrokerServices(
        subscriptions=subscriptions,
        ledger=ledger,
        dispatcher=dispatcher,
        http_client=http_client,
        pool=pool,
    )


def get_services(request: Request) -> BrokerServices:
    """Get the BrokerServices created by the application lifespan."""
    services: BrokerServices | None = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Broker services are not initialized; is the lifespan running?")
    return services


def get_subscription_store(
    services: Annotated[BrokerServices, Depends(get_services)],
) -> SubscriptionStore:
    return services.subscriptions


def get_event_ledger(
    services: Annotated[BrokerServices, Depends(get_services)],
) -> EventLedger:
    return services.ledger


def get_dispatcher(
    services: Annotated[BrokerServices, Depends(get_services)],
) -> WebhookDispatcher:
    return services.dispatcher


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
SubscriptionStoreDep = Annotated[SubscriptionStore, Depends(get_subscription_store)]
EventLedgerDep = Annotated[EventLedger, Depends(get_event_ledger)]
DispatcherDep = Annotated[WebhookDispatcher, Depends(get_dispatcher)]
