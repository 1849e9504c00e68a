"""Health check and metrics endpoints."""

import time
from datetime import UTC, datetime

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from courier import __version__
from courier.api.dependencies import EventLedgerDep, SubscriptionStoreDep
from courier.api.models.health import ComponentHealth, HealthResponse
from courier.db.errors import StoreError
from courier.ledger import EventLedger
from courier.observability.logging import get_logger
from courier.subscriptions import SubscriptionStore

logger = get_logger(__name__)

router = APIRouter()
metrics_router = APIRouter()


async def _check_store_health(
    store: SubscriptionStore | EventLedger, name: str
) -> ComponentHealth:
    """Probe one store and time the round trip."""
    start = time.perf_counter()
    try:
        healthy = await store.health_check()
    except StoreError as e:
        return ComponentHealth(
            name=name,
            status="unhealthy",
            latency_ms=(time.perf_counter() - start) * 1000,
            message=str(e),
        )

    latency_ms = (time.perf_counter() - start) * 1000
    if healthy:
        return ComponentHealth(name=name, status="healthy", latency_ms=latency_ms)
    return ComponentHealth(
        name=name, status="unhealthy", latency_ms=latency_ms, message="Store unreachable"
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(
    subscriptions: SubscriptionStoreDep,
    ledger: EventLedgerDep,
) -> HealthResponse:
    """Report service health with the status of each store."""
    components = [
        await _check_store_health(subscriptions, "subscription_store"),
        await _check_store_health(ledger, "event_ledger"),
    ]

    all_healthy = all(c.status == "healthy" for c in components)
    if not all_healthy:
        logger.warning(
            "health_check_degraded",
            unhealthy=[c.name for c in components if c.status != "healthy"],
        )

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        version=__version__,
        timestamp=datetime.now(UTC).isoformat(),
        components=components,
    )


@metrics_router.get("/metrics")
async def metrics() -> Response:
    """Expose Prometheus metrics."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
