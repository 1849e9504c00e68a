"""API route registration."""

from fastapi import FastAPI

from courier.config import Settings
from courier.observability.logging import get_logger

logger = get_logger(__name__)


def register_routes(app: FastAPI, settings: Settings) -> None:
    """Register all routes with the FastAPI application.

    Args:
        app: FastAPI application instance
        settings: Application settings (decides whether /metrics is exposed)
    """
    from courier.api.routes.demandes import router as demandes_router
    from courier.api.routes.events import router as events_router
    from courier.api.routes.health import metrics_router
    from courier.api.routes.health import router as health_router
    from courier.api.routes.webhooks import router as webhooks_router

    app.include_router(webhooks_router, tags=["Webhooks"])
    app.include_router(demandes_router, tags=["Demandes"])
    app.include_router(events_router, tags=["Events"])
    app.include_router(health_router, tags=["Health"])

    if settings.observability.metrics.enabled:
        app.include_router(metrics_router, tags=["Health"])

    logger.info(
        "routes_registered",
        metrics_enabled=settings.observability.metrics.enabled,
    )
