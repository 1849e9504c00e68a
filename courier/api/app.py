"""FastAPI application factory.

Creates and configures the FastAPI application with middleware,
exception handlers, lifespan-managed services and route registration.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from courier import __version__
from courier.api.dependencies import create_services
from courier.api.exceptions import CourierAPIError
from courier.api.middleware.context import RequestContextMiddleware
from courier.api.models.errors import ErrorCode, ErrorDetail, ErrorResponse
from courier.api.routes import register_routes
from courier.config import Settings, get_settings
from courier.db.errors import NotFoundError, StoreError
from courier.observability.logging import get_logger, setup_logging
from courier.webhooks.errors import ValidationError

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the broker services on startup and close them on shutdown."""
    settings: Settings = app.state.settings
    app.state.services = await create_services(settings)
    logger.info("app_started", store_type=settings.storage.backend)
    try:
        yield
    finally:
        await app.state.services.close()
        app.state.services = None
        logger.info("app_stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Explicit settings; loaded from config files when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_secrets=log_config.redact_secrets,
    )

    app = FastAPI(
        title="Courier",
        description="Webhook notification broker for ERP modules",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=settings.api.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)
    register_routes(app, settings)

    if settings.observability.tracing.enabled:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        FastAPIInstrumentor.instrument_app(app)
        logger.info("opentelemetry_instrumentation_enabled")

    logger.info(
        "app_created",
        debug=settings.debug,
        store_type=settings.storage.backend,
    )

    return app


def _error_response(
    status_code: int,
    message: str,
    code: ErrorCode,
    details: list[ErrorDetail] | None = None,
) -> JSONResponse:
    body = ErrorResponse(error=message, code=code, details=details)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application
    """

    @app.exception_handler(CourierAPIError)
    async def courier_api_error_handler(
        request: Request, exc: CourierAPIError
    ) -> JSONResponse:
        logger.warning(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )
        return _error_response(exc.status_code, exc.message, exc.error_code)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        logger.warning(
            "validation_error",
            field=exc.field,
            message=exc.message,
            path=request.url.path,
        )
        details = [ErrorDetail(field=exc.field, message=exc.message)] if exc.field else None
        return _error_response(400, exc.message, ErrorCode.INVALID_REQUEST, details)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle FastAPI request validation errors (wrong types, bad JSON)."""
        logger.warning(
            "request_validation_error",
            errors=exc.errors(),
            path=request.url.path,
        )

        details = []
        for error in exc.errors():
            # Drop the "body"/"query" prefix so the field reads as the client sent it
            loc = [str(part) for part in error["loc"][1:]] or [str(error["loc"][0])]
            details.append(ErrorDetail(field=".".join(loc), message=error["msg"]))

        summary = "; ".join(f"'{d.field}': {d.message}" for d in details)
        return _error_response(
            400,
            f"Invalid request: {summary}",
            ErrorCode.INVALID_REQUEST,
            details,
        )

    @app.exception_handler(NotFoundError)
    async def not_found_error_handler(
        request: Request, exc: NotFoundError
    ) -> JSONResponse:
        logger.warning("store_not_found", error=str(exc), path=request.url.path)
        return _error_response(404, str(exc), ErrorCode.NOT_FOUND)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error(
            "store_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return _error_response(500, "Storage backend unavailable", ErrorCode.STORE_ERROR)

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return _error_response(500, "An unexpected error occurred", ErrorCode.INTERNAL_ERROR)

    logger.debug("exception_handlers_registered")
