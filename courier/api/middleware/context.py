"""Per-request logging context."""

import uuid
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response
from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware

from courier.observability.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
TRACE_ID_HEADER = "X-Trace-ID"


def _current_trace_id() -> str | None:
    span_context = trace.get_current_span().get_span_context()
    return format(span_context.trace_id, "032x") if span_context.is_valid else None


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag every log line of a request with its request id.

    A caller-supplied X-Request-ID is kept, so an ERP backend can follow
    its own trigger through the broker logs. The id is echoed back.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        context = {"request_id": request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())}
        trace_id = _current_trace_id()
        if trace_id:
            context["trace_id"] = trace_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(**context)

        response = await call_next(request)
        logger.debug(
            "request_handled",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )

        response.headers[REQUEST_ID_HEADER] = context["request_id"]
        if trace_id:
            response.headers[TRACE_ID_HEADER] = trace_id
        return response
