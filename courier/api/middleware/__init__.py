"""API middleware."""

from courier.api.middleware.context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
