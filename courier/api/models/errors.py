"""Error response models for consistent API error handling."""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Machine-readable error codes for API responses."""

    INVALID_REQUEST = "INVALID_REQUEST"
    """A required field is missing or has the wrong type."""

    NOT_FOUND = "NOT_FOUND"
    """The requested event does not exist."""

    STORE_ERROR = "STORE_ERROR"
    """The subscription store or event ledger is unavailable."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""


class ErrorDetail(BaseModel):
    """Field-level detail for validation failures."""

    field: str | None = None
    message: str


class ErrorResponse(BaseModel):
    """Standard error response format for all API errors.

    Example:
        {
            "error": "'who' is required",
            "code": "INVALID_REQUEST"
        }
    """

    error: str
    """Human-readable message naming the offending field where there is one."""

    code: ErrorCode
    """Machine-readable error code."""

    details: list[ErrorDetail] | None = None
    """Per-field details for request validation failures."""
