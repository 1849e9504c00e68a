"""API exception hierarchy for consistent error handling.

All API exceptions inherit from CourierAPIError, which provides
status_code and error_code attributes used by the global exception
handler to generate consistent error responses.
"""

from courier.api.models.errors import ErrorCode


class CourierAPIError(Exception):
    """Base exception for all API errors."""

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class EventNotFoundError(CourierAPIError):
    """Raised when event_id doesn't exist in the ledger."""

    status_code = 404
    error_code = ErrorCode.NOT_FOUND
