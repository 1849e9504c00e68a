"""Store error hierarchy.

Every store backend wraps driver-specific failures in one of these so the
API layer can map them to responses without knowing the backend.
"""


class StoreError(Exception):
    """Base exception for all store errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConnectionError(StoreError):
    """Raised when the store cannot be reached.

    Examples:
        - Database connection timeout
        - Pool exhausted or closed
        - Network errors
    """

    pass


class NotFoundError(StoreError):
    """Raised when a specific entity lookup fails.

    Not raised for empty search results.
    """

    pass


class StatusTransitionError(StoreError):
    """Raised when an event status change breaks the lifecycle.

    A terminal status may only be written over `pending` or over itself.
    """

    pass
