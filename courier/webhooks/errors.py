"""Webhook domain errors."""


class WebhookError(Exception):
    """Base exception for webhook broker errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(WebhookError):
    """Raised when a required field is missing or has the wrong type.

    Always a client error; the request is never retried.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class DeliveryError(WebhookError):
    """A subscriber callback could not be reached; a non-2xx answer is not an error.

    Captured per target in the trigger results; never raised to the
    caller of a trigger.
    """

