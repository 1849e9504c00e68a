"""API request, response and error models."""

from courier.api.models.errors import ErrorCode, ErrorDetail, ErrorResponse
from courier.api.models.health import ComponentHealth, HealthResponse
from courier.api.models.webhooks import (
    DemandeNotification,
    EventDetailResponse,
    EventsResponse,
    NotificationResponse,
    SubscribeRequest,
    SubscribeResponse,
    SubscribersResponse,
    TriggerRequest,
    TriggerResponse,
    UnsubscribeRequest,
    UnsubscribeResponse,
)

__all__ = [
    "ErrorCode",
    "ErrorDetail",
    "ErrorResponse",
    "ComponentHealth",
    "HealthResponse",
    "DemandeNotification",
    "EventDetailResponse",
    "EventsResponse",
    "NotificationResponse",
    "SubscribeRequest",
    "SubscribeResponse",
    "SubscribersResponse",
    "TriggerRequest",
    "TriggerResponse",
    "UnsubscribeRequest",
    "UnsubscribeResponse",
]
