"""Request and response bodies of the broker endpoints.

Required fields are declared optional here so that a missing field
reaches the store or dispatcher, which reports it by name. A field of
the wrong type is rejected by pydantic and surfaces as a 400 too.
"""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from courier.webhooks.models import DeliveryResult, Event, EventResult, Subscriber


class SubscribeRequest(BaseModel):
    """Register a callback URL for an identity."""

    who: str | None = Field(default=None, description="Subscriber identity, e.g. 'erp-devmaterial'")
    url: str | None = Field(default=None, description="Callback endpoint receiving events")


class SubscribeResponse(BaseModel):
    message: str
    subscriber: Subscriber


class SubscribersResponse(BaseModel):
    subscribers: list[Subscriber]


class UnsubscribeRequest(BaseModel):
    """Remove one registration, or all of an identity's when url is omitted."""

    who: str | None = None
    url: str | None = None


class UnsubscribeResponse(BaseModel):
    message: str
    removed: int


class TriggerRequest(BaseModel):
    """Broadcast one event to the identities listed in `who`."""

    model_config = ConfigDict(populate_by_name=True)

    from_: str | None = Field(default=None, alias="from", description="Sender identity")
    event: str | None = Field(default=None, description="Event name")
    body: Any = Field(default=None, description="Event body, forwarded as-is")
    who: list[str] | None = Field(default=None, description="Target identities")


class TriggerResponse(BaseModel):
    message: str
    event_id: UUID
    results: list[DeliveryResult]


class DemandeNotification(BaseModel):
    """Notification sent by an ERP backend when a demande changes.

    `message` gates the request but is not broadcast; `body` is.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: str | None = None
    from_: str | None = Field(default=None, alias="from")
    body: Any = None


class NotificationResponse(BaseModel):
    message: str


class EventsResponse(BaseModel):
    events: list[Event]


class EventDetailResponse(BaseModel):
    event: Event
    results: list[EventResult]
