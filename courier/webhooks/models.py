"""Subscriber, event and delivery models."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(UTC)


class EventStatus(str, Enum):
    """Event lifecycle states.

    `pending` is set when the event is recorded; every other state is
    terminal and written exactly once.
    """

    PENDING = "pending"
    NO_RECIPIENTS = "no_recipients"  # Trigger named no target identities
    NO_MATCHING_SUBSCRIBERS = "no_matching_subscribers"
    DONE = "done"  # At least one delivery attempted, all settled

    @property
    def is_terminal(self) -> bool:
        return self is not EventStatus.PENDING


class ResultStatus(str, Enum):
    """Outcome of one delivery attempt."""

    OK = "ok"  # 2xx response
    FAILED = "failed"  # Response received, non-2xx
    ERROR = "error"  # Request could not complete


class Subscriber(BaseModel):
    """A registered (who, url) pair.

    Owned by the SubscriptionStore. The pair is unique; `who` alone is not.
    """

    id: UUID = Field(default_factory=uuid4)
    who: str
    url: str
    created_at: datetime = Field(default_factory=utcnow)


class Event(BaseModel):
    """A triggered event as recorded in the ledger.

    Append-only except for `status`.
    """

    id: UUID = Field(default_factory=uuid4)
    event: str
    payload: dict[str, Any]
    sender: str
    status: EventStatus = EventStatus.PENDING
    created_at: datetime = Field(default_factory=utcnow)


class EventResult(BaseModel):
    """Delivery outcome of one event for one subscriber. Never mutated."""

    id: UUID = Field(default_factory=uuid4)
    event_id: UUID
    subscriber_id: UUID
    status: ResultStatus
    response: str | None = None
    created_at: datetime = Field(default_factory=utcnow)


class DeliveryResult(BaseModel):
    """Per-target entry of a trigger response.

    `status` is set whenever the subscriber answered; `error` only when
    the request itself could not complete.
    """

    who: str
    url: str
    ok: bool
    status: int | None = None
    error: str | None = None


class TriggerOutcome(BaseModel):
    """Aggregate result of one trigger."""

    message: str
    event_id: UUID
    results: list[DeliveryResult] = Field(default_factory=list)
