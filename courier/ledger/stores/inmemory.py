"""In-memory implementation of EventLedger."""

from typing import Any
from uuid import UUID

from courier.db.errors import NotFoundError
from courier.ledger.store import EventLedger, check_transition
from courier.webhooks.models import Event, EventResult, EventStatus, ResultStatus


class InMemoryEventLedger(EventLedger):
    """In-memory EventLedger for testing and development.

    Uses simple dict storage with linear scan for queries.
    Not suitable for production use.
    """

    def __init__(self) -> None:
        self._events: dict[UUID, Event] = {}
        self._results: dict[UUID, EventResult] = {}

    async def record_event(
        self, event: str, payload: dict[str, Any], sender: str
    ) -> Event:
        record = Event(event=event, payload=payload, sender=sender)
        self._events[record.id] = record
        return record

    async def record_result(
        self,
        event_id: UUID,
        subscriber_id: UUID,
        status: ResultStatus,
        response: str | None,
    ) -> EventResult:
        result = EventResult(
            event_id=event_id,
            subscriber_id=subscriber_id,
            status=status,
            response=response,
        )
        self._results[result.id] = result
        return result

    async def update_status(self, event_id: UUID, status: EventStatus) -> Event:
        current = self._events.get(event_id)
        if current is None:
            raise NotFoundError(f"Event {event_id} not found")

        if not check_transition(event_id, current.status, status):
            return current

        updated = current.model_copy(update={"status": status})
        self._events[event_id] = updated
        return updated

    async def get_event(self, event_id: UUID) -> Event | None:
        return self._events.get(event_id)

    async def list_events(self, *, limit: int = 50, offset: int = 0) -> list[Event]:
        # dict order is creation order
        events = list(reversed(self._events.values()))
        return events[offset:offset + limit]

    async def list_results(self, event_id: UUID) -> list[EventResult]:
        return [r for r in self._results.values() if r.event_id == event_id]
