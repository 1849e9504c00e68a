"""EventLedger abstract interface."""

from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from courier.db.errors import StatusTransitionError
from courier.webhooks.models import Event, EventResult, EventStatus, ResultStatus


class EventLedger(ABC):
    """Append-only record of triggered events and their delivery outcomes.

    Owns Event and EventResult rows exclusively. Only an event's status
    ever changes, and only through the transitions allowed by
    `check_transition`.
    """

    @abstractmethod
    async def record_event(
        self, event: str, payload: dict[str, Any], sender: str
    ) -> Event:
        """Persist a new event with status `pending`."""
        pass

    @abstractmethod
    async def record_result(
        self,
        event_id: UUID,
        subscriber_id: UUID,
        status: ResultStatus,
        response: str | None,
    ) -> EventResult:
        """Append the delivery outcome for one subscriber."""
        pass

    @abstractmethod
    async def update_status(self, event_id: UUID, status: EventStatus) -> Event:
        """Move an event to a terminal status.

        Raises:
            NotFoundError: If the event does not exist
            StatusTransitionError: If the transition is not allowed
        """
        pass

    @abstractmethod
    async def get_event(self, event_id: UUID) -> Event | None:
        """Get an event by ID."""
        pass

    @abstractmethod
    async def list_events(self, *, limit: int = 50, offset: int = 0) -> list[Event]:
        """List events, newest first."""
        pass

    @abstractmethod
    async def list_results(self, event_id: UUID) -> list[EventResult]:
        """List the delivery results of an event in the order recorded."""
        pass

    async def health_check(self) -> bool:
        """Check that the backend is reachable."""
        return True


def check_transition(event_id: UUID, current: EventStatus, new: EventStatus) -> bool:
    """Validate a status change.

    Returns:
        True if the row must be written, False for a repeated terminal
        status (no-op)

    Raises:
        StatusTransitionError: For any move other than pending -> terminal
    """
    if not new.is_terminal:
        raise StatusTransitionError(
            f"Event {event_id}: cannot move back to '{new.value}'"
        )
    if current is EventStatus.PENDING:
        return True
    if current is new:
        return False
    raise StatusTransitionError(
        f"Event {event_id}: already '{current.value}', refusing '{new.value}'"
    )
