"""Read-only access to the event ledger."""

from uuid import UUID

from fastapi import APIRouter, Query

from courier.api.dependencies import EventLedgerDep
from courier.api.exceptions import EventNotFoundError
from courier.api.models.webhooks import EventDetailResponse, EventsResponse

router = APIRouter(prefix="/events")


@router.get("", response_model=EventsResponse)
async def list_events(
    ledger: EventLedgerDep,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
) -> EventsResponse:
    """List recorded events, newest first."""
    return EventsResponse(events=await ledger.list_events(limit=limit, offset=offset))


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event(event_id: UUID, ledger: EventLedgerDep) -> EventDetailResponse:
    """Get one event with its per-subscriber delivery results."""
    event = await ledger.get_event(event_id)
    if event is None:
        raise EventNotFoundError(f"Event {event_id} not found")

    return EventDetailResponse(event=event, results=await ledger.list_results(event_id))
