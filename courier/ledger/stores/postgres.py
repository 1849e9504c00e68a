"""PostgreSQL implementation of EventLedger.

Uses asyncpg through the shared PostgresPool. Each write is committed on
its own; no transaction spans several results.
"""

import json
from typing import Any
from uuid import UUID, uuid4

from courier.db.errors import ConnectionError, NotFoundError
from courier.db.pool import DRIVER_ERRORS, PostgresPool
from courier.ledger.store import EventLedger, check_transition
from courier.observability.logging import get_logger
from courier.webhooks.models import Event, EventResult, EventStatus, ResultStatus

logger = get_logger(__name__)

_EVENT_COLUMNS = "id, event, payload, sender, status, created_at"
_RESULT_COLUMNS = "id, event_id, subscriber_id, status, response, created_at"


class PostgresEventLedger(EventLedger):
    """PostgreSQL implementation of EventLedger.

    Events and results are plain inserts. Status changes are conditional
    updates guarded on `status = 'pending'`, so two writers cannot both
    finalize the same event.
    """

    def __init__(self, pool: PostgresPool) -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
        """
        self._pool = pool

    async def record_event(
        self, event: str, payload: dict[str, Any], sender: str
    ) -> Event:
        """Persist a new event with status `pending`."""
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO events (id, event, payload, sender, status)
                    VALUES ($1, $2, $3::jsonb, $4, $5)
                    RETURNING {_EVENT_COLUMNS}
                    """,
                    uuid4(),
                    event,
                    json.dumps(payload),
                    sender,
                    EventStatus.PENDING.value,
                )
                record = self._row_to_event(row)
                logger.debug("event_saved", event_id=str(record.id), event_name=event)
                return record
        except DRIVER_ERRORS as e:
            logger.error("postgres_record_event_error", event_name=event, error=str(e))
            raise ConnectionError(f"Failed to record event: {e}", cause=e) from e

    async def record_result(
        self,
        event_id: UUID,
        subscriber_id: UUID,
        status: ResultStatus,
        response: str | None,
    ) -> EventResult:
        """Append the delivery outcome for one subscriber."""
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO event_results (id, event_id, subscriber_id, status, response)
                    VALUES ($1, $2, $3, $4, $5)
                    RETURNING {_RESULT_COLUMNS}
                    """,
                    uuid4(),
                    event_id,
                    subscriber_id,
                    status.value,
                    response,
                )
                return self._row_to_result(row)
        except DRIVER_ERRORS as e:
            logger.error(
                "postgres_record_result_error",
                event_id=str(event_id),
                subscriber_id=str(subscriber_id),
                error=str(e),
            )
            raise ConnectionError(f"Failed to record event result: {e}", cause=e) from e

    async def update_status(self, event_id: UUID, status: EventStatus) -> Event:
        """Move an event from `pending` to a terminal status."""
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    UPDATE events SET status = $2
                    WHERE id = $1 AND status = $3
                    RETURNING {_EVENT_COLUMNS}
                    """,
                    event_id,
                    status.value,
                    EventStatus.PENDING.value,
                )
                if row is None:
                    row = await conn.fetchrow(
                        f"SELECT {_EVENT_COLUMNS} FROM events WHERE id = $1",
                        event_id,
                    )
        except DRIVER_ERRORS as e:
            logger.error(
                "postgres_update_status_error",
                event_id=str(event_id),
                status=status.value,
                error=str(e),
            )
            raise ConnectionError(f"Failed to update event status: {e}", cause=e) from e

        if row is None:
            raise NotFoundError(f"Event {event_id} not found")

        event = self._row_to_event(row)
        if event.status is not status:
            # Not pending any more; only a repeat of the same status is allowed
            check_transition(event_id, event.status, status)
        return event

    async def get_event(self, event_id: UUID) -> Event | None:
        """Get an event by ID."""
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT {_EVENT_COLUMNS} FROM events WHERE id = $1",
                    event_id,
                )
                return self._row_to_event(row) if row else None
        except DRIVER_ERRORS as e:
            logger.error("postgres_get_event_error", event_id=str(event_id), error=str(e))
            raise ConnectionError(f"Failed to get event: {e}", cause=e) from e

    async def list_events(self, *, limit: int = 50, offset: int = 0) -> list[Event]:
        """List events, newest first."""
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT {_EVENT_COLUMNS}
                    FROM events
                    ORDER BY created_at DESC, id
                    LIMIT $1 OFFSET $2
                    """,
                    limit,
                    offset,
                )
                return [self._row_to_event(row) for row in rows]
        except DRIVER_ERRORS as e:
            logger.error("postgres_list_events_error", error=str(e))
            raise ConnectionError(f"Failed to list events: {e}", cause=e) from e

    async def list_results(self, event_id: UUID) -> list[EventResult]:
        """List the delivery results of an event in the order recorded."""
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT {_RESULT_COLUMNS}
                    FROM event_results
                    WHERE event_id = $1
                    ORDER BY created_at ASC, id
                    """,
                    event_id,
                )
                return [self._row_to_result(row) for row in rows]
        except DRIVER_ERRORS as e:
            logger.error("postgres_list_results_error", event_id=str(event_id), error=str(e))
            raise ConnectionError(f"Failed to list event results: {e}", cause=e) from e

    async def health_check(self) -> bool:
        return await self._pool.health_check()

    def _row_to_event(self, row: Any) -> Event:
        payload = row["payload"]
        if isinstance(payload, str):
            payload = json.loads(payload)
        return Event(
            id=UUID(str(row["id"])),
            event=row["event"],
            payload=payload,
            sender=row["sender"],
            status=EventStatus(row["status"]),
            created_at=row["created_at"],
        )

    def _row_to_result(self, row: Any) -> EventResult:
        return EventResult(
            id=UUID(str(row["id"])),
            event_id=UUID(str(row["event_id"])),
            subscriber_id=UUID(str(row["subscriber_id"])),
            status=ResultStatus(row["status"]),
            response=row["response"],
            created_at=row["created_at"],
        )
