"""PostgreSQL implementation of SubscriptionStore.

Uses asyncpg through the shared PostgresPool. Every operation is a single
statement, so each runs in its own implicit transaction.
"""

from collections.abc import Collection
from typing import Any
from uuid import UUID, uuid4

from courier.db.errors import ConnectionError
from courier.db.pool import DRIVER_ERRORS, PostgresPool
from courier.observability.logging import get_logger
from courier.subscriptions.store import SubscriptionStore
from courier.webhooks.models import Subscriber
from courier.webhooks.validation import optional_text, require_text

logger = get_logger(__name__)


class PostgresSubscriptionStore(SubscriptionStore):
    """PostgreSQL implementation of SubscriptionStore.

    Registration relies on the unique (who, url) constraint: the upsert
    touches nothing on conflict and returns the row already stored.
    """

    def __init__(self, pool: PostgresPool) -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
        """
        self._pool = pool

    async def subscribe(self, who: str, url: str) -> Subscriber:
        """Register a pair, or return the existing row for it unchanged."""
        who = require_text(who, "who")
        url = require_text(url, "url")
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """
                    INSERT INTO subscribers (id, who, url)
                    VALUES ($1, $2, $3)
                    ON CONFLICT (who, url) DO UPDATE SET who = EXCLUDED.who
                    RETURNING id, who, url, created_at
                    """,
                    uuid4(),
                    who,
                    url,
                )
                subscriber = self._row_to_subscriber(row)
                logger.debug("subscriber_saved", subscriber_id=str(subscriber.id), who=who)
                return subscriber
        except DRIVER_ERRORS as e:
            logger.error("postgres_subscribe_error", who=who, error=str(e))
            raise ConnectionError(f"Failed to save subscriber: {e}", cause=e) from e

    async def list_subscribers(self) -> list[Subscriber]:
        """List all subscribers, most recently created first."""
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    """
                    SELECT id, who, url, created_at
                    FROM subscribers
                    ORDER BY created_at DESC, id
                    """
                )
                return [self._row_to_subscriber(row) for row in rows]
        except DRIVER_ERRORS as e:
            logger.error("postgres_list_subscribers_error", error=str(e))
            raise ConnectionError(f"Failed to list subscribers: {e}", cause=e) from e

    async def unsubscribe(self, who: str, url: str | None = None) -> int:
        """Remove one pair, or every row of `who` when url is omitted."""
        who = require_text(who, "who")
        url = optional_text(url, "url")
        try:
            async with self._pool.acquire() as conn:
                if url is not None:
                    rows = await conn.fetch(
                        "DELETE FROM subscribers WHERE who = $1 AND url = $2 RETURNING id",
                        who,
                        url,
                    )
                else:
                    rows = await conn.fetch(
                        "DELETE FROM subscribers WHERE who = $1 RETURNING id",
                        who,
                    )
                logger.debug("subscribers_removed", who=who, removed=len(rows))
                return len(rows)
        except DRIVER_ERRORS as e:
            logger.error("postgres_unsubscribe_error", who=who, error=str(e))
            raise ConnectionError(f"Failed to remove subscribers: {e}", cause=e) from e

    async def find_by_who_list(self, who_list: Collection[str]) -> list[Subscriber]:
        """Get every subscriber whose identity is in `who_list`, oldest first."""
        identities = list(dict.fromkeys(who_list))
        if not identities:
            return []
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    """
                    SELECT id, who, url, created_at
                    FROM subscribers
                    WHERE who = ANY($1::text[])
                    ORDER BY created_at ASC, id
                    """,
                    identities,
                )
                return [self._row_to_subscriber(row) for row in rows]
        except DRIVER_ERRORS as e:
            logger.error("postgres_find_subscribers_error", error=str(e))
            raise ConnectionError(f"Failed to look up subscribers: {e}", cause=e) from e

    async def list_identities(self) -> list[str]:
        """Get the distinct registered identities."""
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    "SELECT DISTINCT who FROM subscribers ORDER BY who"
                )
                return [row["who"] for row in rows]
        except DRIVER_ERRORS as e:
            logger.error("postgres_list_identities_error", error=str(e))
            raise ConnectionError(f"Failed to list identities: {e}", cause=e) from e

    async def health_check(self) -> bool:
        return await self._pool.health_check()

    def _row_to_subscriber(self, row: Any) -> Subscriber:
        return Subscriber(
            id=UUID(str(row["id"])),
            who=row["who"],
            url=row["url"],
            created_at=row["created_at"],
        )
