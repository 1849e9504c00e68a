"""In-memory implementation of SubscriptionStore."""

from collections.abc import Collection

from courier.subscriptions.store import SubscriptionStore
from courier.webhooks.models import Subscriber
from courier.webhooks.validation import optional_text, require_text


class InMemorySubscriptionStore(SubscriptionStore):
    """In-memory SubscriptionStore for testing and development.

    Rows are kept in a dict keyed by (who, url), whose insertion order is
    the creation order. Contents are lost on restart.
    """

    def __init__(self) -> None:
        self._subscribers: dict[tuple[str, str], Subscriber] = {}

    async def subscribe(self, who: str, url: str) -> Subscriber:
        who = require_text(who, "who")
        url = require_text(url, "url")

        existing = self._subscribers.get((who, url))
        if existing is not None:
            return existing

        subscriber = Subscriber(who=who, url=url)
        self._subscribers[(who, url)] = subscriber
        return subscriber

    async def list_subscribers(self) -> list[Subscriber]:
        return list(reversed(self._subscribers.values()))

    async def unsubscribe(self, who: str, url: str | None = None) -> int:
        who = require_text(who, "who")
        url = optional_text(url, "url")

        if url is not None:
            return 1 if self._subscribers.pop((who, url), None) is not None else 0

        keys = [key for key in self._subscribers if key[0] == who]
        for key in keys:
            del self._subscribers[key]
        return len(keys)

    async def find_by_who_list(self, who_list: Collection[str]) -> list[Subscriber]:
        wanted = set(who_list)
        if not wanted:
            return []
        return [s for s in self._subscribers.values() if s.who in wanted]

    async def list_identities(self) -> list[str]:
        return list(dict.fromkeys(s.who for s in self._subscribers.values()))
