"""SubscriptionStore abstract interface."""

from abc import ABC, abstractmethod
from collections.abc import Collection

from courier.webhooks.models import Subscriber


class SubscriptionStore(ABC):
    """Durable mapping of (who, url) pairs.

    Owns Subscriber rows exclusively. Implementations raise
    `ValidationError` for bad input and wrap backend failures in
    `StoreError`.
    """

    @abstractmethod
    async def subscribe(self, who: str, url: str) -> Subscriber:
        """Register a pair, or return the existing row for it unchanged."""
        pass

    @abstractmethod
    async def list_subscribers(self) -> list[Subscriber]:
        """List all subscribers, most recently created first."""
        pass

    @abstractmethod
    async def unsubscribe(self, who: str, url: str | None = None) -> int:
        """Remove one pair, or every row of `who` when url is omitted.

        Returns:
            Number of rows removed (0 is not an error)
        """
        pass

    @abstractmethod
    async def find_by_who_list(self, who_list: Collection[str]) -> list[Subscriber]:
        """Get every subscriber whose identity is in `who_list`, oldest first."""
        pass

    @abstractmethod
    async def list_identities(self) -> list[str]:
        """Get the distinct registered identities."""
        pass

    async def health_check(self) -> bool:
        """Check that the backend is reachable."""
        return True
