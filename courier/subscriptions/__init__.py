"""Subscription store: who wants to hear about events, and where."""

from courier.subscriptions.store import SubscriptionStore
from courier.subscriptions.stores import (
    InMemorySubscriptionStore,
    PostgresSubscriptionStore,
)

__all__ = [
    "SubscriptionStore",
    "InMemorySubscriptionStore",
    "PostgresSubscriptionStore",
]
