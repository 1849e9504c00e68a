"""Subscription store backends."""

from courier.subscriptions.stores.inmemory import InMemorySubscriptionStore
from courier.subscriptions.stores.postgres import PostgresSubscriptionStore

__all__ = ["InMemorySubscriptionStore", "PostgresSubscriptionStore"]
