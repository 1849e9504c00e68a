"""Event ledger backends."""

from courier.ledger.stores.inmemory import InMemoryEventLedger
from courier.ledger.stores.postgres import PostgresEventLedger

__all__ = ["InMemoryEventLedger", "PostgresEventLedger"]
