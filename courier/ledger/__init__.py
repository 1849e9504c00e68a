"""Event ledger: durable record of events and per-subscriber outcomes."""

from courier.ledger.store import EventLedger, check_transition
from courier.ledger.stores import InMemoryEventLedger, PostgresEventLedger

__all__ = [
    "EventLedger",
    "check_transition",
    "InMemoryEventLedger",
    "PostgresEventLedger",
]
