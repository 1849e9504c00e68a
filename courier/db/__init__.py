"""Database utilities for Courier.

This module contains:
- Connection pool management
- Store error hierarchy
- Alembic migrations
"""

from courier.db.errors import (
    ConnectionError,
    NotFoundError,
    StatusTransitionError,
    StoreError,
)
from courier.db.pool import PostgresPool

__all__ = [
    "StoreError",
    "ConnectionError",
    "NotFoundError",
    "StatusTransitionError",
    "PostgresPool",
]
