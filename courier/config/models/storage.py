"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory", "postgres"]


class StorageConfig(BaseModel):
    """Backend used for the subscription store and the event ledger.

    The DSN is normally supplied through COURIER_STORAGE__DSN or
    DATABASE_URL rather than committed to TOML.
    """

    backend: BackendType = Field(
        default="inmemory",
        description="Backend type",
    )
    dsn: str | None = Field(
        default=None,
        description="PostgreSQL connection string",
    )
    min_pool_size: int = Field(
        default=2,
        gt=0,
        description="Minimum connections to keep open",
    )
    max_pool_size: int = Field(
        default=10,
        gt=0,
        description="Maximum connections in pool",
    )
    max_inactive_connection_lifetime: float = Field(
        default=300.0,
        gt=0,
        description="Close connections idle longer than this (seconds)",
    )
    command_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Default timeout for queries (seconds)",
    )
