"""Storage infrastructure implementations."""

from stockroom.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteIdGenerator,
    SQLiteInventoryStore,
    open_pool,
)

__all__ = [
    "ConnectionPool",
    "SQLiteIdGenerator",
    "SQLiteInventoryStore",
    "open_pool",
]
