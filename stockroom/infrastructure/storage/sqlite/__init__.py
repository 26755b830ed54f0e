"""SQLite storage implementations."""

from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool, open_pool
from stockroom.infrastructure.storage.sqlite.id_generator import SQLiteIdGenerator
from stockroom.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore

# Type aliases for convenience
InventoryStore = SQLiteInventoryStore
IdGenerator = SQLiteIdGenerator

__all__ = [
    # Connection
    "ConnectionPool",
    "open_pool",
    # Store classes
    "SQLiteIdGenerator",
    "SQLiteInventoryStore",
    # Type aliases
    "IdGenerator",
    "InventoryStore",
]
