"""Core interfaces (ports) for dependency injection."""

from stockroom.core.interfaces.id_generator import IIdGenerator
from stockroom.core.interfaces.inventory_store import IInventoryStore

__all__ = [
    "IIdGenerator",
    "IInventoryStore",
]
