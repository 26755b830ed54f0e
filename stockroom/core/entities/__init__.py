"""Domain entities."""

from stockroom.core.entities.inventory import (
    STATUS_ALIASES,
    Batch,
    Category,
    InventoryItem,
    ItemStatus,
    StockEntry,
    parse_status,
)

__all__ = [
    "Batch",
    "Category",
    "InventoryItem",
    "ItemStatus",
    "STATUS_ALIASES",
    "StockEntry",
    "parse_status",
]
