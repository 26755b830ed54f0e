"""Inventory domain entities."""

from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utcnow() -> datetime:
    return datetime.now(UTC)


class ItemStatus(str, Enum):
    """Availability status of an inventory item."""

    AVAILABLE = "AVAILABLE"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    LOW_STOCK = "LOW_STOCK"
    UNDER_MAINTENANCE = "UNDER_MAINTENANCE"


# Free-text status values reported by scans and upstream feeds
STATUS_ALIASES: dict[str, ItemStatus] = {
    "available": ItemStatus.AVAILABLE,
    "out-of-stock": ItemStatus.OUT_OF_STOCK,
    "low-stock": ItemStatus.LOW_STOCK,
    "maintenance": ItemStatus.UNDER_MAINTENANCE,
}


def parse_status(value: Any) -> ItemStatus:
    """Map free-text status to ItemStatus; unknown or non-text values mean AVAILABLE."""
    if not isinstance(value, str):
        return ItemStatus.AVAILABLE
    return STATUS_ALIASES.get(value, ItemStatus.AVAILABLE)


class Category(BaseModel):
    """Classification reference data. Read-only for this service."""

    category_id: str
    category_name: str


class Batch(BaseModel):
    """A discrete receipt of stock for one item.

    Quantities never change after creation; corrections arrive as new batches.
    """

    batch_id: str
    item_id: str  # FK → inventory_items.item_id
    usable_quantity: int = Field(default=0, ge=0)
    defective_quantity: int = Field(default=0, ge=0)
    missing_quantity: int = Field(default=0, ge=0)
    expiration_date: date | None = None
    isdeleted: bool = False
    created_by: int | None = None
    date_created: datetime = Field(default_factory=utcnow)


class InventoryItem(BaseModel):
    """Tracks the aggregate stock level of one named item."""

    item_id: str
    f_item_id: str | None = None  # external reference
    item_name: str
    category_id: str  # FK → categories.category_id
    unit_measure: str | None = None
    current_stock: int = Field(default=0, ge=0)
    reorder_level: int = Field(default=0, ge=0)
    status: ItemStatus = ItemStatus.AVAILABLE
    isdeleted: bool = False
    created_by: int | None = None
    date_created: datetime = Field(default_factory=utcnow)
    date_updated: datetime | None = None
    batches: list[Batch] = Field(default_factory=list)


class StockEntry(BaseModel):
    """One externally reported stock line submitted for ingestion."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None  # external reference, stored as f_item_id
    item_name: str = Field(..., alias="itemName", min_length=1)
    category: Any = None
    unit: str | None = None
    usable: int = Field(..., ge=0)
    defective: int = Field(default=0, ge=0)
    missing: int = Field(default=0, ge=0)
    expiration: date | None = None
    reorder: int = Field(default=0, ge=0)
    status: Any = None

    @field_validator("name", "unit", mode="before")
    @classmethod
    def coerce_numeric_text(cls, v: Any) -> Any:
        # Upstream feeds send numeric references
        if isinstance(v, int | float) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("expiration", mode="before")
    @classmethod
    def blank_expiration(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            # Accept full timestamps by keeping the calendar date
            if "T" in v:
                return v.split("T", 1)[0]
        return v
