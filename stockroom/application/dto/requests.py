"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from stockroom.core.entities.inventory import ItemStatus


class IngestStockRequest(BaseModel):
    """Bulk stock ingestion request.

    Entries are left unvalidated here so that one malformed entry fails
    on its own instead of rejecting the whole request.
    """

    model_config = ConfigDict(populate_by_name=True)

    stock_items: list[Any] = Field(
        ...,
        alias="stockItems",
        description="Reported stock entries, processed in order",
        examples=[
            [
                {
                    "name": "EXT-1001",
                    "itemName": "Gloves",
                    "category": "Consumable",
                    "unit": "box",
                    "usable": 10,
                    "defective": 0,
                    "missing": 0,
                    "expiration": "2027-01-31",
                    "reorder": 5,
                    "status": "available",
                }
            ]
        ],
    )


class UpdateItemRequest(BaseModel):
    """Request to overwrite an item's reorder level and status.

    item_id is optional at this layer so a missing or placeholder value
    is reported as a 400 by the lifecycle manager.
    """

    item_id: str | int | None = Field(default=None, description="Inventory item ID")
    reorder_level: int = Field(..., ge=0, description="Restock threshold")
    status: ItemStatus = Field(..., description="New item status")


class DeleteItemRequest(BaseModel):
    """Request to soft-delete an item and its batches."""

    item_id: str | int | None = Field(default=None, description="Inventory item ID")


class DeleteBatchRequest(BaseModel):
    """Request to soft-delete a single batch."""

    batch_id: str | int | None = Field(default=None, description="Batch ID")
