"""Response DTOs for API endpoints.

Pydantic v2 models for API responses.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - success: always False
    - error: human-readable description
    - error_code: machine-readable code (e.g. ITEM_NOT_FOUND)
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    success: bool = False
    error: str = Field(..., description="Human-readable error description")
    error_code: str = Field(..., description="Machine-readable error code")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)


class SuccessResponse(BaseModel):
    """Bare acknowledgement."""

    success: bool = True


# --- Inventory ---


class BatchResponse(BaseModel):
    """Batch projection used in listings."""

    batch_id: str
    usable_quantity: int
    defective_quantity: int
    missing_quantity: int
    expiration_date: date | None = None


class BatchDetailResponse(BatchResponse):
    """Batch with ownership and audit fields."""

    item_id: str
    isdeleted: bool
    created_by: int | None = None
    date_created: datetime


class InventoryItemSummary(BaseModel):
    """Fixed projection returned by the read-all endpoint."""

    item_id: str
    f_item_id: str | None = None
    item_name: str
    current_stock: int
    unit_measure: str | None = None
    status: str
    category_id: str
    reorder_level: int
    batches: list[BatchResponse] = Field(default_factory=list)


class InventoryItemResponse(BaseModel):
    """Full inventory item record as written."""

    item_id: str
    f_item_id: str | None = None
    item_name: str
    category_id: str
    unit_measure: str | None = None
    current_stock: int
    reorder_level: int
    status: str
    isdeleted: bool = False
    created_by: int | None = None
    date_created: datetime
    date_updated: datetime | None = None


class InventoryListResponse(BaseModel):
    """All non-deleted items."""

    success: bool = True
    items: list[InventoryItemSummary]


class BatchListResponse(BaseModel):
    """Batches of one item."""

    success: bool = True
    item_id: str
    batches: list[BatchDetailResponse]


class StockEntryResult(BaseModel):
    """Outcome of one ingested entry.

    `item` is the written record for created/updated entries and the
    entry's external name for failed ones.
    """

    success: bool
    action: str
    item: InventoryItemResponse | str | None = None
    error: str | None = None


class IngestSummary(BaseModel):
    """Counts per action for one ingestion run."""

    total: int
    created: int
    updated: int
    failed: int


class IngestStockResponse(BaseModel):
    """Response for bulk stock ingestion."""

    success: bool = True
    results: list[StockEntryResult]
    summary: IngestSummary


class UpdateItemResponse(BaseModel):
    """Response for a threshold/status update."""

    success: bool = True
    item: InventoryItemResponse
    message: str = "Item updated successfully"


class ExistingItemInfo(BaseModel):
    """Metadata used by clients to pre-fill an entry form."""

    category_name: str
    category_id: str
    reorder_level: int
    unit_measure: str | None = None


class CheckExistingResponse(BaseModel):
    """Whether an item name is already registered."""

    success: bool = True
    exists: bool
    item: ExistingItemInfo | None = None


# --- Health ---


class ProviderHealthResponse(BaseModel):
    """Health of one backing dependency."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Service health."""

    status: str
    version: str
    uptime_seconds: float
    database: ProviderHealthResponse | None = None
