"""Data transfer objects for the API boundary."""

from stockroom.application.dto.requests import (
    DeleteBatchRequest,
    DeleteItemRequest,
    IngestStockRequest,
    UpdateItemRequest,
)
from stockroom.application.dto.responses import (
    BatchDetailResponse,
    BatchListResponse,
    BatchResponse,
    CheckExistingResponse,
    ErrorResponse,
    ExistingItemInfo,
    HealthResponse,
    IngestStockResponse,
    IngestSummary,
    InventoryItemResponse,
    InventoryItemSummary,
    InventoryListResponse,
    ProviderHealthResponse,
    StockEntryResult,
    SuccessResponse,
    UpdateItemResponse,
)

__all__ = [
    # Requests
    "DeleteBatchRequest",
    "DeleteItemRequest",
    "IngestStockRequest",
    "UpdateItemRequest",
    # Responses
    "BatchDetailResponse",
    "BatchListResponse",
    "BatchResponse",
    "CheckExistingResponse",
    "ErrorResponse",
    "ExistingItemInfo",
    "HealthResponse",
    "IngestStockResponse",
    "IngestSummary",
    "InventoryItemResponse",
    "InventoryItemSummary",
    "InventoryListResponse",
    "ProviderHealthResponse",
    "StockEntryResult",
    "SuccessResponse",
    "UpdateItemResponse",
]
