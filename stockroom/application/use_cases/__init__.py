"""Application use cases."""

from stockroom.application.use_cases.check_existing_item import CheckExistingItemUseCase
from stockroom.application.use_cases.ingest_stock import IngestStockUseCase
from stockroom.application.use_cases.remove_inventory import (
    SoftDeleteBatchUseCase,
    SoftDeleteItemUseCase,
)
from stockroom.application.use_cases.update_item_threshold import UpdateItemThresholdUseCase

__all__ = [
    "CheckExistingItemUseCase",
    "IngestStockUseCase",
    "SoftDeleteBatchUseCase",
    "SoftDeleteItemUseCase",
    "UpdateItemThresholdUseCase",
]
