"""
Core business logic services.

Layer-pure services that depend only on:
- stockroom/core/entities/*
- stockroom/core/interfaces/*
- stockroom/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from stockroom.core.services.category_resolver import CategoryResolver
from stockroom.core.services.existence_probe import ExistenceProbe, ExistenceResult
from stockroom.core.services.item_lifecycle import ItemLifecycleManager
from stockroom.core.services.stock_reconciliation import (
    EntryAction,
    EntryOutcome,
    ReconciliationReport,
    StockReconciliationEngine,
)

__all__ = [
    "CategoryResolver",
    "EntryAction",
    "EntryOutcome",
    "ExistenceProbe",
    "ExistenceResult",
    "ItemLifecycleManager",
    "ReconciliationReport",
    "StockReconciliationEngine",
]
