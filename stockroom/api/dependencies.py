"""
Dependency injection container for FastAPI.

Builds stores, services and use cases per request from the connection
pool the application opened at startup.
"""

from fastapi import Depends, Request

from stockroom.application.use_cases import (
    CheckExistingItemUseCase,
    IngestStockUseCase,
    SoftDeleteBatchUseCase,
    SoftDeleteItemUseCase,
    UpdateItemThresholdUseCase,
)
from stockroom.config import Settings, get_settings
from stockroom.core.exceptions import ConfigurationError
from stockroom.core.interfaces import IIdGenerator, IInventoryStore
from stockroom.core.services import (
    CategoryResolver,
    ExistenceProbe,
    ItemLifecycleManager,
    StockReconciliationEngine,
)
from stockroom.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteIdGenerator,
    SQLiteInventoryStore,
)


def get_app_settings() -> Settings:
    """Get application settings."""
    return get_settings()


def get_pool(request: Request) -> ConnectionPool:
    """Get the connection pool opened by the application lifespan."""
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        raise ConfigurationError("Connection pool is not initialized")
    return pool


# Store dependencies
def get_inventory_store(pool: ConnectionPool = Depends(get_pool)) -> IInventoryStore:
    """Get inventory store."""
    return SQLiteInventoryStore(pool)


def get_id_generator(
    pool: ConnectionPool = Depends(get_pool),
    settings: Settings = Depends(get_app_settings),
) -> IIdGenerator:
    """Get identifier generator."""
    return SQLiteIdGenerator(pool, padding=settings.identifiers.padding)


# Service dependencies
def get_reconciliation_engine(
    store: IInventoryStore = Depends(get_inventory_store),
    id_generator: IIdGenerator = Depends(get_id_generator),
    settings: Settings = Depends(get_app_settings),
) -> StockReconciliationEngine:
    """Get stock reconciliation engine."""
    return StockReconciliationEngine(
        store,
        id_generator,
        CategoryResolver(store),
        created_by=settings.ingestion.created_by,
        max_entries=settings.ingestion.max_entries,
    )


def get_lifecycle_manager(
    store: IInventoryStore = Depends(get_inventory_store),
) -> ItemLifecycleManager:
    """Get item lifecycle manager."""
    return ItemLifecycleManager(store)


def get_existence_probe(
    store: IInventoryStore = Depends(get_inventory_store),
) -> ExistenceProbe:
    """Get existence probe."""
    return ExistenceProbe(store)


# Use case dependencies
def get_ingest_stock_use_case(
    engine: StockReconciliationEngine = Depends(get_reconciliation_engine),
) -> IngestStockUseCase:
    """Get ingest stock use case."""
    return IngestStockUseCase(engine)


def get_update_item_use_case(
    lifecycle: ItemLifecycleManager = Depends(get_lifecycle_manager),
) -> UpdateItemThresholdUseCase:
    """Get update item threshold use case."""
    return UpdateItemThresholdUseCase(lifecycle)


def get_delete_item_use_case(
    lifecycle: ItemLifecycleManager = Depends(get_lifecycle_manager),
) -> SoftDeleteItemUseCase:
    """Get soft delete item use case."""
    return SoftDeleteItemUseCase(lifecycle)


def get_delete_batch_use_case(
    lifecycle: ItemLifecycleManager = Depends(get_lifecycle_manager),
) -> SoftDeleteBatchUseCase:
    """Get soft delete batch use case."""
    return SoftDeleteBatchUseCase(lifecycle)


def get_check_existing_use_case(
    probe: ExistenceProbe = Depends(get_existence_probe),
) -> CheckExistingItemUseCase:
    """Get check existing item use case."""
    return CheckExistingItemUseCase(probe)
