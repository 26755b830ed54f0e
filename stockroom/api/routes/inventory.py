"""Inventory management endpoints."""

from fastapi import APIRouter, Depends, Query

from stockroom.api.dependencies import (
    get_check_existing_use_case,
    get_delete_batch_use_case,
    get_delete_item_use_case,
    get_ingest_stock_use_case,
    get_inventory_store,
    get_update_item_use_case,
)
from stockroom.application.dto.mappers import batch_to_detail, item_to_summary
from stockroom.application.dto.requests import (
    DeleteBatchRequest,
    DeleteItemRequest,
    IngestStockRequest,
    UpdateItemRequest,
)
from stockroom.application.dto.responses import (
    BatchListResponse,
    CheckExistingResponse,
    ErrorResponse,
    IngestStockResponse,
    InventoryListResponse,
    SuccessResponse,
    UpdateItemResponse,
)
from stockroom.application.use_cases import (
    CheckExistingItemUseCase,
    IngestStockUseCase,
    SoftDeleteBatchUseCase,
    SoftDeleteItemUseCase,
    UpdateItemThresholdUseCase,
)
from stockroom.core.interfaces import IInventoryStore

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.get(
    "/items",
    response_model=InventoryListResponse,
    responses={500: {"model": ErrorResponse}},
)
async def list_items(
    store: IInventoryStore = Depends(get_inventory_store),
) -> InventoryListResponse:
    """List non-deleted items with their non-deleted batches."""
    items = await store.list_items()
    return InventoryListResponse(items=[item_to_summary(item) for item in items])


@router.post(
    "/items",
    response_model=IngestStockResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def ingest_stock(
    request: IngestStockRequest,
    use_case: IngestStockUseCase = Depends(get_ingest_stock_use_case),
) -> IngestStockResponse:
    """Reconcile reported stock entries against stored items, one by one."""
    report = await use_case.execute(request)
    return use_case.to_response(report)


@router.put(
    "/items",
    response_model=UpdateItemResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def update_item(
    request: UpdateItemRequest,
    use_case: UpdateItemThresholdUseCase = Depends(get_update_item_use_case),
) -> UpdateItemResponse:
    """Overwrite an item's reorder level and status."""
    item = await use_case.execute(request)
    return use_case.to_response(item)


@router.patch(
    "/items",
    response_model=SuccessResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def delete_item(
    request: DeleteItemRequest,
    use_case: SoftDeleteItemUseCase = Depends(get_delete_item_use_case),
) -> SuccessResponse:
    """Soft-delete an item and cascade to its batches."""
    await use_case.execute(request)
    return SuccessResponse()


@router.patch(
    "/batches",
    response_model=SuccessResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def delete_batch(
    request: DeleteBatchRequest,
    use_case: SoftDeleteBatchUseCase = Depends(get_delete_batch_use_case),
) -> SuccessResponse:
    """Soft-delete a single batch."""
    await use_case.execute(request)
    return SuccessResponse()


@router.get(
    "/items/check-existing",
    response_model=CheckExistingResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}},
)
async def check_existing_item(
    item_name: str | None = Query(default=None, alias="itemName"),
    snake_item_name: str | None = Query(default=None, alias="item_name", include_in_schema=False),
    use_case: CheckExistingItemUseCase = Depends(get_check_existing_use_case),
) -> CheckExistingResponse:
    """Report whether an item name is registered, with its metadata."""
    result = await use_case.execute(item_name if item_name is not None else snake_item_name)
    return use_case.to_response(result)


@router.get(
    "/items/{item_id}/batches",
    response_model=BatchListResponse,
)
async def list_item_batches(
    item_id: str,
    include_deleted: bool = Query(default=False),
    store: IInventoryStore = Depends(get_inventory_store),
) -> BatchListResponse:
    """List the batches of one item."""
    batches = await store.list_batches(item_id, include_deleted=include_deleted)
    return BatchListResponse(
        item_id=item_id,
        batches=[batch_to_detail(b) for b in batches],
    )
