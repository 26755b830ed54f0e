"""Entity → response DTO conversion shared by use cases and routes."""

from stockroom.application.dto.responses import (
    BatchDetailResponse,
    BatchResponse,
    InventoryItemResponse,
    InventoryItemSummary,
)
from stockroom.core.entities.inventory import Batch, InventoryItem


def item_to_response(item: InventoryItem) -> InventoryItemResponse:
    return InventoryItemResponse(
        item_id=item.item_id,
        f_item_id=item.f_item_id,
        item_name=item.item_name,
        category_id=item.category_id,
        unit_measure=item.unit_measure,
        current_stock=item.current_stock,
        reorder_level=item.reorder_level,
        status=item.status.value,
        isdeleted=item.isdeleted,
        created_by=item.created_by,
        date_created=item.date_created,
        date_updated=item.date_updated,
    )


def item_to_summary(item: InventoryItem) -> InventoryItemSummary:
    return InventoryItemSummary(
        item_id=item.item_id,
        f_item_id=item.f_item_id,
        item_name=item.item_name,
        current_stock=item.current_stock,
        unit_measure=item.unit_measure,
        status=item.status.value,
        category_id=item.category_id,
        reorder_level=item.reorder_level,
        batches=[
            BatchResponse(
                batch_id=b.batch_id,
                usable_quantity=b.usable_quantity,
                defective_quantity=b.defective_quantity,
                missing_quantity=b.missing_quantity,
                expiration_date=b.expiration_date,
            )
            for b in item.batches
        ],
    )


def batch_to_detail(batch: Batch) -> BatchDetailResponse:
    return BatchDetailResponse(
        batch_id=batch.batch_id,
        item_id=batch.item_id,
        usable_quantity=batch.usable_quantity,
        defective_quantity=batch.defective_quantity,
        missing_quantity=batch.missing_quantity,
        expiration_date=batch.expiration_date,
        isdeleted=batch.isdeleted,
        created_by=batch.created_by,
        date_created=batch.date_created,
    )
