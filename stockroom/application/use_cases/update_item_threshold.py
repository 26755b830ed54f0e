"""Update Item Threshold Use Case: overwrite reorder level and status."""

from stockroom.application.dto.mappers import item_to_response
from stockroom.application.dto.requests import UpdateItemRequest
from stockroom.application.dto.responses import UpdateItemResponse
from stockroom.core.entities.inventory import InventoryItem
from stockroom.core.services.item_lifecycle import ItemLifecycleManager


class UpdateItemThresholdUseCase:
    """Edit an item's reorder level and status."""

    def __init__(self, lifecycle: ItemLifecycleManager):
        self._lifecycle = lifecycle

    async def execute(self, request: UpdateItemRequest) -> InventoryItem:
        return await self._lifecycle.update_threshold(
            request.item_id,
            request.reorder_level,
            request.status,
        )

    def to_response(self, item: InventoryItem) -> UpdateItemResponse:
        return UpdateItemResponse(item=item_to_response(item))
