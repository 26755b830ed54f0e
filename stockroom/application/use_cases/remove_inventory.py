"""Soft-delete use cases for items and batches."""

from stockroom.application.dto.requests import DeleteBatchRequest, DeleteItemRequest
from stockroom.core.services.item_lifecycle import ItemLifecycleManager


class SoftDeleteItemUseCase:
    """Soft-delete an item, then cascade to its batches."""

    def __init__(self, lifecycle: ItemLifecycleManager):
        self._lifecycle = lifecycle

    async def execute(self, request: DeleteItemRequest) -> int:
        """Returns the number of batches marked deleted."""
        return await self._lifecycle.soft_delete_item(request.item_id)


class SoftDeleteBatchUseCase:
    """Soft-delete one batch without touching the item's stock level."""

    def __init__(self, lifecycle: ItemLifecycleManager):
        self._lifecycle = lifecycle

    async def execute(self, request: DeleteBatchRequest) -> None:
        await self._lifecycle.soft_delete_batch(request.batch_id)
