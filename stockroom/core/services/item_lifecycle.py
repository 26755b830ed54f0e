"""
Item lifecycle management.

Direct mutation of inventory items outside bulk ingestion: threshold and
status edits, and soft deletion of items and batches.
"""

from typing import Any

from stockroom.config import get_logger
from stockroom.core.entities.inventory import InventoryItem, ItemStatus, utcnow
from stockroom.core.exceptions import (
    BatchNotFoundError,
    ItemNotFoundError,
    PartialCascadeFailureError,
    ValidationError,
)
from stockroom.core.interfaces.inventory_store import IInventoryStore

logger = get_logger(__name__)

# Placeholder strings browsers send for unset identifiers
_MISSING_IDENTIFIERS = {"", "undefined", "null", "none"}


def require_identifier(field: str, value: Any) -> str:
    """Return the identifier as a string or raise ValidationError."""
    if value is None:
        raise ValidationError(field, f"Missing {field}")
    text = str(value).strip()
    if text.lower() in _MISSING_IDENTIFIERS:
        raise ValidationError(field, f"Missing or invalid {field}", value)
    return text


class ItemLifecycleManager:
    """Updates and soft-deletes items and batches."""

    def __init__(self, inventory_store: IInventoryStore):
        self._store = inventory_store

    async def update_threshold(
        self,
        item_id: Any,
        reorder_level: int,
        status: ItemStatus,
    ) -> InventoryItem:
        """
        Overwrite reorder level and status of one item.

        Stock level and batches are untouched.

        Raises:
            ValidationError: If item_id is absent or malformed.
            ItemNotFoundError: If no non-deleted item has this ID.
        """
        item_id = require_identifier("item_id", item_id)
        updated = await self._store.update_item_threshold(
            item_id, reorder_level, status, utcnow()
        )
        if updated is None:
            raise ItemNotFoundError(item_id)

        logger.info(
            "item_threshold_updated",
            item_id=item_id,
            reorder_level=reorder_level,
            status=status.value,
        )
        return updated

    async def soft_delete_item(self, item_id: Any) -> int:
        """
        Soft-delete an item, then all of its batches.

        The two writes are separate. If the second fails the item stays
        deleted and PartialCascadeFailureError is raised; calling this again
        finishes the cascade.

        Returns:
            Number of batches marked deleted.
        """
        item_id = require_identifier("item_id", item_id)

        if not await self._store.soft_delete_item(item_id):
            raise ItemNotFoundError(item_id)
        logger.info("item_soft_deleted", item_id=item_id)

        try:
            batches = await self._store.soft_delete_batches_for_item(item_id)
        except Exception as e:
            logger.error("batch_cascade_failed", item_id=item_id, error=str(e))
            raise PartialCascadeFailureError(item_id, str(e)) from e

        logger.info("item_batches_soft_deleted", item_id=item_id, batches=batches)
        return batches

    async def soft_delete_batch(self, batch_id: Any) -> None:
        """Soft-delete one batch. The parent's stock level is not recomputed."""
        batch_id = require_identifier("batch_id", batch_id)
        if not await self._store.soft_delete_batch(batch_id):
            raise BatchNotFoundError(batch_id)
        logger.info("batch_soft_deleted", batch_id=batch_id)
