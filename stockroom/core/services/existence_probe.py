"""Read-only lookup used by clients to pre-fill item metadata."""

from dataclasses import dataclass

from stockroom.config import get_logger
from stockroom.core.exceptions import CategoryNotFoundError, ValidationError
from stockroom.core.interfaces.inventory_store import IInventoryStore

logger = get_logger(__name__)


@dataclass
class ExistenceResult:
    """Whether an item name is registered, with its metadata if so."""

    exists: bool
    item_id: str | None = None
    category_name: str | None = None
    category_id: str | None = None
    reorder_level: int | None = None
    unit_measure: str | None = None


class ExistenceProbe:
    """Answers whether a non-deleted item with a given name exists.

    Independent of the reconciliation engine, which does its own lookup.
    """

    def __init__(self, inventory_store: IInventoryStore):
        self._store = inventory_store

    async def check(self, item_name: str | None) -> ExistenceResult:
        if item_name is None or not item_name.strip():
            raise ValidationError("item_name", "Item name is required", item_name)

        item = await self._store.find_item_by_name(item_name)
        logger.debug("existing_item_checked", item_name=item_name, found=item is not None)
        if item is None:
            return ExistenceResult(exists=False)

        category = await self._store.get_category(item.category_id)
        if category is None:
            raise CategoryNotFoundError(item.category_id)

        return ExistenceResult(
            exists=True,
            item_id=item.item_id,
            category_name=category.category_name,
            category_id=item.category_id,
            reorder_level=item.reorder_level,
            unit_measure=item.unit_measure,
        )
