"""Category resolution for incoming stock entries."""

from typing import Any

from stockroom.config import get_logger
from stockroom.core.entities.inventory import Category
from stockroom.core.exceptions import CategoryNotFoundError
from stockroom.core.interfaces.inventory_store import IInventoryStore

logger = get_logger(__name__)

CONSUMABLE = "Consumable"
MACHINE_AND_EQUIPMENT = "Machine & Equipment"


class CategoryResolver:
    """Maps a free-text classification to a stored category.

    The split is binary: exactly "Consumable" (case-sensitive) is a
    consumable, anything else is machine & equipment.
    """

    def __init__(self, inventory_store: IInventoryStore):
        self._store = inventory_store

    @staticmethod
    def category_name_for(classification: Any) -> str:
        return CONSUMABLE if classification == CONSUMABLE else MACHINE_AND_EQUIPMENT

    async def resolve(self, classification: Any) -> Category:
        """
        Resolve a classification to its category row.

        Raises:
            CategoryNotFoundError: If no row exists for the resolved name.
        """
        category_name = self.category_name_for(classification)
        category = await self._store.get_category_by_name(category_name)
        if category is None:
            logger.warning(
                "category_not_found",
                classification=classification,
                category_name=category_name,
            )
            raise CategoryNotFoundError(classification)
        return category
