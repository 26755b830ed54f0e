"""Abstract interface for inventory storage."""

from abc import ABC, abstractmethod
from datetime import datetime

from stockroom.core.entities.inventory import Batch, Category, InventoryItem, ItemStatus


class IInventoryStore(ABC):
    """Interface for inventory item, batch and category persistence.

    Every lookup excludes soft-deleted rows unless stated otherwise.
    """

    @abstractmethod
    async def find_item_by_name(self, item_name: str) -> InventoryItem | None:
        """Get a non-deleted inventory item by exact name."""
        pass

    @abstractmethod
    async def get_item(self, item_id: str) -> InventoryItem | None:
        """Get a non-deleted inventory item by ID."""
        pass

    @abstractmethod
    async def create_item_with_batch(
        self, item: InventoryItem, batch: Batch
    ) -> InventoryItem:
        """Create an item and its first batch in one transaction."""
        pass

    @abstractmethod
    async def update_item_with_batch(
        self, item: InventoryItem, batch: Batch
    ) -> InventoryItem:
        """Write stock level, threshold and status, and append a batch, in one transaction.

        Raises ItemNotFoundError if the item is missing or soft-deleted.
        """
        pass

    @abstractmethod
    async def update_item_threshold(
        self,
        item_id: str,
        reorder_level: int,
        status: ItemStatus,
        updated_at: datetime,
    ) -> InventoryItem | None:
        """Overwrite reorder level and status. Returns None if no item matched."""
        pass

    @abstractmethod
    async def list_items(self) -> list[InventoryItem]:
        """List non-deleted items with their non-deleted batches."""
        pass

    @abstractmethod
    async def list_batches(
        self, item_id: str, include_deleted: bool = False
    ) -> list[Batch]:
        """List batches of an item regardless of the item's own deleted flag."""
        pass

    @abstractmethod
    async def soft_delete_item(self, item_id: str) -> bool:
        """Mark an item deleted. Returns False if no item has this ID."""
        pass

    @abstractmethod
    async def soft_delete_batches_for_item(self, item_id: str) -> int:
        """Mark every batch of an item deleted. Returns the number of rows touched."""
        pass

    @abstractmethod
    async def soft_delete_batch(self, batch_id: str) -> bool:
        """Mark one batch deleted. Returns False if no batch has this ID."""
        pass

    @abstractmethod
    async def get_category(self, category_id: str) -> Category | None:
        """Get category by ID."""
        pass

    @abstractmethod
    async def get_category_by_name(self, category_name: str) -> Category | None:
        """Get category by exact name."""
        pass
