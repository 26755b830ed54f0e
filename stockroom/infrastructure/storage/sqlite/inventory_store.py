"""SQLite implementation of inventory storage."""

from datetime import date, datetime

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.entities.inventory import (
    Batch,
    Category,
    InventoryItem,
    ItemStatus,
    utcnow,
)
from stockroom.core.exceptions import ItemNotFoundError
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)

_INSERT_BATCH = """
    INSERT INTO batches (
        batch_id, item_id, usable_quantity, defective_quantity,
        missing_quantity, expiration_date, isdeleted, created_by, date_created
    ) VALUES (?, ?, ?, ?, ?, ?, 0, ?, ?)
"""


class SQLiteInventoryStore(IInventoryStore):
    """SQLite implementation of inventory item, batch and category storage."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def find_item_by_name(self, item_name: str) -> InventoryItem | None:
        """Get a non-deleted inventory item by exact name."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM inventory_items
                WHERE item_name = ? AND isdeleted = 0
                ORDER BY date_created, item_id
                LIMIT 1
                """,
                (item_name,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_item(row)

    async def get_item(self, item_id: str) -> InventoryItem | None:
        """Get a non-deleted inventory item by ID."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inventory_items WHERE item_id = ? AND isdeleted = 0",
                (item_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_item(row)

    async def create_item_with_batch(
        self, item: InventoryItem, batch: Batch
    ) -> InventoryItem:
        """Create an item and its first batch in one transaction."""
        async with self._pool.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO inventory_items (
                    item_id, f_item_id, item_name, category_id, unit_measure,
                    current_stock, reorder_level, status, isdeleted,
                    created_by, date_created, date_updated
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, ?, ?, ?)
                """,
                (
                    item.item_id,
                    item.f_item_id,
                    item.item_name,
                    item.category_id,
                    item.unit_measure,
                    item.current_stock,
                    item.reorder_level,
                    item.status.value,
                    item.created_by,
                    item.date_created.isoformat(),
                    item.date_updated.isoformat() if item.date_updated else None,
                ),
            )
            await conn.execute(_INSERT_BATCH, self._batch_params(batch))

        logger.info(
            "inventory_item_created",
            item_id=item.item_id,
            item_name=item.item_name,
            batch_id=batch.batch_id,
        )
        return item

    async def update_item_with_batch(
        self, item: InventoryItem, batch: Batch
    ) -> InventoryItem:
        """Write stock level, threshold and status, and append a batch, in one transaction."""
        updated_at = item.date_updated or utcnow()
        async with self._pool.transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE inventory_items SET
                    current_stock = ?,
                    reorder_level = ?,
                    status = ?,
                    date_updated = ?
                WHERE item_id = ? AND isdeleted = 0
                """,
                (
                    item.current_stock,
                    item.reorder_level,
                    item.status.value,
                    updated_at.isoformat(),
                    item.item_id,
                ),
            )
            if cursor.rowcount == 0:
                raise ItemNotFoundError(item.item_id)
            await conn.execute(_INSERT_BATCH, self._batch_params(batch))

        logger.info(
            "inventory_item_updated",
            item_id=item.item_id,
            batch_id=batch.batch_id,
            current_stock=item.current_stock,
        )
        return item.model_copy(update={"date_updated": updated_at})

    async def update_item_threshold(
        self,
        item_id: str,
        reorder_level: int,
        status: ItemStatus,
        updated_at: datetime,
    ) -> InventoryItem | None:
        """Overwrite reorder level and status. Returns None if no item matched."""
        async with self._pool.transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE inventory_items SET
                    reorder_level = ?,
                    status = ?,
                    date_updated = ?
                WHERE item_id = ? AND isdeleted = 0
                """,
                (reorder_level, status.value, updated_at.isoformat(), item_id),
            )
            if cursor.rowcount == 0:
                return None
            cursor = await conn.execute(
                "SELECT * FROM inventory_items WHERE item_id = ?", (item_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_item(row)

    async def list_items(self) -> list[InventoryItem]:
        """List non-deleted items with their non-deleted batches."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM inventory_items
                WHERE isdeleted = 0
                ORDER BY item_name, item_id
                """
            )
            items = [self._row_to_item(row) for row in await cursor.fetchall()]

            cursor = await conn.execute(
                """
                SELECT b.* FROM batches b
                JOIN inventory_items i ON i.item_id = b.item_id
                WHERE b.isdeleted = 0 AND i.isdeleted = 0
                ORDER BY b.date_created, b.batch_id
                """
            )
            batch_rows = await cursor.fetchall()

        by_item: dict[str, InventoryItem] = {item.item_id: item for item in items}
        for row in batch_rows:
            by_item[row["item_id"]].batches.append(self._row_to_batch(row))
        return items

    async def list_batches(
        self, item_id: str, include_deleted: bool = False
    ) -> list[Batch]:
        """List batches of an item regardless of the item's own deleted flag."""
        query = "SELECT * FROM batches WHERE item_id = ?"
        if not include_deleted:
            query += " AND isdeleted = 0"
        query += " ORDER BY date_created, batch_id"
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(query, (item_id,))
            rows = await cursor.fetchall()
            return [self._row_to_batch(row) for row in rows]

    async def soft_delete_item(self, item_id: str) -> bool:
        """Mark an item deleted. Already-deleted items still count as found."""
        async with self._pool.transaction() as conn:
            cursor = await conn.execute(
                "UPDATE inventory_items SET isdeleted = 1, date_updated = ? WHERE item_id = ?",
                (utcnow().isoformat(), item_id),
            )
            return cursor.rowcount > 0

    async def soft_delete_batches_for_item(self, item_id: str) -> int:
        """Mark every batch of an item deleted."""
        async with self._pool.transaction() as conn:
            cursor = await conn.execute(
                "UPDATE batches SET isdeleted = 1 WHERE item_id = ?",
                (item_id,),
            )
            return cursor.rowcount

    async def soft_delete_batch(self, batch_id: str) -> bool:
        """Mark one batch deleted."""
        async with self._pool.transaction() as conn:
            cursor = await conn.execute(
                "UPDATE batches SET isdeleted = 1 WHERE batch_id = ?",
                (batch_id,),
            )
            return cursor.rowcount > 0

    async def get_category(self, category_id: str) -> Category | None:
        """Get category by ID."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM categories WHERE category_id = ?", (category_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_category(row)

    async def get_category_by_name(self, category_name: str) -> Category | None:
        """Get category by exact name."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT * FROM categories WHERE category_name = ? LIMIT 1",
                (category_name,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_category(row)

    @staticmethod
    def _batch_params(batch: Batch) -> tuple:
        return (
            batch.batch_id,
            batch.item_id,
            batch.usable_quantity,
            batch.defective_quantity,
            batch.missing_quantity,
            batch.expiration_date.isoformat() if batch.expiration_date else None,
            batch.created_by,
            batch.date_created.isoformat(),
        )

    @staticmethod
    def _parse_datetime(value: str | None) -> datetime | None:
        if not value:
            return None
        try:
            return datetime.fromisoformat(value)
        except (ValueError, TypeError):
            return None

    @classmethod
    def _row_to_item(cls, row: aiosqlite.Row) -> InventoryItem:
        """Convert a database row to an InventoryItem entity."""
        return InventoryItem(
            item_id=row["item_id"],
            f_item_id=row["f_item_id"],
            item_name=row["item_name"],
            category_id=row["category_id"],
            unit_measure=row["unit_measure"],
            current_stock=int(row["current_stock"]),
            reorder_level=int(row["reorder_level"]),
            status=ItemStatus(row["status"]),
            isdeleted=bool(row["isdeleted"]),
            created_by=row["created_by"],
            date_created=cls._parse_datetime(row["date_created"]) or utcnow(),
            date_updated=cls._parse_datetime(row["date_updated"]),
        )

    @classmethod
    def _row_to_batch(cls, row: aiosqlite.Row) -> Batch:
        """Convert a database row to a Batch entity."""
        expiration_date = None
        if row["expiration_date"]:
            try:
                expiration_date = date.fromisoformat(row["expiration_date"])
            except (ValueError, TypeError):
                pass

        return Batch(
            batch_id=row["batch_id"],
            item_id=row["item_id"],
            usable_quantity=int(row["usable_quantity"]),
            defective_quantity=int(row["defective_quantity"]),
            missing_quantity=int(row["missing_quantity"]),
            expiration_date=expiration_date,
            isdeleted=bool(row["isdeleted"]),
            created_by=row["created_by"],
            date_created=cls._parse_datetime(row["date_created"]) or utcnow(),
        )

    @staticmethod
    def _row_to_category(row: aiosqlite.Row) -> Category:
        return Category(
            category_id=row["category_id"],
            category_name=row["category_name"],
        )
