"""
Stock reconciliation engine.

Decides, entry by entry, whether reported stock belongs to a new inventory
item or augments an existing one, then records a batch and updates the
aggregate stock level. A failing entry never stops the rest of the run.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from stockroom.config import get_logger
from stockroom.core.entities.inventory import (
    Batch,
    InventoryItem,
    StockEntry,
    parse_status,
    utcnow,
)
from stockroom.core.exceptions import ValidationError
from stockroom.core.interfaces.id_generator import IIdGenerator
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.core.services.category_resolver import CategoryResolver

logger = get_logger(__name__)

BATCH_KIND, BATCH_PREFIX = "batch", "BAT"
ITEM_KIND, ITEM_PREFIX = "inventoryItem", "ITEM"


class EntryAction(str, Enum):
    """What happened to a single stock entry."""

    CREATED = "created"
    UPDATED = "updated"
    FAILED = "failed"


@dataclass
class EntryOutcome:
    """Tagged result for one entry: the written item, or the failure reason."""

    action: EntryAction
    item: InventoryItem | None = None
    entry_name: str | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.action is not EntryAction.FAILED

    @classmethod
    def failed(cls, entry_name: str | None, error: str) -> "EntryOutcome":
        return cls(action=EntryAction.FAILED, entry_name=entry_name, error=error)


@dataclass
class ReconciliationReport:
    """Ordered outcomes of one ingestion run, one per submitted entry."""

    outcomes: list[EntryOutcome] = field(default_factory=list)
    success: bool = True

    def count(self, action: EntryAction) -> int:
        return sum(1 for o in self.outcomes if o.action is action)

    @property
    def created(self) -> int:
        return self.count(EntryAction.CREATED)

    @property
    def updated(self) -> int:
        return self.count(EntryAction.UPDATED)

    @property
    def failed(self) -> int:
        return self.count(EntryAction.FAILED)


class StockReconciliationEngine:
    """
    Reconciles a list of reported stock entries against stored inventory.

    Entries are processed strictly in order so that a lookup for entry N
    sees what entries before it wrote. There is no cross-entry transaction:
    each entry commits (or fails) on its own.
    """

    def __init__(
        self,
        inventory_store: IInventoryStore,
        id_generator: IIdGenerator,
        category_resolver: CategoryResolver | None = None,
        *,
        created_by: int = 1,
        max_entries: int | None = None,
    ):
        self._store = inventory_store
        self._ids = id_generator
        self._categories = category_resolver or CategoryResolver(inventory_store)
        self._created_by = created_by
        self._max_entries = max_entries

    async def reconcile(self, entries: Sequence[Any]) -> ReconciliationReport:
        """
        Process every entry and collect its outcome.

        Args:
            entries: Raw stock entries (mappings or StockEntry instances).

        Returns:
            ReconciliationReport with exactly one outcome per entry, in order.

        Raises:
            ValidationError: If the input cannot be iterated as a list of
                entries. No entry is processed in that case.
        """
        if not isinstance(entries, Sequence) or isinstance(entries, str | bytes):
            raise ValidationError("stockItems", "must be a list of stock entries", entries)
        if self._max_entries is not None and len(entries) > self._max_entries:
            raise ValidationError(
                "stockItems",
                f"at most {self._max_entries} entries per request",
                len(entries),
            )

        total = len(entries)
        logger.info("stock_ingestion_started", entries=total)

        report = ReconciliationReport()
        for position, raw in enumerate(entries, start=1):
            outcome = await self._reconcile_entry(position, total, raw)
            report.outcomes.append(outcome)

        logger.info(
            "stock_ingestion_finished",
            entries=total,
            created=report.created,
            updated=report.updated,
            failed=report.failed,
        )
        return report

    async def _reconcile_entry(self, position: int, total: int, raw: Any) -> EntryOutcome:
        entry_name = _entry_name(raw)
        try:
            entry = raw if isinstance(raw, StockEntry) else StockEntry.model_validate(raw)
            logger.info(
                "stock_entry_processing",
                position=position,
                total=total,
                item_name=entry.item_name,
            )
            return await self._apply(entry)
        except Exception as e:
            if isinstance(e, PydanticValidationError):
                error = _describe_validation_error(e)
            else:
                error = str(e) or e.__class__.__name__
            logger.error(
                "stock_entry_failed",
                position=position,
                total=total,
                entry_name=entry_name,
                error=error,
                exc_info=True,
            )
            return EntryOutcome.failed(entry_name, error)

    async def _apply(self, entry: StockEntry) -> EntryOutcome:
        existing = await self._store.find_item_by_name(entry.item_name)
        status = parse_status(entry.status)
        batch_id = await self._ids.generate(BATCH_KIND, BATCH_PREFIX)

        if existing is not None:
            item = existing.model_copy(
                update={
                    "current_stock": existing.current_stock + entry.usable,
                    "reorder_level": entry.reorder,
                    "status": status,
                    "date_updated": utcnow(),
                }
            )
            batch = self._new_batch(batch_id, item.item_id, entry)
            updated = await self._store.update_item_with_batch(item, batch)
            logger.info(
                "stock_entry_merged",
                item_id=updated.item_id,
                batch_id=batch_id,
                current_stock=updated.current_stock,
            )
            return EntryOutcome(
                action=EntryAction.UPDATED, item=updated, entry_name=entry.name
            )

        category = await self._categories.resolve(entry.category)
        item_id = await self._ids.generate(ITEM_KIND, ITEM_PREFIX)
        item = InventoryItem(
            item_id=item_id,
            f_item_id=entry.name,
            item_name=entry.item_name,
            category_id=category.category_id,
            unit_measure=entry.unit,
            current_stock=entry.usable,
            reorder_level=entry.reorder,
            status=status,
            created_by=self._created_by,
        )
        batch = self._new_batch(batch_id, item_id, entry)
        created = await self._store.create_item_with_batch(item, batch)
        logger.info(
            "stock_entry_created",
            item_id=created.item_id,
            batch_id=batch_id,
            current_stock=created.current_stock,
        )
        return EntryOutcome(action=EntryAction.CREATED, item=created, entry_name=entry.name)

    def _new_batch(self, batch_id: str, item_id: str, entry: StockEntry) -> Batch:
        return Batch(
            batch_id=batch_id,
            item_id=item_id,
            usable_quantity=entry.usable,
            defective_quantity=entry.defective,
            missing_quantity=entry.missing,
            expiration_date=entry.expiration,
            created_by=self._created_by,
        )


def _entry_name(raw: Any) -> str | None:
    if isinstance(raw, StockEntry):
        return raw.name
    if isinstance(raw, dict):
        name = raw.get("name")
        return None if name is None else str(name)
    return None


def _describe_validation_error(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = " -> ".join(str(part) for part in error["loc"]) or "entry"
        parts.append(f"{loc}: {error['msg']}")
    return "Invalid stock entry: " + "; ".join(parts)
