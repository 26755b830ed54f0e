"""Tests for StockReconciliationEngine."""

import pytest

from stockroom.core.entities.inventory import InventoryItem, ItemStatus
from stockroom.core.exceptions import ValidationError
from stockroom.core.services.stock_reconciliation import (
    BATCH_KIND,
    ITEM_KIND,
    EntryAction,
    StockReconciliationEngine,
)


@pytest.fixture
def engine(mock_store, mock_id_generator):
    return StockReconciliationEngine(mock_store, mock_id_generator, created_by=7)


def _kinds(mock_id_generator) -> list[str]:
    return [c.args[0] for c in mock_id_generator.generate.await_args_list]


class TestNewItems:
    async def test_creates_item_and_first_batch(self, engine, mock_store, gloves_entry):
        report = await engine.reconcile([gloves_entry])

        assert report.success is True
        assert len(report.outcomes) == 1
        outcome = report.outcomes[0]
        assert outcome.action is EntryAction.CREATED
        assert outcome.success is True

        item = outcome.item
        assert item.item_id == "ITEM-000001"
        assert item.f_item_id == "EXT-1001"
        assert item.item_name == "Gloves"
        assert item.category_id == "CAT-000001"
        assert item.unit_measure == "box"
        assert item.current_stock == 10
        assert item.reorder_level == 5
        assert item.status is ItemStatus.AVAILABLE
        assert item.created_by == 7

        written_item, batch = mock_store.create_item_with_batch.await_args.args
        assert written_item.item_id == batch.item_id
        assert batch.batch_id == "BAT-000001"
        assert batch.usable_quantity == 10
        assert batch.defective_quantity == 1
        assert batch.missing_quantity == 0
        assert batch.created_by == 7

    async def test_non_consumable_goes_to_machine_and_equipment(self, engine, gloves_entry):
        gloves_entry["category"] = "Tools"
        report = await engine.reconcile([gloves_entry])
        assert report.outcomes[0].item.category_id == "CAT-000002"

    async def test_unknown_status_stored_as_available(self, engine, gloves_entry):
        gloves_entry["status"] = "foo"
        report = await engine.reconcile([gloves_entry])
        assert report.outcomes[0].item.status is ItemStatus.AVAILABLE

    async def test_status_mapping_applied(self, engine, gloves_entry):
        gloves_entry["status"] = "low-stock"
        report = await engine.reconcile([gloves_entry])
        assert report.outcomes[0].item.status is ItemStatus.LOW_STOCK

    async def test_batch_id_allocated_before_item_id(self, engine, mock_id_generator, gloves_entry):
        await engine.reconcile([gloves_entry])
        assert _kinds(mock_id_generator) == [BATCH_KIND, ITEM_KIND]


class TestExistingItems:
    async def test_merges_into_existing_item(self, engine, mock_store, mock_id_generator):
        existing = InventoryItem(
            item_id="ITEM-000009",
            item_name="Gloves",
            category_id="CAT-000001",
            current_stock=10,
            reorder_level=5,
        )
        mock_store.find_item_by_name.side_effect = None
        mock_store.find_item_by_name.return_value = existing

        report = await engine.reconcile(
            [{"itemName": "Gloves", "usable": 5, "reorder": 8, "status": "out-of-stock"}]
        )

        outcome = report.outcomes[0]
        assert outcome.action is EntryAction.UPDATED
        assert outcome.item.item_id == "ITEM-000009"
        assert outcome.item.current_stock == 15
        assert outcome.item.reorder_level == 8
        assert outcome.item.status is ItemStatus.OUT_OF_STOCK
        assert outcome.item.date_updated is not None

        _, batch = mock_store.update_item_with_batch.await_args.args
        assert batch.item_id == "ITEM-000009"
        assert batch.usable_quantity == 5

        mock_store.create_item_with_batch.assert_not_awaited()
        mock_store.get_category_by_name.assert_not_awaited()
        assert _kinds(mock_id_generator) == [BATCH_KIND]

    async def test_later_entry_sees_earlier_write(self, engine):
        report = await engine.reconcile(
            [
                {"itemName": "Gloves", "category": "Consumable", "usable": 10},
                {"itemName": "Gloves", "category": "Consumable", "usable": 5},
            ]
        )

        first, second = report.outcomes
        assert first.action is EntryAction.CREATED
        assert first.item.current_stock == 10
        assert second.action is EntryAction.UPDATED
        assert second.item.current_stock == 15
        assert second.item.item_id == first.item.item_id

    async def test_zero_usable_still_records_batch(self, engine, mock_store):
        await engine.reconcile([{"itemName": "Drill", "usable": 0, "defective": 2}])
        _, batch = mock_store.create_item_with_batch.await_args.args
        assert batch.usable_quantity == 0
        assert batch.defective_quantity == 2


class TestFailureIsolation:
    async def test_failing_entry_does_not_stop_run(self, engine, mock_store):
        original = mock_store.create_item_with_batch.side_effect

        async def create(item, batch):
            if item.item_name == "Broken":
                raise RuntimeError("disk full")
            return await original(item, batch)

        mock_store.create_item_with_batch.side_effect = create

        report = await engine.reconcile(
            [
                {"name": "A", "itemName": "Gloves", "usable": 1},
                {"name": "B", "itemName": "Broken", "usable": 1},
                {"name": "C", "itemName": "Masks", "usable": 1},
            ]
        )

        assert [o.action for o in report.outcomes] == [
            EntryAction.CREATED,
            EntryAction.FAILED,
            EntryAction.CREATED,
        ]
        failed = report.outcomes[1]
        assert failed.success is False
        assert failed.entry_name == "B"
        assert failed.error == "disk full"
        assert failed.item is None
        assert report.success is True
        assert (report.created, report.updated, report.failed) == (2, 0, 1)

    async def test_missing_category_fails_without_persisting(
        self, engine, mock_store, mock_id_generator
    ):
        mock_store.get_category_by_name.side_effect = None
        mock_store.get_category_by_name.return_value = None

        report = await engine.reconcile(
            [{"name": "W-1", "itemName": "Widget", "category": "Widgets", "usable": 3}]
        )

        outcome = report.outcomes[0]
        assert outcome.action is EntryAction.FAILED
        assert outcome.error == "Category not found for Widgets"
        mock_store.create_item_with_batch.assert_not_awaited()
        assert ITEM_KIND not in _kinds(mock_id_generator)

    async def test_malformed_entry_fails_alone(self, engine, mock_store):
        report = await engine.reconcile(
            [
                {"name": "bad", "usable": 1},
                {"name": "neg", "itemName": "Gloves", "usable": -3},
                "not an entry",
                {"itemName": "Masks", "usable": 2},
            ]
        )

        actions = [o.action for o in report.outcomes]
        assert actions == [
            EntryAction.FAILED,
            EntryAction.FAILED,
            EntryAction.FAILED,
            EntryAction.CREATED,
        ]
        assert report.outcomes[0].entry_name == "bad"
        assert report.outcomes[0].error.startswith("Invalid stock entry")
        assert "itemName" in report.outcomes[0].error
        assert report.outcomes[2].entry_name is None
        mock_store.create_item_with_batch.assert_awaited_once()


class TestProcessLevelValidation:
    @pytest.mark.parametrize("entries", [None, "Gloves", {"itemName": "Gloves"}, 42])
    async def test_non_list_rejected(self, engine, mock_store, entries):
        with pytest.raises(ValidationError) as exc_info:
            await engine.reconcile(entries)
        assert exc_info.value.details["field"] == "stockItems"
        mock_store.find_item_by_name.assert_not_awaited()

    async def test_too_many_entries_rejected(self, mock_store, mock_id_generator):
        engine = StockReconciliationEngine(mock_store, mock_id_generator, max_entries=2)
        entries = [{"itemName": f"Item {i}", "usable": 1} for i in range(3)]

        with pytest.raises(ValidationError):
            await engine.reconcile(entries)
        mock_store.find_item_by_name.assert_not_awaited()

    async def test_empty_list_is_a_successful_noop(self, engine, mock_store):
        report = await engine.reconcile([])
        assert report.success is True
        assert report.outcomes == []
        mock_store.find_item_by_name.assert_not_awaited()
