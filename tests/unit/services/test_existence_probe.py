"""Tests for ExistenceProbe."""

from unittest.mock import AsyncMock

import pytest

from stockroom.core.entities.inventory import Category, InventoryItem
from stockroom.core.exceptions import CategoryNotFoundError, ValidationError
from stockroom.core.services.existence_probe import ExistenceProbe


@pytest.fixture
def store():
    return AsyncMock()


@pytest.fixture
def probe(store):
    return ExistenceProbe(store)


class TestExistenceProbe:
    async def test_existing_item_reports_metadata(self, probe, store):
        store.find_item_by_name.return_value = InventoryItem(
            item_id="ITEM-000001",
            item_name="Gloves",
            category_id="CAT-000001",
            unit_measure="box",
            reorder_level=5,
        )
        store.get_category.return_value = Category(
            category_id="CAT-000001", category_name="Consumable"
        )

        result = await probe.check("Gloves")

        assert result.exists is True
        assert result.item_id == "ITEM-000001"
        assert result.category_name == "Consumable"
        assert result.category_id == "CAT-000001"
        assert result.reorder_level == 5
        assert result.unit_measure == "box"
        store.get_category.assert_awaited_once_with("CAT-000001")

    async def test_unknown_item(self, probe, store):
        store.find_item_by_name.return_value = None
        result = await probe.check("Nothing")
        assert result.exists is False
        assert result.category_name is None
        store.get_category.assert_not_awaited()

    @pytest.mark.parametrize("name", [None, "", "   "])
    async def test_blank_name_rejected(self, probe, store, name):
        with pytest.raises(ValidationError):
            await probe.check(name)
        store.find_item_by_name.assert_not_awaited()

    async def test_dangling_category_raises(self, probe, store):
        store.find_item_by_name.return_value = InventoryItem(
            item_id="ITEM-000001", item_name="Gloves", category_id="CAT-999999"
        )
        store.get_category.return_value = None
        with pytest.raises(CategoryNotFoundError):
            await probe.check("Gloves")
