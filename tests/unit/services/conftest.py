"""Fixtures for service tests: AsyncMock stores and a counting id generator."""

from unittest.mock import AsyncMock

import pytest

from stockroom.core.entities.inventory import Category

CONSUMABLE = Category(category_id="CAT-000001", category_name="Consumable")
MACHINE = Category(category_id="CAT-000002", category_name="Machine & Equipment")


@pytest.fixture
def mock_store():
    """Store double that remembers items it created so later lookups find them."""
    store = AsyncMock()
    created: dict[str, object] = {}

    async def find_item_by_name(name):
        return created.get(name)

    async def create_item_with_batch(item, batch):
        created[item.item_name] = item
        return item

    async def update_item_with_batch(item, batch):
        created[item.item_name] = item
        return item

    async def get_category_by_name(name):
        return {c.category_name: c for c in (CONSUMABLE, MACHINE)}.get(name)

    store.find_item_by_name.side_effect = find_item_by_name
    store.create_item_with_batch.side_effect = create_item_with_batch
    store.update_item_with_batch.side_effect = update_item_with_batch
    store.get_category_by_name.side_effect = get_category_by_name
    return store


@pytest.fixture
def mock_id_generator():
    """Id generator double producing PREFIX-000001 style identifiers per kind."""
    generator = AsyncMock()
    counters: dict[str, int] = {}

    async def generate(kind, prefix):
        counters[kind] = counters.get(kind, 0) + 1
        return f"{prefix}-{counters[kind]:06d}"

    generator.generate.side_effect = generate
    return generator
