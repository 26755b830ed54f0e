"""API tests for inventory endpoints with store dependencies overridden."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from stockroom.api.dependencies import get_id_generator, get_inventory_store
from stockroom.api.main import app
from stockroom.core.entities.inventory import Batch, Category, InventoryItem, ItemStatus

CONSUMABLE = Category(category_id="CAT-000001", category_name="Consumable")


def _gloves(**overrides) -> InventoryItem:
    fields = {
        "item_id": "ITEM-000001",
        "f_item_id": "EXT-1001",
        "item_name": "Gloves",
        "category_id": "CAT-000001",
        "unit_measure": "box",
        "current_stock": 10,
        "reorder_level": 5,
    }
    fields.update(overrides)
    return InventoryItem(**fields)


@pytest.fixture
def mock_inventory_store():
    store = AsyncMock()
    store.find_item_by_name.return_value = None
    store.get_category_by_name.return_value = CONSUMABLE
    store.get_category.return_value = CONSUMABLE
    store.create_item_with_batch.side_effect = lambda item, batch: item
    store.update_item_with_batch.side_effect = lambda item, batch: item
    store.list_items.return_value = []
    store.list_batches.return_value = []
    return store


@pytest.fixture
def mock_id_generator():
    generator = AsyncMock()
    counter = {"n": 0}

    async def generate(kind, prefix):
        counter["n"] += 1
        return f"{prefix}-{counter['n']:06d}"

    generator.generate.side_effect = generate
    return generator


@pytest.fixture
async def inv_client(mock_inventory_store, mock_id_generator):
    app.dependency_overrides[get_inventory_store] = lambda: mock_inventory_store
    app.dependency_overrides[get_id_generator] = lambda: mock_id_generator
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_inventory_store, None)
    app.dependency_overrides.pop(get_id_generator, None)


class TestListItems:
    async def test_empty_list(self, inv_client: AsyncClient):
        response = await inv_client.get("/api/inventory/items")
        assert response.status_code == 200
        assert response.json() == {"success": True, "items": []}

    async def test_projection(self, inv_client: AsyncClient, mock_inventory_store):
        item = _gloves()
        item.batches.append(
            Batch(batch_id="BAT-000001", item_id="ITEM-000001", usable_quantity=10)
        )
        mock_inventory_store.list_items.return_value = [item]

        response = await inv_client.get("/api/inventory/items")

        body = response.json()
        entry = body["items"][0]
        assert set(entry) == {
            "item_id",
            "f_item_id",
            "item_name",
            "current_stock",
            "unit_measure",
            "status",
            "category_id",
            "reorder_level",
            "batches",
        }
        assert entry["status"] == "AVAILABLE"
        assert entry["batches"][0]["batch_id"] == "BAT-000001"
        assert "isdeleted" not in entry["batches"][0]

    async def test_store_failure_is_500_envelope(self, inv_client, mock_inventory_store):
        from stockroom.core.exceptions import DatabaseError

        mock_inventory_store.list_items.side_effect = DatabaseError("select", "disk I/O error")
        response = await inv_client.get("/api/inventory/items")
        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "DATABASE_ERROR"
        assert body["path"] == "/api/inventory/items"


class TestIngest:
    async def test_creates_item(self, inv_client: AsyncClient):
        response = await inv_client.post(
            "/api/inventory/items",
            json={"stockItems": [{"name": "EXT-1001", "itemName": "Gloves", "usable": 10}]},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["summary"] == {"total": 1, "created": 1, "updated": 0, "failed": 0}
        result = body["results"][0]
        assert result["action"] == "created"
        assert result["item"]["item_id"] == "ITEM-000002"
        assert result["item"]["current_stock"] == 10

    async def test_updates_existing(self, inv_client, mock_inventory_store):
        mock_inventory_store.find_item_by_name.return_value = _gloves()
        response = await inv_client.post(
            "/api/inventory/items",
            json={"stockItems": [{"itemName": "Gloves", "usable": 5, "status": "foo"}]},
        )
        result = response.json()["results"][0]
        assert result["action"] == "updated"
        assert result["item"]["current_stock"] == 15
        assert result["item"]["status"] == "AVAILABLE"

    async def test_failed_entry_reports_name(self, inv_client, mock_inventory_store):
        mock_inventory_store.get_category_by_name.return_value = None
        response = await inv_client.post(
            "/api/inventory/items",
            json={"stockItems": [{"name": "W-1", "itemName": "Widget", "category": "Widgets", "usable": 1}]},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["results"][0] == {
            "success": False,
            "action": "failed",
            "item": "W-1",
            "error": "Category not found for Widgets",
        }

    @pytest.mark.parametrize("status", [1, True, {"x": 1}])
    async def test_non_text_status_defaults_to_available(self, inv_client, status):
        response = await inv_client.post(
            "/api/inventory/items",
            json={"stockItems": [{"itemName": "Gloves", "category": "Consumable", "usable": 3, "status": status}]},
        )
        result = response.json()["results"][0]
        assert result["action"] == "created"
        assert result["item"]["status"] == "AVAILABLE"

    async def test_numeric_category_is_machine_and_equipment(self, inv_client, mock_inventory_store):
        response = await inv_client.post(
            "/api/inventory/items",
            json={"stockItems": [{"itemName": "Drill", "category": 7, "unit": 12, "usable": 1}]},
        )
        result = response.json()["results"][0]
        assert result["action"] == "created"
        assert result["item"]["unit_measure"] == "12"
        mock_inventory_store.get_category_by_name.assert_awaited_once_with("Machine & Equipment")

    async def test_non_list_is_422_envelope(self, inv_client: AsyncClient):
        response = await inv_client.post("/api/inventory/items", json={"stockItems": "Gloves"})
        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "VALIDATION_ERROR"
        assert "stockItems" in body["detail"]

    async def test_missing_body_is_422(self, inv_client: AsyncClient):
        response = await inv_client.post("/api/inventory/items", json={})
        assert response.status_code == 422

    async def test_too_many_entries_is_400(self, inv_client, mock_inventory_store):
        entries = [{"itemName": f"Item {i}", "usable": 1} for i in range(501)]
        response = await inv_client.post("/api/inventory/items", json={"stockItems": entries})
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        mock_inventory_store.find_item_by_name.assert_not_awaited()


class TestUpdateItem:
    async def test_updates(self, inv_client, mock_inventory_store):
        mock_inventory_store.update_item_threshold.return_value = _gloves(
            reorder_level=20, status=ItemStatus.LOW_STOCK
        )
        response = await inv_client.put(
            "/api/inventory/items",
            json={"item_id": "ITEM-000001", "reorder_level": 20, "status": "LOW_STOCK"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Item updated successfully"
        assert body["item"]["reorder_level"] == 20

    async def test_undefined_id_is_400(self, inv_client, mock_inventory_store):
        response = await inv_client.put(
            "/api/inventory/items",
            json={"item_id": "undefined", "reorder_level": 20, "status": "AVAILABLE"},
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        mock_inventory_store.update_item_threshold.assert_not_awaited()

    async def test_unknown_item_is_404(self, inv_client, mock_inventory_store):
        mock_inventory_store.update_item_threshold.return_value = None
        response = await inv_client.put(
            "/api/inventory/items",
            json={"item_id": "ITEM-404", "reorder_level": 1, "status": "AVAILABLE"},
        )
        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "ITEM_NOT_FOUND"
        assert body["hint"]

    async def test_bad_status_is_422(self, inv_client: AsyncClient):
        response = await inv_client.put(
            "/api/inventory/items",
            json={"item_id": "ITEM-000001", "reorder_level": 1, "status": "BROKEN"},
        )
        assert response.status_code == 422


class TestDelete:
    async def test_delete_item(self, inv_client, mock_inventory_store):
        mock_inventory_store.soft_delete_item.return_value = True
        mock_inventory_store.soft_delete_batches_for_item.return_value = 2
        response = await inv_client.patch("/api/inventory/items", json={"item_id": "ITEM-000001"})
        assert response.status_code == 200
        assert response.json() == {"success": True}

    async def test_delete_item_missing_id_is_400(self, inv_client, mock_inventory_store):
        response = await inv_client.patch("/api/inventory/items", json={})
        assert response.status_code == 400
        mock_inventory_store.soft_delete_item.assert_not_awaited()

    async def test_delete_unknown_item_is_404(self, inv_client, mock_inventory_store):
        mock_inventory_store.soft_delete_item.return_value = False
        response = await inv_client.patch("/api/inventory/items", json={"item_id": "ITEM-404"})
        assert response.status_code == 404

    async def test_partial_cascade_is_500(self, inv_client, mock_inventory_store):
        mock_inventory_store.soft_delete_item.return_value = True
        mock_inventory_store.soft_delete_batches_for_item.side_effect = RuntimeError("locked")
        response = await inv_client.patch("/api/inventory/items", json={"item_id": "ITEM-000001"})
        assert response.status_code == 500
        assert response.json()["error_code"] == "PARTIAL_CASCADE_FAILURE"

    async def test_delete_batch(self, inv_client, mock_inventory_store):
        mock_inventory_store.soft_delete_batch.return_value = True
        response = await inv_client.patch("/api/inventory/batches", json={"batch_id": "BAT-000001"})
        assert response.status_code == 200
        assert response.json() == {"success": True}

    async def test_delete_unknown_batch_is_404(self, inv_client, mock_inventory_store):
        mock_inventory_store.soft_delete_batch.return_value = False
        response = await inv_client.patch("/api/inventory/batches", json={"batch_id": "BAT-404"})
        assert response.status_code == 404
        assert response.json()["error_code"] == "BATCH_NOT_FOUND"


class TestCheckExisting:
    async def test_existing(self, inv_client, mock_inventory_store):
        mock_inventory_store.find_item_by_name.return_value = _gloves()
        response = await inv_client.get(
            "/api/inventory/items/check-existing", params={"item_name": "Gloves"}
        )
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "exists": True,
            "item": {
                "category_name": "Consumable",
                "category_id": "CAT-000001",
                "reorder_level": 5,
                "unit_measure": "box",
            },
        }

    async def test_accepts_camel_case_parameter(self, inv_client, mock_inventory_store):
        mock_inventory_store.find_item_by_name.return_value = _gloves()
        response = await inv_client.get(
            "/api/inventory/items/check-existing", params={"itemName": "Gloves"}
        )
        assert response.json()["exists"] is True
        mock_inventory_store.find_item_by_name.assert_awaited_once_with("Gloves")

    async def test_not_existing(self, inv_client: AsyncClient):
        response = await inv_client.get(
            "/api/inventory/items/check-existing", params={"item_name": "Nothing"}
        )
        assert response.json() == {"success": True, "exists": False}

    async def test_missing_name_is_400(self, inv_client: AsyncClient):
        response = await inv_client.get("/api/inventory/items/check-existing")
        assert response.status_code == 400


class TestListBatches:
    async def test_lists_batches(self, inv_client, mock_inventory_store):
        mock_inventory_store.list_batches.return_value = [
            Batch(batch_id="BAT-000001", item_id="ITEM-000001", usable_quantity=3, isdeleted=True)
        ]
        response = await inv_client.get(
            "/api/inventory/items/ITEM-000001/batches", params={"include_deleted": "true"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["item_id"] == "ITEM-000001"
        assert body["batches"][0]["isdeleted"] is True
        mock_inventory_store.list_batches.assert_awaited_once_with(
            "ITEM-000001", include_deleted=True
        )
