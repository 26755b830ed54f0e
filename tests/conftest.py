"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from stockroom.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteIdGenerator,
    SQLiteInventoryStore,
)
from stockroom.infrastructure.storage.sqlite.migrations.migrator import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "stockroom-test.db"


@pytest.fixture
async def migrated_db(temp_db_path: Path) -> Path:
    """Temporary database with every migration applied."""
    await initialize_database(temp_db_path, create_backup_before=False)
    return temp_db_path


@pytest.fixture
async def pool(migrated_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Connection pool over the migrated temporary database."""
    p = ConnectionPool(migrated_db, pool_size=3)
    await p.initialize()
    yield p
    await p.close()


@pytest.fixture
def inventory_store(pool: ConnectionPool) -> SQLiteInventoryStore:
    return SQLiteInventoryStore(pool)


@pytest.fixture
def id_generator(pool: ConnectionPool) -> SQLiteIdGenerator:
    return SQLiteIdGenerator(pool)


@pytest.fixture
def gloves_entry() -> dict:
    """A reported stock line as an upstream client sends it."""
    return {
        "name": "EXT-1001",
        "itemName": "Gloves",
        "category": "Consumable",
        "unit": "box",
        "usable": 10,
        "defective": 1,
        "missing": 0,
        "expiration": "2027-01-31",
        "reorder": 5,
        "status": "available",
    }
