"""
GeoIndex Test Configuration
===========================

Shared fixtures for all tests.
"""

from typing import List, Sequence
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio

from geoindex.core.models import LocationRecord, Point
from geoindex.core.versions import new_time_uuid
from geoindex.storage.columns import InMemoryColumnStore, SQLColumnStore, SQLStoreConfig
from geoindex.storage.keys import LocationIndexKey


class FixedCellGenerator:
    """Cell generator returning a fixed list of cells for every point."""

    def __init__(self, cells: Sequence[str]):
        self.cells = list(cells)
        self.calls: List[tuple] = []

    def cells_for(self, point: Point, resolution: int) -> List[str]:
        self.calls.append((point, resolution))
        return list(self.cells)


class FixedCellsDriver:
    """Search driver that reads a fixed list of cells once."""

    def __init__(self, cells: Sequence[str]):
        self.cells = list(cells)

    async def proximity_search(self, center, count, max_distance, query):
        return await query(self.cells)


@pytest.fixture
def fixed_cell_generator():
    return FixedCellGenerator


@pytest.fixture
def fixed_cells_driver():
    return FixedCellsDriver


@pytest.fixture
def owner_id():
    return uuid4()


@pytest.fixture
def index_key(owner_id):
    return LocationIndexKey(owner_id=owner_id, collection_name="users", property_name="location")


@pytest.fixture
def memory_store():
    return InMemoryColumnStore()


@pytest_asyncio.fixture
async def sql_store(tmp_path):
    """SQLColumnStore on a temporary SQLite file."""
    config = SQLStoreConfig(
        url=f"sqlite+aiosqlite:///{tmp_path / 'index.db'}",
        table_name="location_index_test",
    )
    store = SQLColumnStore(config, retry_delay=0.0)
    await store.connect()
    await store.ensure_table_exists()

    yield store

    await store.close()


@pytest.fixture
def mock_store():
    """Mock column store for unit tests."""
    store = MagicMock()
    store.read = AsyncMock(return_value=[])
    store.submit = AsyncMock()
    store.close = AsyncMock()
    return store


@pytest.fixture
def make_record():
    """Factory for LocationRecords with increasing version ids."""
    def _make(entity_id=None, latitude=37.7749, longitude=-122.4194, entity_type="user", version_id=None):
        return LocationRecord(
            entity_id=entity_id or uuid4(),
            entity_type=entity_type,
            latitude=latitude,
            longitude=longitude,
            version_id=version_id or new_time_uuid(),
        )
    return _make
