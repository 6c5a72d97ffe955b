"""
Test Location Index Writer
==========================

Fan-out of one record into its covering cells.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from geoindex.core.errors import WriteFailure
from geoindex.geocell.generator import GeohashCellGenerator
from geoindex.index.writer import LocationIndexWriter
from geoindex.storage.codec import decode_column
from geoindex.storage.keys import LocationIndexKey


class TestFanOut:
    @pytest.mark.asyncio
    async def test_one_mutation_per_cell(self, mock_store, fixed_cell_generator, owner_id, make_record):
        writer = LocationIndexWriter(mock_store, fixed_cell_generator(["9q8yy", "9q8yz"]), retry_count=3)
        record = make_record()

        cells = await writer.store(owner_id, "users", "location", record)

        assert cells == ["9q8yy", "9q8yz"]
        mock_store.submit.assert_awaited_once()
        batch, retry_count = mock_store.submit.await_args.args
        assert retry_count == 3
        assert len(batch) == 2

        parsed = [LocationIndexKey.parse_row_key(m.row_key) for m in batch]
        assert [cell for _, cell in parsed] == ["9q8yy", "9q8yz"]
        for key, _ in parsed:
            assert key.owner_id == owner_id
            assert key.collection_name == "users"
            assert key.property_name == "location"

        for mutation in batch:
            assert decode_column(mutation.column) == record

    @pytest.mark.asyncio
    async def test_duplicate_cells_written_once(self, mock_store, fixed_cell_generator, owner_id, make_record):
        writer = LocationIndexWriter(mock_store, fixed_cell_generator(["a", "b", "a"]))

        cells = await writer.store(owner_id, "users", "location", make_record())

        assert cells == ["a", "b"]
        batch = mock_store.submit.await_args.args[0]
        assert len(batch) == 2

    @pytest.mark.asyncio
    async def test_generator_called_with_max_resolution(self, mock_store, fixed_cell_generator, owner_id, make_record):
        generator = fixed_cell_generator(["9"])
        writer = LocationIndexWriter(mock_store, generator, max_resolution=6)
        record = make_record()

        await writer.store(owner_id, "users", "location", record)

        assert generator.calls == [(record.point, 6)]

    @pytest.mark.asyncio
    async def test_hierarchy_rows_in_memory_store(self, memory_store, owner_id, index_key, make_record):
        writer = LocationIndexWriter(memory_store, GeohashCellGenerator(), max_resolution=8)
        record = make_record(latitude=37.7749, longitude=-122.4194)

        cells = await writer.store(owner_id, "users", "location", record)

        assert len(cells) == 8
        assert memory_store.row_count() == 8
        for cell in cells:
            columns = await memory_store.read(index_key.row_key(cell))
            assert [decode_column(c) for c in columns] == [record]

    @pytest.mark.asyncio
    async def test_namespace_in_row_key(self, mock_store, fixed_cell_generator, owner_id, make_record):
        writer = LocationIndexWriter(mock_store, fixed_cell_generator(["9q"]), namespace="places")

        await writer.store(owner_id, "shops", "address", make_record())

        mutation = next(iter(mock_store.submit.await_args.args[0]))
        key, cell = LocationIndexKey.parse_row_key(mutation.row_key)
        assert key.namespace == "places"
        assert cell == "9q"


class TestWriteFailures:
    @pytest.mark.asyncio
    async def test_write_failure_propagates(self, mock_store, fixed_cell_generator, owner_id, make_record):
        mock_store.submit = AsyncMock(side_effect=WriteFailure("exhausted", attempts=5))
        writer = LocationIndexWriter(mock_store, fixed_cell_generator(["9q8yy"]))

        with pytest.raises(WriteFailure, match="exhausted"):
            await writer.store(owner_id, "users", "location", make_record())

    @pytest.mark.asyncio
    async def test_exhausted_retries_on_real_store(self, memory_store, fixed_cell_generator, owner_id, make_record):
        memory_store._apply = AsyncMock(side_effect=ConnectionError("unavailable"))
        writer = LocationIndexWriter(memory_store, fixed_cell_generator(["9q8yy"]), retry_count=2)

        with pytest.raises(WriteFailure) as exc_info:
            await writer.store(owner_id, "users", "location", make_record())

        assert exc_info.value.attempts == 2
        assert memory_store.row_count() == 0

    @pytest.mark.asyncio
    async def test_timeout_becomes_write_failure(self, mock_store, fixed_cell_generator, owner_id, make_record):
        async def slow_submit(batch, retry_count):
            await asyncio.sleep(5)

        mock_store.submit = AsyncMock(side_effect=slow_submit)
        writer = LocationIndexWriter(mock_store, fixed_cell_generator(["9q8yy"]))

        with pytest.raises(WriteFailure, match="timed out"):
            await writer.store(owner_id, "users", "location", make_record(), timeout=0.01)
