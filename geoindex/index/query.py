"""
Cell Query Adapter
==================

Reads a set of geocell rows and folds them into one deduplicated list.

Failure containment: a cell whose read or decode fails contributes no
records and the query carries on with the remaining cells. Proximity search
favours returning fewer results over failing.
"""

import asyncio
from itertools import takewhile
from typing import List, Optional, Sequence
from uuid import UUID

import structlog

from geoindex.core.errors import CellReadFailure, CorruptIndexEntry
from geoindex.core.models import LocationRecord
from geoindex.storage.codec import Column, decode_column, decode_columns, entity_prefix, start_column_for
from geoindex.storage.columns.base import ColumnStore
from geoindex.storage.keys import LocationIndexKey
from geoindex.storage.merge import merge_location_entries

log = structlog.get_logger()


class CellQueryAdapter:
    """
    Range reads over geocell rows of one location index.

    Args:
        store: Column store to read from
        default_limit: Columns read per cell when the caller passes no limit
        read_concurrency: Cells read in parallel (1 = one after the other)
    """

    def __init__(
        self,
        store: ColumnStore,
        default_limit: int = 100,
        read_concurrency: int = 4,
    ):
        self.store = store
        self.default_limit = default_limit
        self.read_concurrency = max(1, read_concurrency)

    async def query_cells(
        self,
        key: LocationIndexKey,
        cells: Sequence[str],
        start_after: Optional[UUID] = None,
        limit: Optional[int] = None,
        reverse: bool = False,
    ) -> List[LocationRecord]:
        """
        Read every cell and merge the decoded records.

        Args:
            key: Index row key prefix (owner, collection, property)
            cells: Cell tokens to read
            start_after: Resume after (or before, when reverse) this entity id
            limit: Columns per cell read
            reverse: Read columns in descending order

        Returns:
            One record per entity, newest version, in first-seen order
            following the order of cells
        """
        limit = self.default_limit if limit is None else limit
        start = start_column_for(start_after, reverse) if start_after is not None else None
        semaphore = asyncio.Semaphore(self.read_concurrency)

        async def read_one(cell: str) -> List[LocationRecord]:
            async with semaphore:
                return await self._read_cell(key, cell, start, limit, reverse)

        per_cell = await asyncio.gather(*(read_one(cell) for cell in cells))

        # Merge in cell order so the result never depends on completion order
        merged: List[LocationRecord] = []
        for entries in per_cell:
            merged = merge_location_entries(merged, entries)
        return merged

    async def _read_cell(
        self,
        key: LocationIndexKey,
        cell: str,
        start: Optional[bytes],
        limit: int,
        reverse: bool,
    ) -> List[LocationRecord]:
        log.debug("Finding entities for cell", cell=cell)
        try:
            columns = await self._read_columns(key.row_key(cell), start, limit, reverse)
            return decode_columns(columns)
        except CorruptIndexEntry as e:
            log.warning("Skipping cell with corrupt index entry", cell=cell, error=str(e))
        except CellReadFailure as e:
            log.warning("Cell read failed, skipping cell", cell=cell, error=str(e))
        except Exception as e:
            failure = CellReadFailure(cell, e)
            log.warning("Cell read failed, skipping cell", cell=cell, error=str(failure))
        return []

    async def _read_columns(
        self,
        row_key: bytes,
        start: Optional[bytes],
        limit: int,
        reverse: bool,
    ) -> List[Column]:
        """
        Range read that never ends inside an entity's run of versions.

        A full page may stop before the newest version of its last entity,
        so reading continues from the last column until that run is over.
        """
        columns = list(await self.store.read(row_key, start=start, limit=limit, reverse=reverse))
        if limit <= 0 or len(columns) < limit:
            return columns

        prefix = entity_prefix(decode_column(columns[-1]).entity_id)
        # The page starts at the last column read, which is dropped again
        page_limit = max(limit, 2)
        while True:
            last = columns[-1].name
            page = await self.store.read(row_key, start=last, limit=page_limit, reverse=reverse)
            fresh = [c for c in page if c.name != last]
            run = list(takewhile(lambda c: c.name.startswith(prefix), fresh))
            columns.extend(run)
            if len(run) < len(fresh) or len(page) < page_limit:
                return columns
