"""
Location Index Writer
=====================

Fan-out write path: one index column per covering geocell, all submitted as
a single batch.
"""

import asyncio
from typing import List, Optional
from uuid import UUID

import structlog

from geoindex.core.errors import WriteFailure
from geoindex.core.models import LocationRecord
from geoindex.geocell.generator import CellGenerator
from geoindex.storage.codec import encode_entry
from geoindex.storage.columns.base import ColumnStore, MutationBatch
from geoindex.storage.keys import LocationIndexKey

log = structlog.get_logger()


class LocationIndexWriter:
    """
    Writes LocationRecords into every covering geocell row.

    Example:
        >>> writer = LocationIndexWriter(store, GeohashCellGenerator(), max_resolution=8)
        >>> cells = await writer.store(owner_id, "users", "location", record)
    """

    def __init__(
        self,
        store: ColumnStore,
        cell_generator: CellGenerator,
        max_resolution: int = 8,
        retry_count: int = 5,
        namespace: str = "locations",
    ):
        self.column_store = store
        self.cell_generator = cell_generator
        self.max_resolution = max_resolution
        self.retry_count = retry_count
        self.namespace = namespace

    def covering_cells(self, record: LocationRecord) -> List[str]:
        """Distinct covering cells of record, in generator order."""
        cells = self.cell_generator.cells_for(record.point, self.max_resolution)
        return list(dict.fromkeys(cells))

    @staticmethod
    def build_batch(
        key: LocationIndexKey,
        record: LocationRecord,
        cells: List[str],
    ) -> MutationBatch:
        """Pending mutations for record, one per cell."""
        batch = MutationBatch()
        for cell in cells:
            batch = batch.with_mutation(encode_entry(key.row_key(cell), record))
        return batch

    async def store(
        self,
        owner_id: UUID,
        collection_name: str,
        property_name: str,
        record: LocationRecord,
        timeout: Optional[float] = None,
    ) -> List[str]:
        """
        Index record under (owner_id, collection_name, property_name).

        Returns:
            Cell tokens written

        Raises:
            WriteFailure: retry budget exhausted or timeout expired
        """
        key = LocationIndexKey(
            owner_id=owner_id,
            collection_name=collection_name,
            property_name=property_name,
            namespace=self.namespace,
        )
        cells = self.covering_cells(record)
        batch = self.build_batch(key, record, cells)

        try:
            async with asyncio.timeout(timeout):
                await self.column_store.submit(batch, self.retry_count)
        except TimeoutError as e:
            log.error(
                "Location write timed out",
                entity_id=str(record.entity_id),
                timeout=timeout,
            )
            raise WriteFailure(f"Location write timed out after {timeout}s") from e

        log.info(
            f"Geocells to be saved for Point({record.latitude},{record.longitude}) are: {cells}",
            entity_id=str(record.entity_id),
            collection=collection_name,
            property=property_name,
        )
        return cells
