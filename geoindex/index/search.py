"""
Proximity Search
================

Drives the expanding search over one location index and hands the
candidates to hydration.

Flow:
    search(center, max_distance, count, level)
            |
    SearchDriver.proximity_search  --query(cells)-->  CellQueryAdapter
            |                                              |
            |<------------- merged records ----------------+
            v
    LocationRecord -> EntityRef (capped to count)
            |
    EntityLoader.load_entities(refs, level, count) -> SearchResults

A fault inside the driver, including an expired deadline, does not reach
the caller: the search continues with the candidates read so far, ranked
and filtered to max_distance as the driver would have done.
"""

import asyncio
from typing import List, Optional
from uuid import UUID

import structlog

from geoindex.core.hydration import EntityLoader
from geoindex.core.models import LocationRecord, Point, ResultLevel, SearchResults
from geoindex.geocell.driver import SearchDriver, rank_by_distance
from geoindex.storage.keys import LocationIndexKey
from geoindex.storage.merge import merge_location_entries

from .query import CellQueryAdapter

log = structlog.get_logger()


class ProximitySearch:
    """
    Proximity search orchestrator.

    Example:
        >>> search = ProximitySearch(adapter, RingSearchDriver(), RefListLoader())
        >>> results = await search.search(key, Point(37.77, -122.41), 500.0, 10)
        >>> results.ids
    """

    def __init__(
        self,
        adapter: CellQueryAdapter,
        driver: SearchDriver,
        loader: EntityLoader,
    ):
        self.adapter = adapter
        self.driver = driver
        self.loader = loader

    async def search(
        self,
        key: LocationIndexKey,
        center: Point,
        max_distance: float,
        count: int,
        level: ResultLevel = ResultLevel.REFS,
        start_after: Optional[UUID] = None,
        reverse: bool = False,
        timeout: Optional[float] = None,
    ) -> SearchResults:
        """
        Entities of the index within max_distance meters of center.

        Args:
            key: Index row key prefix (owner, collection, property)
            center: Search center
            max_distance: Radius in meters (0 = unlimited)
            count: Maximum number of results, also the per-cell read limit
            level: Result level passed to hydration
            start_after: Resume cursor (entity id) for the cell reads
            reverse: Read cell columns in descending order
            timeout: Deadline in seconds for the cell scanning phase

        Returns:
            SearchResults from the loader; possibly empty, never raises for
            read-path faults
        """
        partial: List[LocationRecord] = []

        async def query(cells: List[str]) -> List[LocationRecord]:
            nonlocal partial
            records = await self.adapter.query_cells(
                key, cells, start_after=start_after, limit=count, reverse=reverse
            )
            partial = merge_location_entries(partial, records)
            return records

        locations: List[LocationRecord]
        try:
            async with asyncio.timeout(timeout):
                locations = await self.driver.proximity_search(center, count, max_distance, query)
        except TimeoutError:
            log.error(
                "Proximity search deadline exceeded, using partial candidates",
                timeout=timeout,
                partial=len(partial),
            )
            locations = self._rank_partial(center, partial, max_distance)
        except Exception as e:
            log.error(
                "Proximity search failed, using partial candidates",
                error=str(e),
                error_type=type(e).__name__,
                partial=len(partial),
            )
            locations = self._rank_partial(center, partial, max_distance)

        refs = [location.to_ref() for location in locations[:count]]
        results = await self.loader.load_entities(refs, level, count)

        log.info(
            f"proximity_search() - returned {len(results)} results",
            collection=key.collection_name,
            property=key.property_name,
            max_distance=max_distance,
        )
        return results

    @staticmethod
    def _rank_partial(
        center: Point,
        partial: List[LocationRecord],
        max_distance: float,
    ) -> List[LocationRecord]:
        """Partial candidates filtered and ordered the way the driver would."""
        return [record for _, record in rank_by_distance(center, partial, max_distance)]
