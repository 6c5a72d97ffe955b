"""
Geo Index Manager
=================

Entry point that wires the location index components together:
- ColumnStore (in-memory or SQL)
- LocationIndexWriter (fan-out writes)
- CellQueryAdapter + ProximitySearch (reads)
- Grid-cell generator, search driver and hydration loader

Usage:
    from geoindex import GeoIndexManager, LocationRecord, Point
    from geoindex.storage import SQLStoreConfig

    async with await GeoIndexManager.connect(SQLStoreConfig.for_test()) as geo:
        await geo.store_location(owner_id, "users", "location", record)
        results = await geo.proximity_search_collection(
            owner_id, "users", "location",
            center=Point(37.7749, -122.4194),
            max_distance=1000.0,
            count=10,
        )
"""

from typing import List, Optional
from uuid import UUID

import structlog

from geoindex.config.settings import GeoIndexSettings, load_settings
from geoindex.core.hydration import EntityLoader, RefListLoader
from geoindex.core.models import LocationRecord, Point, ResultLevel, SearchResults
from geoindex.geocell.driver import RingSearchDriver, SearchDriver
from geoindex.geocell.generator import CellGenerator, GeohashCellGenerator
from geoindex.index.query import CellQueryAdapter
from geoindex.index.search import ProximitySearch
from geoindex.index.writer import LocationIndexWriter
from geoindex.storage.columns.base import ColumnStore
from geoindex.storage.columns.config import SQLStoreConfig
from geoindex.storage.columns.sql import SQLColumnStore
from geoindex.storage.keys import LocationIndexKey

log = structlog.get_logger()


class GeoIndexManager:
    """
    Stores entity locations and answers proximity searches.

    The manager does not own a store passed to its constructor; stores it
    opened itself through connect() are closed by close().
    """

    def __init__(
        self,
        store: ColumnStore,
        settings: Optional[GeoIndexSettings] = None,
        cell_generator: Optional[CellGenerator] = None,
        driver: Optional[SearchDriver] = None,
        loader: Optional[EntityLoader] = None,
    ):
        self.store = store
        self.settings = settings or GeoIndexSettings()
        self.cell_generator = cell_generator or GeohashCellGenerator()
        self.driver = driver or RingSearchDriver(max_resolution=self.settings.max_resolution)
        self.loader = loader or RefListLoader()
        self._owns_store = False

        self.writer = LocationIndexWriter(
            store,
            self.cell_generator,
            max_resolution=self.settings.max_resolution,
            retry_count=self.settings.write_retry_count,
            namespace=self.settings.namespace,
        )
        self.adapter = CellQueryAdapter(
            store,
            default_limit=self.settings.query_limit,
            read_concurrency=self.settings.read_concurrency,
        )
        self.searcher = ProximitySearch(self.adapter, self.driver, self.loader)

        log.info(
            f"GeoIndexManager initialized - "
            f"store={type(store).__name__}, "
            f"max_resolution={self.settings.max_resolution}, "
            f"retries={self.settings.write_retry_count}"
        )

    @classmethod
    async def connect(
        cls,
        config: Optional[SQLStoreConfig] = None,
        settings: Optional[GeoIndexSettings] = None,
        create_table: bool = True,
        **kwargs,
    ) -> "GeoIndexManager":
        """Open an SQLColumnStore and build a manager owning it."""
        settings = settings or load_settings()
        store = SQLColumnStore(config, retry_delay=settings.retry_delay)
        await store.connect()
        if create_table:
            await store.ensure_table_exists()

        manager = cls(store, settings=settings, **kwargs)
        manager._owns_store = True
        return manager

    async def close(self):
        if self._owns_store:
            await self.store.close()

    async def __aenter__(self) -> "GeoIndexManager":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def index_key(self, owner_id: UUID, collection_name: str, property_name: str) -> LocationIndexKey:
        return LocationIndexKey(
            owner_id=owner_id,
            collection_name=collection_name,
            property_name=property_name,
            namespace=self.settings.namespace,
        )

    async def store_location(
        self,
        owner_id: UUID,
        collection_name: str,
        property_name: str,
        location: LocationRecord,
        timeout: Optional[float] = None,
    ) -> List[str]:
        """
        Index a location of an entity in a collection.

        Returns:
            Cell tokens written

        Raises:
            WriteFailure: if the batch could not be written
        """
        return await self.writer.store(
            owner_id, collection_name, property_name, location, timeout=timeout
        )

    async def proximity_search_collection(
        self,
        owner_id: UUID,
        collection_name: str,
        property_name: str,
        center: Point,
        max_distance: float,
        count: int,
        level: ResultLevel = ResultLevel.REFS,
        start_after: Optional[UUID] = None,
        reverse: bool = False,
        timeout: Optional[float] = None,
    ) -> SearchResults:
        """
        Entities of a collection within max_distance meters of center.

        Never raises for read-path faults; degraded reads return fewer
        results.
        """
        key = self.index_key(owner_id, collection_name, property_name)
        return await self.searcher.search(
            key,
            center,
            max_distance,
            count,
            level=level,
            start_after=start_after,
            reverse=reverse,
            timeout=timeout,
        )
