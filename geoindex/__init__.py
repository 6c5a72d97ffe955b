"""
GeoIndex: geospatial secondary index over a wide-column store
=============================================================

Entities with a latitude/longitude are indexed into hierarchical geocells;
proximity queries expand outward through those cells and merge what they
read into one current record per entity.

Quick Start:
    from geoindex import GeoIndexManager, LocationRecord, Point
    from geoindex.storage import InMemoryColumnStore

    geo = GeoIndexManager(InMemoryColumnStore())

    await geo.store_location(
        owner_id, "users", "location",
        LocationRecord(entity_id=user_id, entity_type="user",
                       latitude=37.7749, longitude=-122.4194),
    )

    results = await geo.proximity_search_collection(
        owner_id, "users", "location",
        center=Point(37.7749, -122.4194), max_distance=500.0, count=10,
    )
    print(results.ids)

Components:
- core: LocationRecord, Point, EntityRef, SearchResults, errors, versions
- storage: composite keys, codec, merge, column stores
- geocell: geohash cells, ring-expanding search driver
- index: LocationIndexWriter, CellQueryAdapter, ProximitySearch
"""

__version__ = "0.1.0"

from geoindex.core import (
    CellReadFailure,
    CorruptIndexEntry,
    EntityRef,
    GeoIndexError,
    InvalidVersionError,
    LocationRecord,
    Point,
    ResultLevel,
    SearchDriverFailure,
    SearchResults,
    WriteFailure,
    new_time_uuid,
)
from geoindex.manager import GeoIndexManager

__all__ = [
    "GeoIndexManager",
    # Models
    "LocationRecord",
    "Point",
    "EntityRef",
    "ResultLevel",
    "SearchResults",
    "new_time_uuid",
    # Errors
    "GeoIndexError",
    "InvalidVersionError",
    "CorruptIndexEntry",
    "CellReadFailure",
    "SearchDriverFailure",
    "WriteFailure",
]
