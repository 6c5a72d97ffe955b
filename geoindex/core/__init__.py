"""
GeoIndex Core
=============

Data model, version ids, errors and hydration contracts shared by every
layer.
"""

from geoindex.core.errors import (
    CellReadFailure,
    ConfigurationError,
    CorruptIndexEntry,
    GeoIndexError,
    InvalidCoordinateError,
    InvalidVersionError,
    SearchDriverFailure,
    WriteFailure,
)
from geoindex.core.hydration import EntityLoader, RefListLoader
from geoindex.core.models import EntityRef, LocationRecord, Point, ResultLevel, SearchResults
from geoindex.core.versions import compare_versions, new_time_uuid, timestamp_micros

__all__ = [
    # Models
    "EntityRef",
    "LocationRecord",
    "Point",
    "ResultLevel",
    "SearchResults",
    # Versions
    "compare_versions",
    "new_time_uuid",
    "timestamp_micros",
    # Hydration
    "EntityLoader",
    "RefListLoader",
    # Errors
    "GeoIndexError",
    "InvalidCoordinateError",
    "InvalidVersionError",
    "ConfigurationError",
    "CorruptIndexEntry",
    "CellReadFailure",
    "SearchDriverFailure",
    "WriteFailure",
]
