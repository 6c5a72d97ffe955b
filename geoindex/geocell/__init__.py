"""
Geocells
========

Grid-cell generation and ring-expanding proximity search over geohash cells.
"""

from geoindex.geocell.distance import haversine_distance
from geoindex.geocell.driver import CellQuery, RingSearchDriver, SearchDriver, rank_by_distance
from geoindex.geocell.generator import CellGenerator, GeohashCellGenerator

__all__ = [
    "CellGenerator",
    "GeohashCellGenerator",
    "CellQuery",
    "SearchDriver",
    "RingSearchDriver",
    "haversine_distance",
    "rank_by_distance",
]
