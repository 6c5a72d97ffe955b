"""
Location Index
==============

Write path (fan-out), cell reads and proximity search.
"""

from geoindex.index.query import CellQueryAdapter
from geoindex.index.search import ProximitySearch
from geoindex.index.writer import LocationIndexWriter

__all__ = [
    "CellQueryAdapter",
    "LocationIndexWriter",
    "ProximitySearch",
]
