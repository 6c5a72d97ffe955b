"""
Grid-cell Generation
====================

Covering cells written for one location. A location is indexed at every
resolution from 1 to the configured maximum, so a search at any resolution
finds it by reading a single row per cell.
"""

from typing import List, Protocol, Sequence

from geoindex.core.models import Point

from . import geohash


class CellGenerator(Protocol):
    """Pure mapping from a point to the cell tokens covering it."""

    def cells_for(self, point: Point, resolution: int) -> Sequence[str]:
        ...


class GeohashCellGenerator:
    """
    Geohash cells of a point, coarsest first.

    Example:
        >>> GeohashCellGenerator().cells_for(Point(37.7749, -122.4194), 3)
        ['9', '9q', '9q8']
    """

    def cells_for(self, point: Point, resolution: int) -> List[str]:
        if not 1 <= resolution <= geohash.MAX_PRECISION:
            raise ValueError(
                f"resolution must be in [1, {geohash.MAX_PRECISION}], got {resolution}"
            )
        finest = geohash.encode(point.latitude, point.longitude, resolution)
        return [finest[:n] for n in range(1, resolution + 1)]
