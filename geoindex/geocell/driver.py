"""
Expanding Proximity Search
==========================

Ring-expansion policy for proximity queries over hierarchical geocells.

Algorithm:
1. Start at the finest resolution with the cell containing the center and
   its eight neighbours (the "ring").
2. Read the ring through the query callback, merge with earlier candidates,
   rank by distance and drop anything beyond max_distance.
3. Stop when `count` candidates lie inside the radius the ring is guaranteed
   to cover, or when that radius already reaches max_distance.
4. Otherwise climb one resolution (cells 32x larger) and repeat, down to
   resolution 1.
"""

import math
from typing import Awaitable, Callable, List, Protocol, Sequence, Set, Tuple

import structlog

from geoindex.core.errors import SearchDriverFailure
from geoindex.core.models import LocationRecord, Point
from geoindex.storage.merge import merge_location_entries

from . import geohash
from .distance import haversine_distance

log = structlog.get_logger()

CellQuery = Callable[[List[str]], Awaitable[List[LocationRecord]]]


def rank_by_distance(
    center: Point,
    records: Sequence[LocationRecord],
    max_distance: float,
) -> List[Tuple[float, LocationRecord]]:
    """
    (distance, record) pairs nearest first, dropping records beyond
    max_distance meters (0 = unlimited).
    """
    scored = [(haversine_distance(center, r.point), r) for r in records]
    if max_distance > 0:
        scored = [(d, r) for d, r in scored if d <= max_distance]
    scored.sort(key=lambda item: item[0])
    return scored


class SearchDriver(Protocol):
    """Owns ring expansion and termination; reads cells through `query`."""

    async def proximity_search(
        self,
        center: Point,
        count: int,
        max_distance: float,
        query: CellQuery,
    ) -> List[LocationRecord]:
        ...


class RingSearchDriver:
    """
    Geohash ring-expansion driver.

    Args:
        max_resolution: Finest resolution searched; must not exceed the
                        resolution locations were written at
        min_resolution: Coarsest resolution searched
    """

    def __init__(self, max_resolution: int = 8, min_resolution: int = 1):
        if not 1 <= min_resolution <= max_resolution <= geohash.MAX_PRECISION:
            raise ValueError(
                f"Invalid resolution range [{min_resolution}, {max_resolution}]"
            )
        self.max_resolution = max_resolution
        self.min_resolution = min_resolution

    async def proximity_search(
        self,
        center: Point,
        count: int,
        max_distance: float,
        query: CellQuery,
    ) -> List[LocationRecord]:
        """
        Find up to `count` records nearest to center.

        Args:
            center: Search center
            count: Number of records wanted
            max_distance: Radius in meters; 0 means unlimited
            query: Async callback reading a list of cell tokens

        Returns:
            Records sorted by ascending distance from center

        Raises:
            SearchDriverFailure: on invalid arguments
        """
        if count <= 0:
            raise SearchDriverFailure(f"count must be positive, got {count}")
        if max_distance < 0 or math.isnan(max_distance):
            raise SearchDriverFailure(f"max_distance must be >= 0, got {max_distance}")

        candidates: List[LocationRecord] = []
        ranked: List[Tuple[float, LocationRecord]] = []
        searched: Set[str] = set()

        for resolution in range(self.max_resolution, self.min_resolution - 1, -1):
            cell = geohash.encode(center.latitude, center.longitude, resolution)
            ring = [c for c in [cell] + geohash.neighbors(cell) if c not in searched]
            if ring:
                found = await query(ring)
                searched.update(ring)
                candidates = merge_location_entries(candidates, found)

            ranked = rank_by_distance(center, candidates, max_distance)
            covered = self._covered_radius(center, resolution)

            log.debug(
                "Search ring complete",
                resolution=resolution,
                cells=len(ring),
                candidates=len(ranked),
                covered_m=round(covered, 1),
            )

            if len(ranked) >= count and ranked[count - 1][0] <= covered:
                break
            if max_distance > 0 and covered >= max_distance:
                break

        return [record for _, record in ranked[:count]]

    @staticmethod
    def _covered_radius(center: Point, resolution: int) -> float:
        """
        Radius around center fully inside the ring: at least one cell in
        every direction, measured where the cell is narrowest.
        """
        height_deg, _ = geohash.cell_dimensions(resolution)
        farthest_lat = min(90.0, abs(center.latitude) + 1.5 * height_deg)
        height_m, width_m = geohash.cell_size_meters(resolution, farthest_lat)
        return min(height_m, width_m)
