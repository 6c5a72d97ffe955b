"""
Location Merge
==============

Combines LocationRecord lists read from different cells or replicas into one
list with a single, most recent record per entity.
"""

from typing import Dict, Iterable, List
from uuid import UUID

from geoindex.core.models import LocationRecord
from geoindex.core.versions import compare_versions


def merge_location_entries(
    primary: Iterable[LocationRecord],
    *others: Iterable[LocationRecord],
) -> List[LocationRecord]:
    """
    Merge record lists, keeping the newest version of each entity.

    An incoming record replaces the current winner only when its version_id
    is strictly newer. Output follows the order in which each entity was
    first seen across primary, then others in the order given.

    Example:
        >>> merged = merge_location_entries(cell_a, cell_b, cell_c)
    """
    merged: Dict[UUID, LocationRecord] = {}
    for records in (primary, *others):
        for record in records:
            current = merged.get(record.entity_id)
            if current is None or compare_versions(record.version_id, current.version_id) > 0:
                # dict keeps the first insertion slot on reassignment
                merged[record.entity_id] = record
    return list(merged.values())
