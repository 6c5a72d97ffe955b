"""
Location Index Codec
====================

Maps LocationRecords to index columns and back.

Column layout inside a geocell row:
    name        composite(entity_id, entity_type, version_id)
    value       composite(latitude, longitude)
    write_time  microseconds embedded in version_id

Names sort byte-wise, so every column of one entity is adjacent and, inside
that run, ordered by version (oldest first).
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional
from uuid import UUID

from geoindex.core.errors import CorruptIndexEntry
from geoindex.core.models import LocationRecord
from geoindex.core.versions import compare_versions, timestamp_micros

from .keys import decode_composite, encode_composite

# Greater than any component tag, so prefix + CURSOR_SUFFIX sorts after
# every column that starts with prefix.
CURSOR_SUFFIX = b"\xff"


@dataclass(frozen=True)
class Column:
    """A stored column as returned by a range read."""
    name: bytes
    value: bytes
    write_time: int = 0


@dataclass(frozen=True)
class IndexMutation:
    """One column insertion addressed at a row."""
    row_key: bytes
    name: bytes
    value: bytes
    write_time: int

    @property
    def column(self) -> Column:
        return Column(name=self.name, value=self.value, write_time=self.write_time)


def encode_entry(row_key: bytes, record: LocationRecord) -> IndexMutation:
    """Build the index column for record in the given row."""
    return IndexMutation(
        row_key=row_key,
        name=encode_composite((record.entity_id, record.entity_type, record.version_id)),
        value=encode_composite((float(record.latitude), float(record.longitude))),
        write_time=timestamp_micros(record.version_id),
    )


def decode_column(column: Column) -> LocationRecord:
    """
    Decode a single index column.

    Raises:
        CorruptIndexEntry: wrong arity, wrong component types or bad bytes
    """
    try:
        name_parts = decode_composite(column.name)
        value_parts = decode_composite(column.value)
    except CorruptIndexEntry as e:
        e.column_name = column.name
        raise

    if len(name_parts) != 3 or len(value_parts) != 2:
        raise CorruptIndexEntry(
            f"Unexpected arity name={len(name_parts)} value={len(value_parts)}",
            column_name=column.name,
        )
    entity_id, entity_type, version_id = name_parts
    latitude, longitude = value_parts
    if not (
        isinstance(entity_id, UUID)
        and isinstance(entity_type, str)
        and isinstance(version_id, UUID)
        and isinstance(latitude, float)
        and isinstance(longitude, float)
    ):
        raise CorruptIndexEntry("Unexpected component types", column_name=column.name)

    try:
        return LocationRecord(
            entity_id=entity_id,
            entity_type=entity_type,
            latitude=latitude,
            longitude=longitude,
            version_id=version_id,
        )
    except ValueError as e:
        raise CorruptIndexEntry(str(e), column_name=column.name) from e


def decode_columns(columns: Optional[Iterable[Column]]) -> List[LocationRecord]:
    """
    Decode a column stream sorted by name into LocationRecords.

    Adjacent columns of the same entity collapse to one record: the newest
    version in the run wins, which for an ascending stream is the last one
    seen. Repeats that are not adjacent are left for merge_location_entries.
    """
    entries: List[LocationRecord] = []
    if columns is None:
        return entries

    for column in columns:
        record = decode_column(column)
        if entries and entries[-1].entity_id == record.entity_id:
            if compare_versions(record.version_id, entries[-1].version_id) >= 0:
                entries[-1] = record
        else:
            entries.append(record)
    return entries


def entity_prefix(entity_id: UUID) -> bytes:
    """Leading bytes shared by every column name of entity_id."""
    return encode_composite((entity_id,))


def start_column_for(entity_id: UUID, reverse: bool = False) -> bytes:
    """
    Inclusive slice bound that resumes a scan after entity_id.

    Forward scans start strictly after every column of entity_id, reverse
    scans strictly before them.
    """
    prefix = entity_prefix(entity_id)
    return prefix if reverse else prefix + CURSOR_SUFFIX
