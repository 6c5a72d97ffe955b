"""
Test Location Index Codec
=========================

Encoding of records to index columns and decoding of column streams with
adjacency collapse.
"""

import struct
from uuid import uuid4

import pytest

from geoindex.core.errors import CorruptIndexEntry
from geoindex.core.versions import timestamp_micros
from geoindex.storage.codec import (
    Column,
    decode_column,
    decode_columns,
    encode_entry,
    start_column_for,
)
from geoindex.storage.keys import encode_composite

ROW = b"row-key"


def _column(record):
    return encode_entry(ROW, record).column


class TestEncodeEntry:
    def test_mutation_fields(self, make_record):
        record = make_record()
        mutation = encode_entry(ROW, record)
        assert mutation.row_key == ROW
        assert mutation.name == encode_composite((record.entity_id, record.entity_type, record.version_id))
        assert mutation.write_time == timestamp_micros(record.version_id)

    def test_deterministic(self, make_record):
        record = make_record()
        assert encode_entry(ROW, record) == encode_entry(ROW, record)

    def test_round_trip_is_exact(self, make_record):
        record = make_record(latitude=37.7749, longitude=-122.4194)
        decoded = decode_columns([_column(record)])
        assert len(decoded) == 1
        out = decoded[0]
        assert out.entity_id == record.entity_id
        assert out.entity_type == record.entity_type
        assert out.version_id == record.version_id
        assert struct.pack(">d", out.latitude) == struct.pack(">d", record.latitude)
        assert struct.pack(">d", out.longitude) == struct.pack(">d", record.longitude)


class TestDecodeColumns:
    def test_none_and_empty(self):
        assert decode_columns(None) == []
        assert decode_columns([]) == []

    def test_adjacent_versions_collapse_to_last(self, make_record):
        entity_id = uuid4()
        records = [
            make_record(entity_id=entity_id, latitude=10.0 + i, longitude=20.0 + i)
            for i in range(4)
        ]
        columns = sorted((_column(r) for r in records), key=lambda c: c.name)

        decoded = decode_columns(columns)

        assert len(decoded) == 1
        assert decoded[0].latitude == 13.0
        assert decoded[0].longitude == 23.0
        assert decoded[0].version_id == records[-1].version_id

    def test_descending_run_keeps_newest(self, make_record):
        entity_id = uuid4()
        old = make_record(entity_id=entity_id, latitude=1.0)
        new = make_record(entity_id=entity_id, latitude=2.0)
        columns = sorted((_column(old), _column(new)), key=lambda c: c.name, reverse=True)

        decoded = decode_columns(columns)

        assert decoded == [new]

    def test_distinct_entities_preserved_in_order(self, make_record):
        records = [make_record() for _ in range(3)]
        columns = sorted((_column(r) for r in records), key=lambda c: c.name)
        decoded = decode_columns(columns)
        assert [r.entity_id for r in decoded] == [
            r.entity_id for r in sorted(records, key=lambda r: encode_composite((r.entity_id,)))
        ]

    def test_non_adjacent_repeats_are_not_collapsed(self, make_record):
        a, b = uuid4(), uuid4()
        columns = [
            _column(make_record(entity_id=a)),
            _column(make_record(entity_id=b)),
            _column(make_record(entity_id=a)),
        ]
        decoded = decode_columns(columns)
        assert [r.entity_id for r in decoded] == [a, b, a]


class TestCorruptColumns:
    def test_wrong_name_arity(self, make_record):
        record = make_record()
        column = Column(
            name=encode_composite((record.entity_id, record.entity_type)),
            value=encode_composite((1.0, 2.0)),
        )
        with pytest.raises(CorruptIndexEntry, match="arity") as exc_info:
            decode_column(column)
        assert exc_info.value.column_name == column.name

    def test_wrong_value_type(self, make_record):
        record = make_record()
        column = Column(
            name=encode_composite((record.entity_id, record.entity_type, record.version_id)),
            value=encode_composite(("north", "east")),
        )
        with pytest.raises(CorruptIndexEntry, match="types"):
            decode_column(column)

    def test_garbage_bytes(self):
        with pytest.raises(CorruptIndexEntry):
            decode_columns([Column(name=b"\x01garbage", value=b"")])

    def test_out_of_range_coordinates(self, make_record):
        record = make_record()
        column = Column(
            name=encode_composite((record.entity_id, record.entity_type, record.version_id)),
            value=encode_composite((123.0, 0.0)),
        )
        with pytest.raises(CorruptIndexEntry):
            decode_column(column)

    def test_non_time_version(self, make_record):
        record = make_record()
        column = Column(
            name=encode_composite((record.entity_id, record.entity_type, uuid4())),
            value=encode_composite((1.0, 2.0)),
        )
        with pytest.raises(CorruptIndexEntry, match="time UUID"):
            decode_column(column)


class TestStartColumn:
    def test_forward_cursor_skips_entity(self, make_record):
        first, second = sorted(
            (make_record(), make_record()),
            key=lambda r: encode_composite((r.entity_id,)),
        )
        cursor = start_column_for(first.entity_id)
        assert _column(first).name < cursor <= _column(second).name

    def test_reverse_cursor_precedes_entity(self, make_record):
        first, second = sorted(
            (make_record(), make_record()),
            key=lambda r: encode_composite((r.entity_id,)),
        )
        cursor = start_column_for(second.entity_id, reverse=True)
        assert _column(first).name <= cursor < _column(second).name
