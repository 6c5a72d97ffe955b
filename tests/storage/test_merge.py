"""
Test Location Merge
===================

Recency-resolving merge of record lists.
"""

from uuid import uuid4

from geoindex.storage.merge import merge_location_entries


class TestMergeLocationEntries:
    def test_newer_version_wins_in_either_order(self, make_record):
        entity_id = uuid4()
        old = make_record(entity_id=entity_id, latitude=1.0)
        new = make_record(entity_id=entity_id, latitude=2.0)

        assert merge_location_entries([old], [new]) == [new]
        assert merge_location_entries([new], [old]) == [new]

    def test_equal_version_keeps_first(self, make_record):
        record = make_record()
        twin = type(record)(
            entity_id=record.entity_id,
            entity_type=record.entity_type,
            latitude=0.0,
            longitude=0.0,
            version_id=record.version_id,
        )
        assert merge_location_entries([record], [twin]) == [record]

    def test_first_appearance_order(self, make_record):
        a, b, c = make_record(), make_record(), make_record()
        b_newer = make_record(entity_id=b.entity_id)

        merged = merge_location_entries([a, b], [c, b_newer])

        assert [r.entity_id for r in merged] == [a.entity_id, b.entity_id, c.entity_id]
        assert merged[1] == b_newer

    def test_many_lists(self, make_record):
        entity_id = uuid4()
        versions = [make_record(entity_id=entity_id, latitude=float(i)) for i in range(5)]
        merged = merge_location_entries([versions[2]], [versions[0]], [versions[4]], [versions[1]])
        assert merged == [versions[4]]

    def test_idempotent(self, make_record):
        records = [make_record() for _ in range(4)]
        assert merge_location_entries(records, records) == records
        assert merge_location_entries(records) == records

    def test_duplicates_inside_primary_collapse_to_newest(self, make_record):
        entity_id = uuid4()
        old = make_record(entity_id=entity_id)
        new = make_record(entity_id=entity_id)
        other = make_record()
        assert merge_location_entries([new, other, old]) == [new, other]

    def test_empty_inputs(self, make_record):
        record = make_record()
        assert merge_location_entries([]) == []
        assert merge_location_entries([], [], []) == []
        assert merge_location_entries([], [record]) == [record]

    def test_inputs_not_mutated(self, make_record):
        primary = [make_record()]
        other = [make_record()]
        merge_location_entries(primary, other)
        assert len(primary) == 1
        assert len(other) == 1
