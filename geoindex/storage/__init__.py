"""
Storage Layer
=============

Index entries in a wide-column store.

    LocationRecord
          |
      [codec]  name = (entity_id, entity_type, version_id)
          |     value = (latitude, longitude)
          v
    row (owner, "locations", collection, property, geocell)
          |
    [ColumnStore]  InMemoryColumnStore | SQLColumnStore
          |
      range read -> decode_columns -> merge_location_entries
"""

from geoindex.storage.codec import Column, IndexMutation, decode_columns, encode_entry
from geoindex.storage.columns import (
    ColumnStore,
    InMemoryColumnStore,
    MutationBatch,
    SQLColumnStore,
    SQLStoreConfig,
)
from geoindex.storage.keys import LocationIndexKey, decode_composite, encode_composite
from geoindex.storage.merge import merge_location_entries

__all__ = [
    # Codec
    "Column",
    "IndexMutation",
    "encode_entry",
    "decode_columns",
    # Keys
    "LocationIndexKey",
    "encode_composite",
    "decode_composite",
    # Merge
    "merge_location_entries",
    # Stores
    "ColumnStore",
    "MutationBatch",
    "InMemoryColumnStore",
    "SQLColumnStore",
    "SQLStoreConfig",
]
