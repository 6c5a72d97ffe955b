"""
Composite Keys
==============

Versioned serialization for composite row keys and column names.

Format v1:
    [0x01] then, per component:
    [tag: 1 byte][length: 2 bytes big-endian][payload][0x00]

Tags:
    u  UUID, 16 raw bytes
    t  time UUID, 60-bit timestamp big-endian first, then clock_seq and node,
       so byte order equals time order
    s  UTF-8 string
    d  float64, IEEE-754 big-endian (bit exact)
    i  int64, signed big-endian

Components are self-delimiting, so the encoding of a component list is a
byte prefix of the encoding of any longer list that starts with it. Columns
sharing a leading component therefore sort adjacently.
"""

import struct
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple, Union
from uuid import UUID

from geoindex.core.errors import CorruptIndexEntry

FORMAT_VERSION = 1
END_OF_COMPONENT = b"\x00"

TAG_UUID = b"u"
TAG_TIME_UUID = b"t"
TAG_STRING = b"s"
TAG_DOUBLE = b"d"
TAG_INT = b"i"

_HEADER = bytes([FORMAT_VERSION])
_MAX_COMPONENT_LENGTH = 0xFFFF

Component = Union[UUID, str, float, int]


def _time_uuid_bytes(value: UUID) -> bytes:
    tail = struct.pack(">BB", value.clock_seq_hi_variant, value.clock_seq_low)
    return struct.pack(">Q", value.time) + tail + value.node.to_bytes(6, "big")


def _time_uuid_from_bytes(payload: bytes) -> UUID:
    (timestamp,) = struct.unpack(">Q", payload[:8])
    clock_seq_hi_variant, clock_seq_low = payload[8], payload[9]
    node = int.from_bytes(payload[10:16], "big")
    return UUID(fields=(
        timestamp & 0xFFFFFFFF,
        (timestamp >> 32) & 0xFFFF,
        ((timestamp >> 48) & 0x0FFF) | 0x1000,
        clock_seq_hi_variant,
        clock_seq_low,
        node,
    ))


def _encode_component(value: Component) -> bytes:
    # bool is an int subclass; refuse it rather than store 0/1
    if isinstance(value, bool):
        raise TypeError("bool is not a supported composite component")
    if isinstance(value, UUID):
        if value.version == 1:
            tag, payload = TAG_TIME_UUID, _time_uuid_bytes(value)
        else:
            tag, payload = TAG_UUID, value.bytes
    elif isinstance(value, str):
        tag, payload = TAG_STRING, value.encode("utf-8")
    elif isinstance(value, float):
        tag, payload = TAG_DOUBLE, struct.pack(">d", value)
    elif isinstance(value, int):
        tag, payload = TAG_INT, struct.pack(">q", value)
    else:
        raise TypeError(f"Unsupported composite component: {type(value).__name__}")

    if len(payload) > _MAX_COMPONENT_LENGTH:
        raise ValueError(f"Composite component too long ({len(payload)} bytes)")
    return tag + struct.pack(">H", len(payload)) + payload + END_OF_COMPONENT


def _decode_payload(tag: bytes, payload: bytes) -> Component:
    if tag == TAG_UUID:
        if len(payload) != 16:
            raise CorruptIndexEntry(f"UUID component has {len(payload)} bytes")
        return UUID(bytes=payload)
    if tag == TAG_TIME_UUID:
        if len(payload) != 16:
            raise CorruptIndexEntry(f"Time UUID component has {len(payload)} bytes")
        return _time_uuid_from_bytes(payload)
    if tag == TAG_STRING:
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptIndexEntry(f"Invalid UTF-8 in string component: {e}") from e
    if tag == TAG_DOUBLE:
        if len(payload) != 8:
            raise CorruptIndexEntry(f"Double component has {len(payload)} bytes")
        return struct.unpack(">d", payload)[0]
    if tag == TAG_INT:
        if len(payload) != 8:
            raise CorruptIndexEntry(f"Int component has {len(payload)} bytes")
        return struct.unpack(">q", payload)[0]
    raise CorruptIndexEntry(f"Unknown component tag {tag!r}")


def encode_composite(components: Sequence[Component]) -> bytes:
    """Serialize components into a composite key."""
    return _HEADER + b"".join(_encode_component(c) for c in components)


def decode_composite(data: bytes) -> List[Component]:
    """
    Parse a composite key back into its components.

    Raises:
        CorruptIndexEntry: on unknown format version, unknown tag, truncated
                           data or missing end-of-component marker
    """
    if not data:
        raise CorruptIndexEntry("Empty composite")
    if data[0] != FORMAT_VERSION:
        raise CorruptIndexEntry(f"Unsupported composite format version {data[0]}")

    components: List[Component] = []
    pos = 1
    while pos < len(data):
        if pos + 3 > len(data):
            raise CorruptIndexEntry("Truncated component header")
        tag = data[pos:pos + 1]
        (length,) = struct.unpack(">H", data[pos + 1:pos + 3])
        start = pos + 3
        end = start + length
        if end + 1 > len(data):
            raise CorruptIndexEntry("Truncated component payload")
        if data[end:end + 1] != END_OF_COMPONENT:
            raise CorruptIndexEntry("Missing end-of-component marker")
        components.append(_decode_payload(tag, data[start:end]))
        pos = end + 1
    return components


@dataclass(frozen=True)
class LocationIndexKey:
    """
    Row key prefix of a location index: one per (owner, collection, property).

    The full row key adds the geocell token:
        (owner_id, namespace, collection_name, property_name, cell)
    """
    owner_id: UUID
    collection_name: str
    property_name: str
    namespace: str = "locations"

    def components(self) -> Tuple[Any, ...]:
        return (self.owner_id, self.namespace, self.collection_name, self.property_name)

    def row_key(self, cell: str) -> bytes:
        """Serialized row key for one geocell."""
        return encode_composite(self.components() + (cell,))

    @classmethod
    def parse_row_key(cls, data: bytes) -> Tuple["LocationIndexKey", str]:
        """Inverse of row_key(); returns the key and the cell token."""
        parts = decode_composite(data)
        if len(parts) != 5:
            raise CorruptIndexEntry(f"Row key has {len(parts)} components, expected 5")
        owner_id, namespace, collection_name, property_name, cell = parts
        if not isinstance(owner_id, UUID) or not all(
            isinstance(p, str) for p in (namespace, collection_name, property_name, cell)
        ):
            raise CorruptIndexEntry("Row key components have unexpected types")
        key = cls(
            owner_id=owner_id,
            collection_name=collection_name,
            property_name=property_name,
            namespace=namespace,
        )
        return key, cell
