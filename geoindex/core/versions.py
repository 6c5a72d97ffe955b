"""
Time-ordered Versions
=====================

Version ids are version-1 (time based) UUIDs. They order successive location
updates of the same entity and carry the write timestamp used by the store.
"""

import random
import uuid
from uuid import UUID

# Offset between the UUID epoch (1582-10-15) and the Unix epoch, in 100ns units
UUID_EPOCH_OFFSET = 0x01B21DD213814000

# Fixed per process; passing it makes uuid1() bump repeated timestamps
_CLOCK_SEQ = random.getrandbits(14)


def new_time_uuid() -> UUID:
    """Return a new time-based UUID (timestamps strictly increase within the process)."""
    return uuid.uuid1(clock_seq=_CLOCK_SEQ)


def is_time_uuid(value: UUID) -> bool:
    return value.version == 1


def timestamp_micros(version_id: UUID) -> int:
    """
    Extract the Unix timestamp in microseconds embedded in a time UUID.

    Raises:
        ValueError: if version_id is not a version-1 UUID
    """
    if not is_time_uuid(version_id):
        raise ValueError(f"Not a time-based UUID: {version_id}")
    return (version_id.time - UUID_EPOCH_OFFSET) // 10


def compare_versions(a: UUID, b: UUID) -> int:
    """
    Compare two version ids by recency.

    Time UUIDs compare by embedded timestamp, then by clock sequence and node
    so that distinct ids never compare equal. Anything else falls back to raw
    byte order.

    Returns:
        negative if a is older than b, 0 if equal, positive if a is newer
    """
    if a == b:
        return 0
    if is_time_uuid(a) and is_time_uuid(b):
        key_a = (a.time, a.clock_seq, a.node)
        key_b = (b.time, b.clock_seq, b.node)
    else:
        key_a = a.bytes
        key_b = b.bytes
    return (key_a > key_b) - (key_a < key_b)
