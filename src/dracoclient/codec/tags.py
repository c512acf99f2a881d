"""Tag vocabulary for the wire format.

Every value on the wire starts with a one-byte tag followed by a
tag-specific payload:

==========  ====  ==================================================
Tag         Code  Payload
==========  ====  ==================================================
NULL        0x00  none
FALSE       0x01  none
TRUE        0x02  none
INT         0x03  zig-zag varint (signed 64-bit)
FLOAT       0x04  8 bytes, IEEE-754 double, big-endian
BYTES       0x05  varint length, raw bytes
SEQUENCE    0x06  varint count, values back-to-back
MAPPING     0x07  varint count, (key, value) pairs
RECORD      0x08  BYTES type id, varint field count, (BYTES field id, value) pairs
==========  ====  ==================================================

All varints are little-endian base-128 (LEB128). Signed integers are
zig-zag mapped first so small negative numbers stay short.
"""

from __future__ import annotations

import enum

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
UINT64_MAX = (1 << 64) - 1

# ceil(64 / 7)
MAX_VARINT_BYTES = 10

# Nested sequences, mappings and records allowed in one value, both directions
DEFAULT_MAX_DEPTH = 256


class Tag(enum.IntEnum):
    """One-byte type codes."""

    NULL = 0x00
    FALSE = 0x01
    TRUE = 0x02
    INT = 0x03
    FLOAT = 0x04
    BYTES = 0x05
    SEQUENCE = 0x06
    MAPPING = 0x07
    RECORD = 0x08


class WireKind(enum.Enum):
    """Logical value kinds, as declared by record fields.

    ``ANY`` means the kind is taken from the run-time value.
    """

    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    BYTES = "bytes"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    RECORD = "record"
    ANY = "any"


KNOWN_TAGS = frozenset(int(tag) for tag in Tag)


def zigzag_encode(value: int) -> int:
    """Map a signed 64-bit integer onto an unsigned one.

    0 -> 0, -1 -> 1, 1 -> 2, -2 -> 3, ...
    """
    return ((value << 1) ^ (value >> 63)) & UINT64_MAX


def zigzag_decode(value: int) -> int:
    """Inverse of zigzag_encode()."""
    return (value >> 1) ^ -(value & 1)
