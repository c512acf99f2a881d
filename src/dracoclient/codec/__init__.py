"""Self-describing binary codec for dracoclient.

This module provides encoding and decoding between host values and the
tagged wire format carried inside every service call.
"""

from __future__ import annotations

from .decoder import decode, decode_prefix
from .encoder import encode, to_wire
from .schema import (
    FieldDescriptor,
    RecordDescriptor,
    descriptor_for,
    register_record,
    registered_records,
)
from .tags import Tag, WireKind
from .values import (
    NULL,
    WireBool,
    WireBytes,
    WireFloat,
    WireInt,
    WireMapping,
    WireNull,
    WireRecord,
    WireSequence,
    WireValue,
)

__all__ = [
    "encode",
    "to_wire",
    "decode",
    "decode_prefix",
    "Tag",
    "WireKind",
    "FieldDescriptor",
    "RecordDescriptor",
    "descriptor_for",
    "register_record",
    "registered_records",
    "NULL",
    "WireValue",
    "WireNull",
    "WireBool",
    "WireInt",
    "WireFloat",
    "WireBytes",
    "WireSequence",
    "WireMapping",
    "WireRecord",
]
