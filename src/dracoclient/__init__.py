"""dracoclient: game service client and binary object-graph codec

A Python client for the Draconius GO service-call API. Its core is a
self-describing tagged binary codec that turns argument lists built from
scalars, lists, dicts and declared records into call payloads, and turns
response payloads back into generic value trees.

Key Features:
- Pydantic-based request records with declared wire order
- Compact tagged encoding (varint integers, length-prefixed bytes)
- Descriptor-free decoding into safe, projectable wire values
- Swappable transports (httpx, in-memory mock)

Quick Start:
    >>> from dracoclient import decode, encode
    >>> from dracoclient.models import AuthData, AuthType
    >>>
    >>> data = encode([AuthData(auth_type=AuthType.DEVICE, profile_id="device-1"), "dv"])
    >>> value = decode(data)
    >>> value.project("0.profileId").as_text()
    'device-1'
"""

from __future__ import annotations

__version__ = "0.1.0"

from .client import DracoClient, User
from .codec import (
    NULL,
    RecordDescriptor,
    WireBool,
    WireBytes,
    WireFloat,
    WireInt,
    WireMapping,
    WireNull,
    WireRecord,
    WireSequence,
    WireValue,
    decode,
    decode_prefix,
    descriptor_for,
    encode,
    register_record,
    to_wire,
)
from .exceptions import (
    CallError,
    DecodeError,
    DracoError,
    EncodeError,
    FieldNotFound,
    MalformedValue,
    NestingTooDeep,
    ProjectionError,
    SchemaError,
    TransportError,
    TypeMismatch,
    UnexpectedEndOfBuffer,
    UnknownTag,
    UnsupportedValueKind,
    ValueOutOfRange,
)
from .models import BaseRecord
from .session import Session

__all__ = [
    # Core API
    "encode",
    "decode",
    "decode_prefix",
    "to_wire",
    # Wire values
    "WireValue",
    "WireNull",
    "WireBool",
    "WireInt",
    "WireFloat",
    "WireBytes",
    "WireSequence",
    "WireMapping",
    "WireRecord",
    "NULL",
    # Records
    "BaseRecord",
    "RecordDescriptor",
    "descriptor_for",
    "register_record",
    # Client
    "DracoClient",
    "User",
    "Session",
    # Exceptions
    "DracoError",
    "SchemaError",
    "EncodeError",
    "UnsupportedValueKind",
    "ValueOutOfRange",
    "NestingTooDeep",
    "DecodeError",
    "UnexpectedEndOfBuffer",
    "UnknownTag",
    "MalformedValue",
    "ProjectionError",
    "FieldNotFound",
    "TypeMismatch",
    "TransportError",
    "CallError",
    # Version
    "__version__",
]
