"""Binary encoder for host values and records.

This module provides the encode() function that converts an argument list,
a record instance or any nested combination of scalars, lists and dicts into
the tagged wire format.

Encoding runs in two passes. to_wire() walks the host value depth-first,
flattens records through their descriptors and rejects anything without a
wire representation, including nesting deeper than the decoder accepts.
Only once the whole tree is valid does the second pass write bytes, so a
failed encode never produces partial output.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel

from ..exceptions import EncodeError, NestingTooDeep, UnsupportedValueKind, ValueOutOfRange
from .buffer import ByteWriter
from .schema import FieldDescriptor, RecordDescriptor, descriptor_for
from .tags import DEFAULT_MAX_DEPTH, INT64_MAX, INT64_MIN, Tag, WireKind
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


def encode(value: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> bytes:
    """Encode a host value to the wire format.

    Args:
        value: Scalar, bytes, str, list/tuple, dict, record instance,
            WireValue, or any nesting of these
        max_depth: Maximum nesting of sequences, mappings and records;
            the default matches decode()

    Returns:
        Encoded bytes

    Raises:
        UnsupportedValueKind: If some part of value has no wire representation
        ValueOutOfRange: If an integer does not fit in 64 signed bits
        NestingTooDeep: If value nests more than max_depth containers
        EncodeError: If value contains a reference cycle

    Examples:
        ```python
        from dracoclient import encode
        from dracoclient.models import AuthData, AuthType

        # Event call arguments
        data = encode(["LoadingScreenPercent", user_id, client_info, "100", None, None, None, None])

        # A single record
        data = encode(AuthData(auth_type=AuthType.DEVICE, profile_id="device-1"))
        ```
    """
    wire = to_wire(value, max_depth=max_depth)
    writer = ByteWriter()
    _write_value(writer, wire)
    return writer.to_bytes()


def to_wire(value: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> WireValue:
    """Convert a host value to a WireValue tree without writing any bytes.

    Raises:
        UnsupportedValueKind: If some part of value has no wire representation
        ValueOutOfRange: If an integer does not fit in 64 signed bits
        NestingTooDeep: If value nests more than max_depth containers
        EncodeError: If value contains a reference cycle
    """
    return _to_wire(value, "$", set(), max_depth)


def _to_wire(value: Any, path: str, active: set[int], depth: int) -> WireValue:
    """Dispatch on the run-time type of value.

    Args:
        value: Host value
        path: Location of value inside the top-level value, for error messages
        active: ids of the containers currently being walked
        depth: Remaining nesting allowance
    """
    if isinstance(value, WireValue):
        _check_wire(value, path, depth)
        return value

    if value is None:
        return NULL

    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return WireBool(value)

    if isinstance(value, enum.Enum):
        return _to_wire(value.value, path, active, depth)

    if isinstance(value, int):
        return _int_to_wire(value, path)

    if isinstance(value, float):
        return WireFloat(value)

    if isinstance(value, str):
        return WireBytes.from_text(value)

    if isinstance(value, (bytes, bytearray, memoryview)):
        return WireBytes(bytes(value))

    if isinstance(value, BaseModel):
        descriptor = descriptor_for(value)
        if descriptor is None:
            raise UnsupportedValueKind(value, path)
        with _visiting(value, path, active, depth):
            return _record_to_wire(descriptor, value, path, active, depth - 1)

    if isinstance(value, (list, tuple)):
        with _visiting(value, path, active, depth):
            return WireSequence(
                tuple(
                    _to_wire(item, f"{path}[{i}]", active, depth - 1)
                    for i, item in enumerate(value)
                )
            )

    if isinstance(value, dict):
        with _visiting(value, path, active, depth):
            return WireMapping(
                tuple(
                    (
                        _to_wire(k, f"{path}<key {i}>", active, depth - 1),
                        _to_wire(v, f"{path}[{k!r}]", active, depth - 1),
                    )
                    for i, (k, v) in enumerate(value.items())
                )
            )

    raise UnsupportedValueKind(value, path)


class _visiting:
    """Marks a container as being walked; a second visit is a cycle."""

    def __init__(self, container: Any, path: str, active: set[int], depth: int) -> None:
        self._key = id(container)
        self._path = path
        self._active = active
        self._depth = depth

    def __enter__(self) -> None:
        _check_depth(self._depth, self._path)
        if self._key in self._active:
            raise EncodeError(f"Cyclic reference at {self._path}")
        self._active.add(self._key)

    def __exit__(self, *exc_info: Any) -> None:
        self._active.discard(self._key)


def _check_depth(depth: int, path: str) -> None:
    if depth <= 0:
        raise NestingTooDeep(f"Nesting too deep at {_shorten(path)}")


def _shorten(path: str, limit: int = 80) -> str:
    return path if len(path) <= limit else f"...{path[-limit:]}"


def _int_to_wire(value: int, path: str) -> WireInt:
    if value < INT64_MIN or value > INT64_MAX:
        raise ValueOutOfRange(f"Integer {value} at {path} does not fit in a signed 64-bit value")
    return WireInt(int(value))


def _record_to_wire(
    descriptor: RecordDescriptor, record: BaseModel, path: str, active: set[int], depth: int
) -> WireRecord:
    """Flatten a record in descriptor order.

    Every descriptor field is emitted; an absent or None value becomes Null.
    """
    fields = []
    for field in descriptor.fields:
        field_path = f"{path}.{field.wire_name}"
        value = getattr(record, field.name, None)
        fields.append((field.wire_name, _field_to_wire(field, value, field_path, active, depth)))
    return WireRecord(descriptor.type_id, tuple(fields))


def _field_to_wire(
    field: FieldDescriptor, value: Any, path: str, active: set[int], depth: int
) -> WireValue:
    """Encode a record field as the kind its descriptor declares.

    Raises:
        UnsupportedValueKind: If value cannot be represented as that kind
    """
    if value is None:
        return NULL

    kind = field.kind
    if kind is WireKind.ANY:
        return _to_wire(value, path, active, depth)

    if isinstance(value, enum.Enum):
        value = value.value

    if kind is WireKind.INT and isinstance(value, int) and not isinstance(value, bool):
        return _int_to_wire(value, path)

    # Integral values are widened when the field is declared as a double
    if kind is WireKind.FLOAT and isinstance(value, (int, float)) and not isinstance(value, bool):
        return WireFloat(float(value))

    wire = _to_wire(value, path, active, depth)
    if not _matches(kind, wire):
        raise UnsupportedValueKind(value, f"{path} (declared {kind.value})")
    return wire


def _matches(kind: WireKind, wire: WireValue) -> bool:
    return wire.kind is kind


def _check_wire(wire: WireValue, path: str, depth: int) -> None:
    """Range-check integers and nesting inside a caller-built WireValue tree."""
    if isinstance(wire, WireInt):
        _int_to_wire(wire.value, path)
    elif isinstance(wire, WireSequence):
        _check_depth(depth, path)
        for i, item in enumerate(wire.items):
            _check_wire(item, f"{path}[{i}]", depth - 1)
    elif isinstance(wire, WireMapping):
        _check_depth(depth, path)
        for i, (key, item) in enumerate(wire.pairs):
            _check_wire(key, f"{path}<key {i}>", depth - 1)
            _check_wire(item, f"{path}[{i}]", depth - 1)
    elif isinstance(wire, WireRecord):
        _check_depth(depth, path)
        for name, item in wire.fields:
            _check_wire(item, f"{path}.{name}", depth - 1)


# ============================================================================
# Serialization
# ============================================================================


def _write_value(writer: ByteWriter, wire: WireValue) -> None:
    """Write an already validated WireValue."""
    if isinstance(wire, WireNull):
        writer.write_tag(Tag.NULL)
    elif isinstance(wire, WireBool):
        writer.write_tag(Tag.TRUE if wire.value else Tag.FALSE)
    elif isinstance(wire, WireInt):
        writer.write_tag(Tag.INT)
        writer.write_svarint(wire.value)
    elif isinstance(wire, WireFloat):
        writer.write_tag(Tag.FLOAT)
        writer.write_double(wire.value)
    elif isinstance(wire, WireBytes):
        writer.write_tag(Tag.BYTES)
        writer.write_bytes(wire.value)
    elif isinstance(wire, WireSequence):
        writer.write_tag(Tag.SEQUENCE)
        writer.write_varint(len(wire.items))
        for item in wire.items:
            _write_value(writer, item)
    elif isinstance(wire, WireMapping):
        writer.write_tag(Tag.MAPPING)
        writer.write_varint(len(wire.pairs))
        for key, item in wire.pairs:
            _write_value(writer, key)
            _write_value(writer, item)
    elif isinstance(wire, WireRecord):
        writer.write_tag(Tag.RECORD)
        _write_text(writer, wire.type_id)
        writer.write_varint(len(wire.fields))
        for name, item in wire.fields:
            _write_text(writer, name)
            _write_value(writer, item)
    else:
        raise UnsupportedValueKind(wire)


def _write_text(writer: ByteWriter, text: str) -> None:
    """Write an identifier as a full BYTES value."""
    writer.write_tag(Tag.BYTES)
    writer.write_bytes(text.encode("utf-8"))


