"""Binary decoder for wire payloads.

This module provides the decode() function that converts a fully buffered
response body back into a WireValue tree.

Decoding never consults a record descriptor: records come back as generic
WireRecord values carrying whatever type identifier and field names the
wire holds, so an unknown record type is not an error.
"""

from __future__ import annotations

from ..exceptions import MalformedValue, UnknownTag
from .buffer import ByteReader
from .tags import DEFAULT_MAX_DEPTH, KNOWN_TAGS, Tag
from .values import (
    NULL,
    WireBool,
    WireBytes,
    WireFloat,
    WireInt,
    WireMapping,
    WireRecord,
    WireSequence,
    WireValue,
)


def decode(data: bytes, *, max_depth: int = DEFAULT_MAX_DEPTH) -> WireValue:
    """Decode one top-level value that spans the whole buffer.

    Args:
        data: Response body, with any transport framing already removed
        max_depth: Maximum nesting of sequences, mappings and records

    Returns:
        Decoded WireValue

    Raises:
        UnexpectedEndOfBuffer: If a length or count claims more bytes than remain
        UnknownTag: If a tag byte is not part of the vocabulary
        MalformedValue: If the value is invalid or bytes remain after it

    Examples:
        ```python
        from dracoclient import decode

        result = decode(body)
        user_id = result.project("info.userId").as_text()
        ```
    """
    value, end = decode_prefix(data, max_depth=max_depth)
    if end != len(data):
        raise MalformedValue(f"{len(data) - end} trailing bytes after value ending at offset {end}")
    return value


def decode_prefix(
    data: bytes, offset: int = 0, *, max_depth: int = DEFAULT_MAX_DEPTH
) -> tuple[WireValue, int]:
    """Decode exactly one value starting at offset.

    Args:
        data: Buffer holding one or more encoded values
        offset: Position of the value's tag byte
        max_depth: Maximum nesting of sequences, mappings and records

    Returns:
        Tuple of (value, offset just past the value)

    Raises:
        UnexpectedEndOfBuffer, UnknownTag, MalformedValue: as for decode()

    Example:
        >>> first, end = decode_prefix(data)
        >>> second, end = decode_prefix(data, end)
    """
    reader = ByteReader(data, offset)
    value = _decode_value(reader, max_depth)
    return value, reader.position


def _decode_value(reader: ByteReader, depth: int) -> WireValue:
    """Read a tag and dispatch on it.

    Args:
        reader: ByteReader positioned at a tag byte
        depth: Remaining nesting allowance
    """
    offset = reader.position
    tag = reader.read_tag()
    if tag not in KNOWN_TAGS:
        raise UnknownTag(tag, offset)

    if tag == Tag.NULL:
        return NULL
    if tag == Tag.FALSE:
        return WireBool(False)
    if tag == Tag.TRUE:
        return WireBool(True)
    if tag == Tag.INT:
        return WireInt(reader.read_svarint())
    if tag == Tag.FLOAT:
        return WireFloat(reader.read_double())
    if tag == Tag.BYTES:
        return WireBytes(reader.read_bytes())

    # Containers
    if depth <= 0:
        raise MalformedValue(f"Nesting too deep at offset {offset}")

    if tag == Tag.SEQUENCE:
        count = reader.read_varint()
        items = []
        for _ in range(count):
            items.append(_decode_value(reader, depth - 1))
        return WireSequence(tuple(items))

    if tag == Tag.MAPPING:
        count = reader.read_varint()
        pairs = []
        for _ in range(count):
            key = _decode_value(reader, depth - 1)
            value = _decode_value(reader, depth - 1)
            pairs.append((key, value))
        return WireMapping(tuple(pairs))

    # Tag.RECORD
    type_id = _read_identifier(reader, "record type identifier")
    count = reader.read_varint()
    fields = []
    for _ in range(count):
        name = _read_identifier(reader, f"field name in {type_id}")
        fields.append((name, _decode_value(reader, depth - 1)))
    return WireRecord(type_id, tuple(fields))


def _read_identifier(reader: ByteReader, what: str) -> str:
    """Read a BYTES value holding a UTF-8 identifier.

    Raises:
        MalformedValue: If the value is not BYTES or not valid UTF-8
    """
    offset = reader.position
    tag = reader.read_tag()
    if tag != Tag.BYTES:
        if tag not in KNOWN_TAGS:
            raise UnknownTag(tag, offset)
        raise MalformedValue(f"Expected BYTES for {what} at offset {offset}, got {Tag(tag).name}")
    raw = reader.read_bytes()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedValue(f"Invalid UTF-8 in {what} at offset {offset}: {e}") from e
