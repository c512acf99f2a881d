"""Byte-level writing and reading utilities.

This module provides the primitive encodings every wire value is built from:
tags, base-128 varints, zig-zag signed varints, big-endian doubles and
length-prefixed byte strings.
"""

from __future__ import annotations

import struct

from ..exceptions import MalformedValue, UnexpectedEndOfBuffer
from .tags import INT64_MAX, INT64_MIN, MAX_VARINT_BYTES, UINT64_MAX, zigzag_decode, zigzag_encode

_DOUBLE = struct.Struct(">d")


class ByteWriter:
    """Appends primitive encodings to a growing byte buffer.

    Example:
        >>> writer = ByteWriter()
        >>> writer.write_tag(Tag.INT)
        >>> writer.write_svarint(-3)
        >>> writer.to_bytes()
        b'\\x03\\x05'
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write_tag(self, tag: int) -> None:
        """Write a single tag byte."""
        self._buffer.append(tag)

    def write_varint(self, value: int) -> None:
        """Write an unsigned integer as LEB128.

        Args:
            value: Unsigned integer value to write (0 to 2**64 - 1)

        Raises:
            ValueError: If value is negative or wider than 64 bits
        """
        if value < 0:
            raise ValueError(f"write_varint requires non-negative value, got {value}")
        if value > UINT64_MAX:
            raise ValueError(f"Value {value} does not fit in 64 bits")

        while value > 0x7F:
            self._buffer.append((value & 0x7F) | 0x80)
            value >>= 7
        self._buffer.append(value)

    def write_svarint(self, value: int) -> None:
        """Write a signed 64-bit integer as a zig-zag varint.

        Raises:
            ValueError: If value is outside the signed 64-bit range
        """
        if value < INT64_MIN or value > INT64_MAX:
            raise ValueError(f"Value {value} does not fit in a signed 64-bit integer")
        self.write_varint(zigzag_encode(value))

    def write_double(self, value: float) -> None:
        """Write an IEEE-754 double (8 bytes, big-endian)."""
        self._buffer.extend(_DOUBLE.pack(value))

    def write_bytes(self, data: bytes) -> None:
        """Write a varint length prefix followed by the raw bytes."""
        self.write_varint(len(data))
        self._buffer.extend(data)

    def __len__(self) -> int:
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        """Return a copy of everything written so far."""
        return bytes(self._buffer)


class ByteReader:
    """Reads primitive encodings from a byte buffer with a moving cursor.

    Every read checks the remaining length first and raises
    UnexpectedEndOfBuffer instead of returning a short result.

    Example:
        >>> reader = ByteReader(b"\\x03\\x05")
        >>> reader.read_tag()
        3
        >>> reader.read_svarint()
        -3
    """

    def __init__(self, data: bytes, offset: int = 0) -> None:
        """Initialize a reader over data.

        Args:
            data: Byte buffer to read from
            offset: Position of the first byte to read
        """
        if offset < 0 or offset > len(data):
            raise ValueError(f"offset {offset} outside buffer of {len(data)} bytes")
        self._data = memoryview(bytes(data))
        self._position = offset

    @property
    def position(self) -> int:
        """Current read position in bytes."""
        return self._position

    def remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self._data) - self._position

    def _require(self, count: int) -> None:
        available = self.remaining()
        if count > available:
            raise UnexpectedEndOfBuffer(self._position, count, available)

    def read_tag(self) -> int:
        """Read a single tag byte."""
        self._require(1)
        tag = self._data[self._position]
        self._position += 1
        return tag

    def read_varint(self) -> int:
        """Read an unsigned LEB128 integer.

        Raises:
            UnexpectedEndOfBuffer: If the buffer ends inside the varint
            MalformedValue: If the varint is longer than 10 bytes or exceeds 64 bits
        """
        start = self._position
        result = 0
        shift = 0
        for _ in range(MAX_VARINT_BYTES):
            self._require(1)
            byte = self._data[self._position]
            self._position += 1
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                if result > UINT64_MAX:
                    raise MalformedValue(f"Varint at offset {start} exceeds 64 bits")
                return result
            shift += 7
        raise MalformedValue(f"Varint at offset {start} is longer than {MAX_VARINT_BYTES} bytes")

    def read_svarint(self) -> int:
        """Read a zig-zag encoded signed 64-bit integer."""
        return zigzag_decode(self.read_varint())

    def read_double(self) -> float:
        """Read an IEEE-754 double (8 bytes, big-endian)."""
        self._require(_DOUBLE.size)
        (value,) = _DOUBLE.unpack_from(self._data, self._position)
        self._position += _DOUBLE.size
        return value

    def read_bytes(self) -> bytes:
        """Read a varint length prefix and that many raw bytes."""
        length = self.read_varint()
        self._require(length)
        chunk = bytes(self._data[self._position : self._position + length])
        self._position += length
        return chunk
