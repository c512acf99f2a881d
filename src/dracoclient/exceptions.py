"""Exception hierarchy for dracoclient.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from DracoError for easy catching of any dracoclient-specific error.
"""

from __future__ import annotations


class DracoError(Exception):
    """Base exception for all dracoclient errors."""

    pass


class SchemaError(DracoError):
    """Raised when a record declaration cannot be turned into a descriptor.

    Examples:
        - Unsupported field annotation (e.g. ``set[int]``)
        - Two record classes registered under the same type identifier
        - Empty type identifier
    """

    pass


class EncodeError(DracoError):
    """Raised when a host value cannot be encoded.

    Examples:
        - Cyclic list or dict
        - Record field value that does not match its declared kind
    """

    pass


class UnsupportedValueKind(EncodeError):
    """Raised when a value has no wire representation.

    The offending run-time type is kept in ``value_type``.
    """

    def __init__(self, value: object, context: str = "") -> None:
        self.value_type = type(value)
        where = f" at {context}" if context else ""
        super().__init__(f"Unsupported value kind {self.value_type.__name__}{where}")


class ValueOutOfRange(EncodeError):
    """Raised when an integer does not fit in a signed 64-bit value."""

    pass


class NestingTooDeep(EncodeError):
    """Raised when a value nests more containers than the decoder accepts."""

    pass


class DecodeError(DracoError):
    """Raised when decoding wire data fails.

    Examples:
        - Truncated data (a prefix claims more bytes than remain)
        - Unknown tag byte
        - Corrupted varint or non-UTF-8 record identifier
    """

    pass


class UnexpectedEndOfBuffer(DecodeError):
    """Raised when the buffer ends before a value is complete."""

    def __init__(self, offset: int, needed: int, available: int) -> None:
        self.offset = offset
        self.needed = needed
        self.available = available
        super().__init__(
            f"Unexpected end of buffer at offset {offset}: "
            f"need {needed} bytes, have {available}"
        )


class UnknownTag(DecodeError):
    """Raised when a tag byte is not part of the tag vocabulary."""

    def __init__(self, tag: int, offset: int) -> None:
        self.tag = tag
        self.offset = offset
        super().__init__(f"Unknown tag 0x{tag:02x} at offset {offset}")


class MalformedValue(DecodeError):
    """Raised when the bytes are framed correctly but describe an invalid value.

    Examples:
        - Varint longer than 10 bytes or wider than 64 bits
        - Record type identifier that is not a BYTES value
        - Trailing bytes after the top-level value
        - Nesting deeper than the decoder allows
    """

    pass


class ProjectionError(DracoError):
    """Raised when a decoded value does not have the shape the caller expects."""

    pass


class FieldNotFound(ProjectionError):
    """Raised when a record field or mapping key is missing."""

    def __init__(self, name: str, where: str = "") -> None:
        self.name = name
        suffix = f" in {where}" if where else ""
        super().__init__(f"Field {name!r} not found{suffix}")


class TypeMismatch(ProjectionError):
    """Raised when a value is projected as the wrong kind."""

    def __init__(self, expected: str, actual: str, path: str = "") -> None:
        self.expected = expected
        self.actual = actual
        at = f" at {path}" if path else ""
        super().__init__(f"Expected {expected}, got {actual}{at}")


class TransportError(DracoError):
    """Raised when the HTTP exchange fails (network error or non-2xx status)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class CallError(DracoError):
    """Raised when an RPC call fails.

    The underlying codec or transport error is chained as ``__cause__``.
    """

    def __init__(self, service: str, method: str, reason: str) -> None:
        self.service = service
        self.method = method
        super().__init__(f"{service}.{method} failed: {reason}")
