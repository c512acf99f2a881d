"""Wire values: the decoder's output and the encoder's input.

A wire value is a small immutable tree. Callers that receive one from
decode() project it into the shape they expect through the ``as_*``
accessors, record field lookups or a dotted path::

    >>> result = decode(body)
    >>> result.project("info.userId").as_text()
    'abc123'

Every accessor fails with a ProjectionError subclass instead of returning
a value of the wrong kind.
"""

from __future__ import annotations

import struct
from collections import Counter
from dataclasses import dataclass
from typing import Any, ClassVar, Iterator, Union

from ..exceptions import FieldNotFound, TypeMismatch
from .tags import WireKind

HostKey = Union["WireValue", str, bytes, int, bool, None]


class WireValue:
    """Base class for every wire value."""

    kind: ClassVar[WireKind]

    def _mismatch(self, expected: str) -> TypeMismatch:
        return TypeMismatch(expected, self.kind.value)

    def is_null(self) -> bool:
        return False

    def as_bool(self) -> bool:
        raise self._mismatch("bool")

    def as_int(self) -> int:
        raise self._mismatch("int")

    def as_float(self) -> float:
        raise self._mismatch("float")

    def as_bytes(self) -> bytes:
        raise self._mismatch("bytes")

    def as_text(self) -> str:
        raise self._mismatch("bytes")

    def as_sequence(self) -> WireSequence:
        raise self._mismatch("sequence")

    def as_mapping(self) -> WireMapping:
        raise self._mismatch("mapping")

    def as_record(self) -> WireRecord:
        raise self._mismatch("record")

    def project(self, path: str) -> WireValue:
        """Follow a dotted path through records, mappings and sequences.

        Each segment names a record field, a text key of a mapping, or an
        integer index into a sequence.

        Args:
            path: Dotted path such as ``"info.userId"`` or ``"creatures.0.name"``

        Returns:
            The value at the end of the path

        Raises:
            FieldNotFound: If a field, key or index does not exist
            TypeMismatch: If a segment meets a scalar value
        """
        current: WireValue = self
        walked: list[str] = []
        for segment in path.split("."):
            where = ".".join(walked) or "<root>"
            if isinstance(current, WireRecord):
                found = current.get_field(segment)
                if found is None:
                    raise FieldNotFound(segment, f"{current.type_id} at {where}")
                current = found
            elif isinstance(current, WireMapping):
                found = current.get(segment)
                if found is None:
                    raise FieldNotFound(segment, f"mapping at {where}")
                current = found
            elif isinstance(current, WireSequence):
                try:
                    index = int(segment)
                except ValueError:
                    raise TypeMismatch("integer index", repr(segment), where) from None
                if not -len(current.items) <= index < len(current.items):
                    raise FieldNotFound(segment, f"sequence of {len(current.items)} at {where}")
                current = current.items[index]
            else:
                raise TypeMismatch("record, mapping or sequence", current.kind.value, where)
            walked.append(segment)
        return current

    def to_python(self) -> Any:
        """Convert to plain Python data.

        Bytes stay ``bytes``; mappings become lists of ``(key, value)``
        tuples because wire keys need not be hashable or unique; records
        become dicts with the type identifier under ``"__type__"``.
        """
        raise NotImplementedError


@dataclass(frozen=True)
class WireNull(WireValue):
    kind: ClassVar[WireKind] = WireKind.NULL

    def is_null(self) -> bool:
        return True

    def to_python(self) -> None:
        return None


NULL = WireNull()


@dataclass(frozen=True)
class WireBool(WireValue):
    value: bool
    kind: ClassVar[WireKind] = WireKind.BOOL

    def as_bool(self) -> bool:
        return self.value

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True)
class WireInt(WireValue):
    """Signed 64-bit integer."""

    value: int
    kind: ClassVar[WireKind] = WireKind.INT

    def as_int(self) -> int:
        return self.value

    def to_python(self) -> int:
        return self.value


@dataclass(frozen=True, eq=False)
class WireFloat(WireValue):
    """IEEE-754 double.

    Equality and hashing compare the 8-byte wire form, so NaN equals a NaN
    with the same bits and 0.0 differs from -0.0.
    """

    value: float
    kind: ClassVar[WireKind] = WireKind.FLOAT

    def _bits(self) -> bytes:
        return struct.pack(">d", self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WireFloat):
            return NotImplemented
        return self._bits() == other._bits()

    def __hash__(self) -> int:
        return hash(self._bits())

    def as_float(self) -> float:
        return self.value

    def to_python(self) -> float:
        return self.value


@dataclass(frozen=True)
class WireBytes(WireValue):
    """Opaque bytes; text travels as UTF-8 bytes."""

    value: bytes
    kind: ClassVar[WireKind] = WireKind.BYTES

    @classmethod
    def from_text(cls, text: str) -> WireBytes:
        return cls(text.encode("utf-8"))

    def as_bytes(self) -> bytes:
        return self.value

    def as_text(self) -> str:
        try:
            return self.value.decode("utf-8")
        except UnicodeDecodeError:
            raise TypeMismatch("UTF-8 text", "binary bytes") from None

    def to_python(self) -> bytes:
        return self.value


@dataclass(frozen=True)
class WireSequence(WireValue):
    """Ordered list of values; duplicates allowed."""

    items: tuple[WireValue, ...] = ()
    kind: ClassVar[WireKind] = WireKind.SEQUENCE

    def as_sequence(self) -> WireSequence:
        return self

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[WireValue]:
        return iter(self.items)

    def __getitem__(self, index: int) -> WireValue:
        return self.items[index]

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]


def _coerce_key(key: HostKey) -> WireValue:
    if isinstance(key, WireValue):
        return key
    if key is None:
        return NULL
    if isinstance(key, bool):
        return WireBool(key)
    if isinstance(key, int):
        return WireInt(key)
    if isinstance(key, str):
        return WireBytes.from_text(key)
    if isinstance(key, (bytes, bytearray)):
        return WireBytes(bytes(key))
    raise TypeMismatch("str, bytes, int, bool, None or WireValue key", type(key).__name__)


@dataclass(frozen=True, eq=False)
class WireMapping(WireValue):
    """Key/value pairs in read order.

    Duplicate keys are kept. Equality ignores pair order but not how many
    times a pair occurs.
    """

    pairs: tuple[tuple[WireValue, WireValue], ...] = ()
    kind: ClassVar[WireKind] = WireKind.MAPPING

    def as_mapping(self) -> WireMapping:
        return self

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[tuple[WireValue, WireValue]]:
        return iter(self.pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WireMapping):
            return NotImplemented
        return Counter(self.pairs) == Counter(other.pairs)

    def __hash__(self) -> int:
        return hash(frozenset(self.pairs))

    def keys(self) -> list[WireValue]:
        return [key for key, _ in self.pairs]

    def get_all(self, key: HostKey) -> list[WireValue]:
        """Return every value stored under key, in read order."""
        wanted = _coerce_key(key)
        return [value for k, value in self.pairs if k == wanted]

    def get(self, key: HostKey) -> WireValue | None:
        """Return the value of the last pair stored under key, or None."""
        matches = self.get_all(key)
        return matches[-1] if matches else None

    def to_python(self) -> list[tuple[Any, Any]]:
        return [(key.to_python(), value.to_python()) for key, value in self.pairs]


@dataclass(frozen=True)
class WireRecord(WireValue):
    """Named composite with an ordered, field-tagged value list."""

    type_id: str
    fields: tuple[tuple[str, WireValue], ...] = ()
    kind: ClassVar[WireKind] = WireKind.RECORD

    def as_record(self) -> WireRecord:
        return self

    @property
    def field_names(self) -> list[str]:
        return [name for name, _ in self.fields]

    def get_field(self, name: str) -> WireValue | None:
        """Return the first field called name, or None."""
        for field_name, value in self.fields:
            if field_name == name:
                return value
        return None

    def field(self, name: str) -> WireValue:
        """Return the first field called name.

        Raises:
            FieldNotFound: If the record has no such field
        """
        value = self.get_field(name)
        if value is None:
            raise FieldNotFound(name, self.type_id)
        return value

    def to_python(self) -> dict[str, Any]:
        result: dict[str, Any] = {"__type__": self.type_id}
        for name, value in self.fields:
            result.setdefault(name, value.to_python())
        return result
