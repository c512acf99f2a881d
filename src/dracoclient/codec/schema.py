"""Record descriptors for Pydantic record models.

This module analyzes record models and extracts what the encoder needs to
flatten them: the record's type identifier and, for every field in
declaration order, its wire name and wire kind.

Descriptors are built once per class and cached. The decoder never uses
them.
"""

from __future__ import annotations

import collections.abc
import enum
import types
from dataclasses import dataclass
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..exceptions import SchemaError
from .tags import WireKind

_SEQUENCE_ORIGINS = (list, tuple, collections.abc.Sequence, collections.abc.MutableSequence)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


@dataclass(frozen=True)
class FieldDescriptor:
    """Encoding information for a single record field.

    Attributes:
        name: Python attribute name
        wire_name: Field identifier written on the wire
        kind: Wire kind the value is encoded as
        nullable: Whether the annotation admits None
        position: Zero-based position in the record
        record_class: Nested record class when kind is RECORD
    """

    name: str
    wire_name: str
    kind: WireKind
    nullable: bool
    position: int
    record_class: type[BaseModel] | None = None


@dataclass(frozen=True)
class RecordDescriptor:
    """Type identifier and ordered field layout of a record model.

    Example:
        >>> descriptor = RecordDescriptor.from_model(GeoCoords)
        >>> [(f.wire_name, f.kind.value) for f in descriptor.fields]
        [('latitude', 'float'), ('longitude', 'float'), ('horizontalAccuracy', 'float')]
    """

    type_id: str
    model_class: type[BaseModel]
    fields: tuple[FieldDescriptor, ...]

    @classmethod
    def from_model(cls, model_class: type[BaseModel]) -> RecordDescriptor:
        """Introspect a record model.

        Args:
            model_class: Pydantic model class with a ``record_type`` ClassVar

        Returns:
            RecordDescriptor instance

        Raises:
            SchemaError: If the type identifier is missing or a field
                annotation has no wire kind
        """
        type_id = getattr(model_class, "record_type", None)
        if not isinstance(type_id, str) or not type_id:
            raise SchemaError(f"{model_class.__name__} has no record_type")

        fields = tuple(
            _describe_field(model_class, position, name, field_info)
            for position, (name, field_info) in enumerate(model_class.model_fields.items())
        )
        return cls(type_id=type_id, model_class=model_class, fields=fields)

    @property
    def wire_names(self) -> list[str]:
        return [field.wire_name for field in self.fields]


def _describe_field(
    model_class: type[BaseModel], position: int, name: str, field_info: FieldInfo
) -> FieldDescriptor:
    annotation = field_info.annotation
    if annotation is None:
        raise SchemaError(f"{model_class.__name__}.{name} has no type annotation")

    kind, nullable, record_class = _kind_for(annotation, f"{model_class.__name__}.{name}")
    return FieldDescriptor(
        name=name,
        wire_name=field_info.alias or name,
        kind=kind,
        nullable=nullable,
        position=position,
        record_class=record_class,
    )


def _kind_for(annotation: Any, where: str) -> tuple[WireKind, bool, type[BaseModel] | None]:
    """Map a type annotation to (kind, nullable, record class)."""
    if annotation is Any:
        return WireKind.ANY, True, None
    if annotation is type(None):
        return WireKind.NULL, True, None

    origin = get_origin(annotation)

    # Optional[T] / T | None
    if origin is Union or origin is types.UnionType:
        non_none = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(non_none) != 1:
            raise SchemaError(f"Field {where}: only Optional[T] unions are supported")
        kind, _, record_class = _kind_for(non_none[0], where)
        return kind, True, record_class

    if origin is not None:
        if origin in _SEQUENCE_ORIGINS:
            return WireKind.SEQUENCE, False, None
        if origin in _MAPPING_ORIGINS:
            return WireKind.MAPPING, False, None
        raise SchemaError(f"Field {where}: unsupported generic type {annotation}")

    if not isinstance(annotation, type):
        raise SchemaError(f"Field {where}: unsupported annotation {annotation!r}")

    if issubclass(annotation, enum.Enum):
        return _enum_kind(annotation, where), False, None
    if annotation is bool:
        return WireKind.BOOL, False, None
    if issubclass(annotation, int):
        return WireKind.INT, False, None
    if issubclass(annotation, float):
        return WireKind.FLOAT, False, None
    if issubclass(annotation, (str, bytes, bytearray)):
        return WireKind.BYTES, False, None
    if issubclass(annotation, (list, tuple)):
        return WireKind.SEQUENCE, False, None
    if issubclass(annotation, dict):
        return WireKind.MAPPING, False, None
    if issubclass(annotation, BaseModel):
        if not getattr(annotation, "record_type", None):
            raise SchemaError(f"Field {where}: {annotation.__name__} is not a record model")
        return WireKind.RECORD, False, annotation

    raise SchemaError(
        f"Field {where}: unsupported type {annotation.__name__}. "
        f"Supported: bool, int, float, str, bytes, enums, list, dict, records."
    )


def _enum_kind(enum_type: type[enum.Enum], where: str) -> WireKind:
    values = [member.value for member in enum_type]
    if not values:
        raise SchemaError(f"Field {where}: enum {enum_type.__name__} has no values")
    if all(isinstance(v, int) and not isinstance(v, bool) for v in values):
        return WireKind.INT
    if all(isinstance(v, str) for v in values):
        return WireKind.BYTES
    raise SchemaError(f"Field {where}: enum {enum_type.__name__} mixes value types")


# ============================================================================
# Registry
# ============================================================================

# Global registry: record type identifier -> record class
RECORD_REGISTRY: dict[str, type[BaseModel]] = {}

_DESCRIPTORS: dict[type[BaseModel], RecordDescriptor] = {}


def register_record(model_class: type[BaseModel]) -> None:
    """Register a record class so the encoder can flatten its instances.

    BaseRecord subclasses register themselves when they are created; call
    this directly only for models that do not inherit from BaseRecord.

    Args:
        model_class: Pydantic model class with a ``record_type`` ClassVar

    Raises:
        SchemaError: If the class has no record_type or another class already
            uses the same identifier
    """
    type_id = getattr(model_class, "record_type", None)
    if not isinstance(type_id, str) or not type_id:
        raise SchemaError(f"{model_class.__name__} has no record_type")

    existing = RECORD_REGISTRY.get(type_id)
    if existing is not None and existing is not model_class:
        raise SchemaError(
            f"Record type {type_id!r} already registered to "
            f"{existing.__module__}.{existing.__qualname__}"
        )

    RECORD_REGISTRY[type_id] = model_class
    _DESCRIPTORS.pop(model_class, None)


def descriptor_for(obj: Any) -> RecordDescriptor | None:
    """Return the descriptor for a registered record class or instance.

    The descriptor is built on first use, after any forward references in
    the model have been resolved, and cached afterwards.

    Returns:
        RecordDescriptor, or None if the class is not registered
    """
    model_class = obj if isinstance(obj, type) else type(obj)
    descriptor = _DESCRIPTORS.get(model_class)
    if descriptor is not None:
        return descriptor

    type_id = getattr(model_class, "record_type", None)
    if not isinstance(type_id, str) or RECORD_REGISTRY.get(type_id) is not model_class:
        return None

    descriptor = RecordDescriptor.from_model(model_class)
    _DESCRIPTORS[model_class] = descriptor
    return descriptor


def registered_records() -> list[RecordDescriptor]:
    """Return descriptors for every registered record, sorted by type identifier."""
    descriptors = []
    for type_id in sorted(RECORD_REGISTRY):
        descriptor = descriptor_for(RECORD_REGISTRY[type_id])
        if descriptor is not None:
            descriptors.append(descriptor)
    return descriptors
