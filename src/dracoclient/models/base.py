"""Base record class and dracoclient-specific Pydantic configuration.

This module provides the BaseRecord class that all outbound request
structures inherit from.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..codec.schema import register_record


class BaseRecord(BaseModel):
    """Base class for all records sent to the service.

    Fields are declared in snake_case and go on the wire in camelCase; the
    wire order is the declaration order. The type identifier defaults to
    the class name and can be overridden with a ``record_type`` ClassVar.

    Example:
        >>> from typing import ClassVar
        >>> class GeoCoords(BaseRecord):
        ...     latitude: float
        ...     longitude: float
        ...     horizontal_accuracy: float | None = None
        ...
        ...     record_type: ClassVar[str] = "GeoCoords"

    Attributes:
        record_type: Type identifier written in front of the record's fields
    """

    model_config = ConfigDict(
        # Snake-case attributes, camelCase wire names
        alias_generator=to_camel,
        populate_by_name=True,
        # Validate on assignment so mutated session records stay encodable
        validate_assignment=True,
        # Forbid extra fields not defined in schema
        extra="forbid",
    )

    record_type: ClassVar[str] = ""

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        """Register every subclass once Pydantic has finished building it."""
        super().__pydantic_init_subclass__(**kwargs)

        if "record_type" not in cls.__dict__:
            cls.record_type = cls.__name__
        register_record(cls)
