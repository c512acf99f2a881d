"""Field type helpers and utilities.

This module provides convenience functions for declaring record fields
with wire-level constraints.
"""

from __future__ import annotations

from typing import Any, cast

from pydantic import Field
from pydantic.fields import FieldInfo

from ..codec.tags import INT64_MAX, INT64_MIN


def Int64(**kwargs: Any) -> FieldInfo:
    """Create an integer field bounded to the signed 64-bit range.

    Values outside the range would fail at encode time; bounding them here
    makes them fail when the record is built instead.

    Args:
        **kwargs: Additional Field() arguments (default, description, etc.)

    Returns:
        Pydantic FieldInfo suitable for use as a field default/metadata.

    Example:
        >>> class ClientRequest(BaseRecord):
        ...     time: int = Int64(default=0)
    """
    return cast(FieldInfo, Field(ge=INT64_MIN, le=INT64_MAX, **kwargs))


def WireName(name: str, **kwargs: Any) -> FieldInfo:
    """Create a field whose wire identifier is spelled explicitly.

    Use this where the camelCase alias generator cannot produce the name
    the service expects.

    Args:
        name: Field identifier written on the wire
        **kwargs: Additional Field() arguments

    Returns:
        Pydantic FieldInfo suitable for use as a field default/metadata.

    Example:
        >>> class ClientInfo(BaseRecord):
        ...     ios_vendor_identifier: str | None = WireName("iOsVendorIdentifier", default=None)
    """
    return cast(FieldInfo, Field(alias=name, **kwargs))
