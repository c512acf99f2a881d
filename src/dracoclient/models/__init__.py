"""Pydantic record modeling for dracoclient.

This module provides the BaseRecord class, field helpers and the concrete
request records the client sends.
"""

from __future__ import annotations

from .base import BaseRecord
from .constants import AuthType, ClientPlatform
from .fields import Int64, WireName
from .records import (
    AuthData,
    ClientInfo,
    ClientRequest,
    GeoCoords,
    RegistrationInfo,
    Tile,
    UpdateRequest,
)

__all__ = [
    "BaseRecord",
    "Int64",
    "WireName",
    "AuthType",
    "ClientPlatform",
    "AuthData",
    "ClientInfo",
    "ClientRequest",
    "GeoCoords",
    "RegistrationInfo",
    "Tile",
    "UpdateRequest",
]
