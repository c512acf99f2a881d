"""Request records sent to the game service.

Each class below is one Record Descriptor: its ``record_type`` is the type
identifier on the wire and its field order is the wire order.
"""

from __future__ import annotations

from typing import Any, ClassVar, Mapping

from pydantic import ConfigDict, Field

from .base import BaseRecord
from .constants import AuthType, ClientPlatform
from .fields import Int64, WireName


class ClientInfo(BaseRecord):
    """Device and build description attached to every event and auth call."""

    platform: str
    platform_version: str
    device_model: str
    revision: str
    screen_width: int = Int64()
    screen_height: int = Int64()
    language: str
    ios_advertising_tracking_enabled: bool = WireName("iOsAdvertisingTrackingEnabled", default=False)
    ios_vendor_identifier: str | None = WireName("iOsVendorIdentifier", default=None)

    record_type: ClassVar[str] = "FClientInfo"

    def merge(self, values: Mapping[str, Any]) -> list[str]:
        """Copy every known field from values onto this record.

        Keys may be attribute names or wire names; unknown keys are ignored.

        Returns:
            Attribute names that were updated
        """
        by_wire = {info.alias or name: name for name, info in type(self).model_fields.items()}
        updated = []
        for key, value in values.items():
            name = key if key in type(self).model_fields else by_wire.get(key)
            if name is None:
                continue
            setattr(self, name, value)
            updated.append(name)
        return updated


class AuthData(BaseRecord):
    auth_type: AuthType
    profile_id: str

    record_type: ClassVar[str] = "AuthData"


class RegistrationInfo(BaseRecord):
    reg_type: str = "dv"

    record_type: ClassVar[str] = "FRegistrationInfo"


class GeoCoords(BaseRecord):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    horizontal_accuracy: float = 20.0

    record_type: ClassVar[str] = "GeoCoords"


class ClientRequest(BaseRecord):
    time: int = Int64(default=0)
    current_utc_offset_seconds: int = Int64(default=0)
    coords: GeoCoords

    record_type: ClassVar[str] = "FClientRequest"


class Tile(BaseRecord):
    """Map tile key; hashable so it can key the tile cache."""

    model_config = ConfigDict(frozen=True)

    x: int = Int64()
    y: int = Int64()
    zoom: int = Int64()

    record_type: ClassVar[str] = "FTile"


class UpdateRequest(BaseRecord):
    """Map update request: where the player is and which tiles are cached."""

    client_request: ClientRequest
    client_platform: ClientPlatform
    tiles_cache: dict[Tile, int] = Field(default_factory=dict)

    record_type: ClassVar[str] = "FUpdateRequest"
