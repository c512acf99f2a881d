"""Game service client.

DracoClient strings together the calls a device makes: booting, signing
in or registering, picking an avatar and polling the map. Every call goes
through call(), which encodes the argument list, hands it to the
transport, applies the returned session token and decodes the response.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .codec import WireMapping, WireRecord, WireValue, decode, encode
from .exceptions import CallError, DecodeError, EncodeError, TransportError
from .models import (
    AuthData,
    AuthType,
    ClientInfo,
    ClientPlatform,
    ClientRequest,
    GeoCoords,
    RegistrationInfo,
    Tile,
    UpdateRequest,
)
from .session import Session
from .transport import Transport

logger = logging.getLogger(__name__)

EVENT_SERVICE = "ClientEventService"
AUTH_SERVICE = "AuthService"


@dataclass
class User:
    """What the client knows about the signed-in player."""

    id: str | None = None
    device_id: str | None = None
    nickname: str | None = None
    avatar: int | None = None


def default_client_info() -> ClientInfo:
    """Client info of the reference iOS device."""
    return ClientInfo(
        platform="IPhonePlayer",
        platform_version="iOS 10.3.3",
        device_model="iPhone8,1",
        revision="6935",
        screen_width=750,
        screen_height=1334,
        language="English",
        ios_advertising_tracking_enabled=False,
    )


class DracoClient:
    """Client for the game's service-call API.

    Args:
        transport: Backend that carries encoded calls
        session: Session token holder; a fresh one if None
        client_info: Device description; default_client_info() if None

    Examples:
        ```python
        from dracoclient import DracoClient
        from dracoclient.transport import HttpTransport

        async with DracoClient(HttpTransport()) as client:
            await client.boot({"userId": "", "deviceId": device_id})
            await client.login()
            update = await client.get_map_update(45.4642, 9.19)
        ```
    """

    def __init__(
        self,
        transport: Transport,
        session: Session | None = None,
        client_info: ClientInfo | None = None,
    ) -> None:
        self.transport = transport
        self.session = session if session is not None else Session()
        self.client_info = client_info if client_info is not None else default_client_info()
        self.user = User()

    async def __aenter__(self) -> DracoClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.transport.close()

    async def ping(self) -> bool:
        return await self.transport.ping()

    async def call(self, service: str, method: str, args: Any) -> WireValue:
        """Invoke service.method with an argument list.

        Args:
            service: Remote service name
            method: Method name
            args: Argument list (or None); anything encode() accepts

        Returns:
            The decoded response

        Raises:
            CallError: If encoding, the exchange or decoding fails; the
                original error is chained as ``__cause__``
        """
        try:
            payload = encode(args)
        except EncodeError as e:
            raise CallError(service, method, f"cannot encode arguments: {e}") from e

        logger.debug("Calling %s.%s with %d bytes", service, method, len(payload))
        try:
            response = await self.transport.service_call(
                service, method, payload, self.session.token
            )
        except TransportError as e:
            logger.warning("%s.%s failed: %s", service, method, e)
            raise CallError(service, method, str(e)) from e

        self.session.update(response.token)

        try:
            return decode(response.body)
        except DecodeError as e:
            logger.warning("%s.%s returned an undecodable body: %s", service, method, e)
            raise CallError(service, method, f"cannot decode response: {e}") from e

    async def event(
        self, name: str, one: str | None = None, two: str | None = None, three: str | None = None
    ) -> WireValue:
        """Report a client lifecycle event."""
        return await self.call(
            EVENT_SERVICE,
            "onEvent",
            [name, self.user.id, self.client_info, one, two, three, None, None],
        )

    async def boot(self, info: Mapping[str, Any]) -> None:
        """Adopt a stored device identity and report start-up.

        Args:
            info: Stored identity with ``userId`` and ``deviceId`` keys plus
                any ClientInfo fields (wire or attribute names) to override
        """
        self.user.id = info.get("userId")
        self.user.device_id = info.get("deviceId")
        self.client_info.ios_vendor_identifier = self.user.device_id
        self.client_info.merge(info)

        await self.event("LoadingScreenPercent", "100")
        await self.event("Initialized")

    async def login(self) -> WireValue:
        """Sign in with the device identity.

        Returns:
            The authentication result; the user id and avatar are taken
            from its ``info`` record when present
        """
        await self.event("TrySingIn", "DEVICE")
        response = await self.call(
            AUTH_SERVICE,
            "trySingIn",
            [self._auth_data(), self.client_info, RegistrationInfo(reg_type="dv")],
        )

        info = _child(response, "info")
        if info is not None and not info.is_null():
            self.user.id = info.project("userId").as_text()
            avatar = _child(info, "avatarAppearanceDetails")
            if avatar is not None and not avatar.is_null():
                self.user.avatar = avatar.as_int()
        return response

    async def load(self) -> None:
        """Report the loading sequence after sign-in."""
        if self.user.avatar is None:
            raise RuntimeError("No avatar known. Call login() or set_avatar() before load().")

        await self.event("LoadingScreenPercent", "100")
        await self.event("CreateAvatarByType", "MageMale")
        await self.event("LoadingScreenPercent", "100")
        await self.event("AvatarUpdateView", str(self.user.avatar))
        await self.event("InitPushNotifications", "True")

    async def validate_nickname(self, nickname: str) -> WireValue:
        await self.event("ValidateNickname", nickname)
        return await self.call(AUTH_SERVICE, "validateNickname", [nickname])

    async def accept_tos(self) -> None:
        await self.event("LicenceShown")
        await self.event("LicenceAccepted")

    async def register(self, nickname: str) -> WireValue:
        """Create an account for this device.

        Raises:
            FieldNotFound, TypeMismatch: If the response has no text ``info.userId``
        """
        self.user.nickname = nickname
        await self.event("Register", "DEVICE", nickname)
        response = await self.call(
            AUTH_SERVICE,
            "register",
            [self._auth_data(), nickname, self.client_info, RegistrationInfo(reg_type="dv")],
        )

        self.user.id = response.project("info.userId").as_text()
        await self.event("ServerAuthSuccess", self.user.id)
        return response

    async def set_avatar(self, avatar: int) -> WireValue:
        self.user.avatar = int(avatar)
        await self.event("AvatarPlayerGenderRace", "1", "1")
        await self.event("AvatarPlayerSubmit", str(self.user.avatar))
        return await self.call("PlayerService", "saveUserSettings", [self.user.avatar])

    async def get_user_items(self) -> WireValue:
        return await self.call("ItemService", "getUserItems", None)

    async def get_creadex(self) -> WireValue:
        return await self.call("UserCreatureService", "getCreadex", [])

    async def get_user_creatures(self) -> WireValue:
        return await self.call("UserCreatureService", "getUserCreatures", [])

    async def get_map_update(
        self,
        latitude: float,
        longitude: float,
        horizontal_accuracy: float = 20,
        tiles_cache: Mapping[Tile, int] | None = None,
        utc_offset_seconds: int = 7200,
    ) -> WireValue:
        """Fetch map tiles and spawns around a position.

        Args:
            latitude: Degrees, -90 to 90
            longitude: Degrees, -180 to 180
            horizontal_accuracy: GPS accuracy in meters
            tiles_cache: Tiles the client already holds, with their versions
            utc_offset_seconds: Local UTC offset reported to the service
        """
        request = UpdateRequest(
            client_request=ClientRequest(
                time=0,
                current_utc_offset_seconds=utc_offset_seconds,
                coords=GeoCoords(
                    latitude=latitude,
                    longitude=longitude,
                    horizontal_accuracy=horizontal_accuracy,
                ),
            ),
            client_platform=ClientPlatform.IOS,
            tiles_cache=dict(tiles_cache or {}),
        )
        return await self.call("MapService", "getUpdate", [request])

    def _auth_data(self) -> AuthData:
        if self.user.device_id is None:
            raise RuntimeError("No device id. Call boot() before signing in.")
        return AuthData(auth_type=AuthType.DEVICE, profile_id=self.user.device_id)


def _child(value: WireValue, name: str) -> WireValue | None:
    """Look up name in a record or text-keyed mapping; None for anything else."""
    if isinstance(value, WireRecord):
        return value.get_field(name)
    if isinstance(value, WireMapping):
        return value.get(name)
    return None
