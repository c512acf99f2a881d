"""End-to-end integration tests."""

from __future__ import annotations

import re

import httpx
import pytest

from dracoclient import (
    DracoClient,
    WireBytes,
    WireInt,
    WireRecord,
    WireSequence,
    WireValue,
    decode,
    encode,
)
from dracoclient.models import Tile
from dracoclient.transport import HttpTransport, TransportSettings
from dracoclient.transport.http import TOKEN_HEADER

_FIELD = re.compile(rb'name="(service|method)"\r\n\r\n([^\r]*)\r\n')


class FakeService:
    """Answers multipart service calls the way the game service does."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str | None]] = []
        self.counter = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/ping":
            return httpx.Response(200)

        fields = {name.decode(): value.decode() for name, value in _FIELD.findall(request.content)}
        service, method = fields["service"], fields["method"]
        self.calls.append((service, method, request.headers.get(TOKEN_HEADER)))

        self.counter += 1
        headers = {TOKEN_HEADER: f"portal-{self.counter}"}
        return httpx.Response(200, content=encode(self.answer(method)), headers=headers)

    def answer(self, method: str) -> WireValue | None:
        if method == "trySingIn":
            return WireRecord(
                "FAuthResult",
                (
                    (
                        "info",
                        WireRecord(
                            "FAuthInfo",
                            (("userId", WireBytes(b"srv-user")), ("avatarAppearanceDetails", WireInt(4))),
                        ),
                    ),
                ),
            )
        if method == "getUpdate":
            return WireRecord(
                "FUpdateResponse",
                (("tileUpdates", WireSequence((WireRecord("FTile", (("zoom", WireInt(15)),)),))),),
            )
        return None


@pytest.fixture
def service() -> FakeService:
    return FakeService()


@pytest.fixture
def http_client(service: FakeService) -> DracoClient:
    settings = TransportSettings(base_url="https://draco.test")
    return DracoClient(HttpTransport(settings, http_transport=httpx.MockTransport(service)))


class TestSessionFlow:
    """A device session from boot to map polling over HTTP."""

    @pytest.mark.asyncio
    async def test_full_session(self, http_client: DracoClient, service: FakeService) -> None:
        """Test boot, login, load and a map update against the fake service."""
        async with http_client as client:
            assert await client.ping()

            await client.boot({"userId": "", "deviceId": "device-1"})
            await client.login()
            await client.load()
            update = await client.get_map_update(45.0, 9.0, tiles_cache={Tile(x=1, y=2, zoom=15): 1})

        assert client.user.id == "srv-user"
        assert client.user.avatar == 4
        assert update.project("tileUpdates.0.zoom").as_int() == 15

        methods = [method for _, method, _ in service.calls]
        assert methods.count("onEvent") == 8
        assert methods[-1] == "getUpdate"
        assert ("AuthService", "trySingIn") in [(s, m) for s, m, _ in service.calls]

        tokens = [token for _, _, token in service.calls]
        assert tokens[0] is None
        assert tokens[1:] == [f"portal-{n}" for n in range(1, len(tokens))]
        assert client.session.token == f"portal-{len(tokens)}"


class TestPayloadCompatibility:
    """Payloads survive a trip through the HTTP transport unchanged."""

    @pytest.mark.asyncio
    async def test_echo(self) -> None:
        """Test that the body bytes are carried verbatim in both directions."""
        payload = encode([Tile(x=-1, y=2**40, zoom=15), {"k": [1.5, None, True]}, b"\x00\xff"])

        def echo(request: httpx.Request) -> httpx.Response:
            assert payload in request.content
            return httpx.Response(200, content=payload)

        settings = TransportSettings(base_url="https://draco.test")
        async with HttpTransport(settings, http_transport=httpx.MockTransport(echo)) as transport:
            response = await transport.service_call("EchoService", "echo", payload, None)

        assert response.body == payload
        value = decode(response.body)
        assert value.project("0.y").as_int() == 2**40
        assert value.project("1.k.2").as_bool() is True
