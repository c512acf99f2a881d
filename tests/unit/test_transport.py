"""Tests for transport settings and the HTTP and mock transports."""

from __future__ import annotations

import httpx
import pytest
from pydantic import ValidationError

from dracoclient import WireBytes, WireInt, decode, encode
from dracoclient.exceptions import TransportError
from dracoclient.transport import (
    CallResponse,
    HttpTransport,
    MockTransport,
    MockTransportConfig,
    TransportSettings,
)
from dracoclient.transport.http import TOKEN_HEADER


class TestTransportSettings:
    """Tests for TransportSettings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default endpoint and client headers."""
        monkeypatch.delenv("DRACO_BASE_URL", raising=False)
        monkeypatch.delenv("DRACO_TIMEOUT", raising=False)
        settings = TransportSettings()

        assert settings.base_url == "https://us.draconiusgo.com"
        assert settings.timeout == 30.0
        assert settings.proxy is None
        assert settings.log_level == "INFO"

    def test_headers(self) -> None:
        """Test the headers sent with every request."""
        headers = TransportSettings(protocol_version="42", client_version="7000").headers()

        assert headers["Protocol-Version"] == "42"
        assert headers["Client-Version"] == "7000"
        assert headers["X-Unity-Version"] == "2017.1.0f3"
        assert headers["Accept"] == "*/*"
        assert "User-Agent" in headers

    def test_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that DRACO_* variables override defaults."""
        monkeypatch.setenv("DRACO_BASE_URL", "https://eu.draconiusgo.com")
        monkeypatch.setenv("DRACO_TIMEOUT", "5")

        settings = TransportSettings()

        assert settings.base_url == "https://eu.draconiusgo.com"
        assert settings.timeout == 5.0

    def test_invalid_timeout(self) -> None:
        """Test that a non-positive timeout is rejected."""
        with pytest.raises(ValidationError):
            TransportSettings(timeout=0)


class TestMockTransportConfig:
    """Tests for MockTransportConfig validation."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = MockTransportConfig()

        assert config.latency == 0.0
        assert config.failure_probability == 0.0
        assert config.rotate_tokens is False
        assert config.token_prefix == "portal-"
        assert config.ping_ok is True
        assert config.default_response is None

    def test_negative_latency_raises(self) -> None:
        """Test that negative latency raises ValueError."""
        with pytest.raises(ValueError, match="latency must be >= 0"):
            MockTransportConfig(latency=-1.0)

    def test_invalid_failure_probability_raises(self) -> None:
        """Test that an invalid failure probability raises ValueError."""
        with pytest.raises(ValueError, match="failure_probability must be 0.0-1.0"):
            MockTransportConfig(failure_probability=1.5)

        with pytest.raises(ValueError, match="failure_probability must be 0.0-1.0"):
            MockTransportConfig(failure_probability=-0.1)

    def test_empty_token_prefix_raises(self) -> None:
        """Test that rotated tokens need a prefix."""
        with pytest.raises(ValueError, match="token_prefix"):
            MockTransportConfig(rotate_tokens=True, token_prefix="")


def _http_transport(handler) -> HttpTransport:  # type: ignore[no-untyped-def]
    settings = TransportSettings(base_url="https://draco.test", protocol_version="2373924766")
    return HttpTransport(settings, http_transport=httpx.MockTransport(handler))


class TestHttpTransport:
    """Tests for the httpx-based transport."""

    @pytest.mark.asyncio
    async def test_service_call_request(self) -> None:
        """Test the multipart request layout and token header."""
        payload = encode(["LoadingScreenPercent", None])
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=encode(True), headers={TOKEN_HEADER: "portal-2"})

        async with _http_transport(handler) as transport:
            response = await transport.service_call(
                "ClientEventService", "onEvent", payload, "portal-1"
            )

        assert response == CallResponse(body=b"\x02", token="portal-2")

        request = seen[0]
        assert request.method == "POST"
        assert request.url == "https://draco.test/serviceCall"
        assert request.headers[TOKEN_HEADER] == "portal-1"
        assert request.headers["Protocol-Version"] == "2373924766"
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b'name="service"' in request.content
        assert b"ClientEventService" in request.content
        assert b'name="method"' in request.content
        assert b"onEvent" in request.content
        assert b'filename="args.dat"' in request.content
        assert payload in request.content

    @pytest.mark.asyncio
    async def test_no_token_before_first_response(self) -> None:
        """Test that no token header is sent when there is no token."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"\x00")

        async with _http_transport(handler) as transport:
            response = await transport.service_call("AuthService", "trySingIn", b"\x06\x00", None)

        assert TOKEN_HEADER not in seen[0].headers
        assert response.token is None

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        """Test that a non-2xx status raises TransportError."""
        async with _http_transport(lambda request: httpx.Response(500)) as transport:
            with pytest.raises(TransportError, match="HTTP 500") as exc_info:
                await transport.service_call("MapService", "getUpdate", b"\x00", None)

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_network_error(self) -> None:
        """Test that connection failures raise TransportError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _http_transport(handler) as transport:
            with pytest.raises(TransportError, match="connection refused") as exc_info:
                await transport.service_call("MapService", "getUpdate", b"\x00", None)

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_ping(self) -> None:
        """Test ping success and failure."""
        paths: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200)

        async with _http_transport(handler) as transport:
            assert await transport.ping() is True
        assert paths == ["/ping"]

        async with _http_transport(lambda request: httpx.Response(503)) as transport:
            assert await transport.ping() is False

    @pytest.mark.asyncio
    async def test_ping_network_error(self) -> None:
        """Test that ping never raises."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        async with _http_transport(handler) as transport:
            assert await transport.ping() is False


class TestMockTransport:
    """Tests for the in-memory transport."""

    @pytest.mark.asyncio
    async def test_records_calls(self) -> None:
        """Test that calls are recorded with decoded arguments."""
        transport = MockTransport()
        await transport.service_call("PlayerService", "saveUserSettings", encode([3]), "t")

        call = transport.calls[0]
        assert (call.service, call.method, call.token) == ("PlayerService", "saveUserSettings", "t")
        assert call.args.as_sequence()[0] == WireInt(3)

    @pytest.mark.asyncio
    async def test_response_precedence(self) -> None:
        """Test handler, then queue, then default response."""
        transport = MockTransport(MockTransportConfig(default_response="default"))
        transport.on("AuthService", "validateNickname", lambda args: args.as_sequence()[0])
        transport.queue_response("queued", token="q-1")

        handled = await transport.service_call("AuthService", "validateNickname", encode(["Rex"]), None)
        queued = await transport.service_call("ItemService", "getUserItems", b"\x00", None)
        fallback = await transport.service_call("ItemService", "getUserItems", b"\x00", None)

        assert decode(handled.body) == WireBytes(b"Rex")
        assert decode(queued.body) == WireBytes(b"queued")
        assert queued.token == "q-1"
        assert decode(fallback.body) == WireBytes(b"default")
        assert fallback.token is None

    @pytest.mark.asyncio
    async def test_queue_raw(self) -> None:
        """Test scripting an undecodable body."""
        transport = MockTransport()
        transport.queue_raw(b"\x09")

        response = await transport.service_call("MapService", "getUpdate", b"\x00", None)
        assert response.body == b"\x09"

    @pytest.mark.asyncio
    async def test_rotate_tokens(self, mock_transport: MockTransport) -> None:
        """Test that every response carries a fresh token."""
        first = await mock_transport.service_call("A", "b", b"\x00", None)
        second = await mock_transport.service_call("A", "b", b"\x00", first.token)

        assert (first.token, second.token) == ("portal-1", "portal-2")
        assert mock_transport.calls[1].token == "portal-1"

    @pytest.mark.asyncio
    async def test_simulated_failure(self) -> None:
        """Test that a certain failure raises TransportError."""
        transport = MockTransport(MockTransportConfig(failure_probability=1.0, seed=1))

        with pytest.raises(TransportError, match="simulated failure"):
            await transport.service_call("MapService", "getUpdate", b"\x00", None)
        assert len(transport.calls) == 1

    @pytest.mark.asyncio
    async def test_latency(self) -> None:
        """Test that simulated latency still answers."""
        transport = MockTransport(MockTransportConfig(latency=0.01))
        response = await transport.service_call("A", "b", b"\x00", None)
        assert response.body == b"\x00"

    @pytest.mark.asyncio
    async def test_calls_to(self) -> None:
        """Test filtering recorded calls."""
        transport = MockTransport()
        await transport.service_call("ClientEventService", "onEvent", b"\x00", None)
        await transport.service_call("AuthService", "trySingIn", b"\x00", None)
        await transport.service_call("ClientEventService", "onEvent", b"\x00", None)

        assert len(transport.calls_to("ClientEventService")) == 2
        assert len(transport.calls_to("AuthService", "register")) == 0

    @pytest.mark.asyncio
    async def test_ping_and_close(self) -> None:
        """Test ping counting and use after close."""
        transport = MockTransport(MockTransportConfig(ping_ok=False))

        assert await transport.ping() is False
        assert transport.pings == 1

        async with transport:
            pass
        assert transport.closed

        with pytest.raises(RuntimeError, match="closed"):
            await transport.service_call("A", "b", b"\x00", None)
