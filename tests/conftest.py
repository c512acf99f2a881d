"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from dracoclient import DracoClient, WireBytes, WireInt, WireRecord
from dracoclient.client import default_client_info
from dracoclient.models import ClientInfo
from dracoclient.transport import MockTransport, MockTransportConfig


@pytest.fixture
def client_info() -> ClientInfo:
    """Client info of the reference device."""
    return default_client_info()


@pytest.fixture
def auth_result() -> WireRecord:
    """Sign-in response as the service sends it."""
    return WireRecord(
        "AuthResult",
        (
            (
                "info",
                WireRecord(
                    "FAuthInfo",
                    (
                        ("userId", WireBytes(b"abc123")),
                        ("avatarAppearanceDetails", WireInt(7)),
                    ),
                ),
            ),
        ),
    )


@pytest.fixture
def mock_transport() -> MockTransport:
    """In-memory transport that rotates session tokens."""
    return MockTransport(MockTransportConfig(rotate_tokens=True))


@pytest.fixture
def client(mock_transport: MockTransport) -> DracoClient:
    """Client wired to the mock transport."""
    return DracoClient(mock_transport)
