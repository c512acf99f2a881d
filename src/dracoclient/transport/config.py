"""Configuration for service transports.

TransportSettings holds everything the HTTP transport needs and is read
from ``DRACO_*`` environment variables. MockTransportConfig tunes the
in-memory transport used for tests and offline work.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TransportSettings(BaseSettings):
    """HTTP transport settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_prefix="DRACO_", extra="ignore")

    # Endpoint
    base_url: str = Field(default="https://us.draconiusgo.com", description="Service root URL")
    proxy: str | None = Field(default=None, description="HTTP(S) proxy URL")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")

    # Client identification headers
    user_agent: str = Field(
        default="DraconiusGO/6935 CFNetwork/811.5.4 Darwin/16.7.0", description="User-Agent header"
    )
    accept_language: str = Field(default="en-us", description="Accept-Language header")
    protocol_version: str = Field(default="2373924766", description="Protocol-Version header")
    unity_version: str = Field(default="2017.1.0f3", description="X-Unity-Version header")
    client_version: str = Field(default="6935", description="Client-Version header")

    # Application
    log_level: str = Field(default="INFO", description="Logging level")

    def headers(self) -> dict[str, str]:
        """Return the headers sent with every request."""
        return {
            "User-Agent": self.user_agent,
            "Accept": "*/*",
            "Accept-Language": self.accept_language,
            "Protocol-Version": self.protocol_version,
            "X-Unity-Version": self.unity_version,
            "Client-Version": self.client_version,
        }


@dataclass
class MockTransportConfig:
    """Configuration for the in-memory transport.

    Attributes:
        latency: Simulated round-trip delay in seconds (default 0.0)
        failure_probability: Probability that a call fails with a
            TransportError before reaching the handler (default 0.0)
        rotate_tokens: If True, every response carries a fresh session
            token ``"<token_prefix><n>"``
        token_prefix: Prefix of rotated tokens
        ping_ok: Value returned by ping()
        default_response: Host value answered when no handler or queued
            response applies (encoded like any other response)
        seed: Seed for the failure simulation, for reproducible runs

    Examples:
        ```python
        from dracoclient.transport import MockTransport, MockTransportConfig

        # Flaky channel, reproducible
        config = MockTransportConfig(failure_probability=0.2, seed=7)
        transport = MockTransport(config)
        ```
    """

    latency: float = 0.0
    failure_probability: float = 0.0
    rotate_tokens: bool = False
    token_prefix: str = "portal-"
    ping_ok: bool = True
    default_response: Any = None
    seed: int | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.latency < 0:
            raise ValueError(f"latency must be >= 0, got {self.latency}")

        if not 0.0 <= self.failure_probability <= 1.0:
            raise ValueError(
                f"failure_probability must be 0.0-1.0, got {self.failure_probability}"
            )

        if self.rotate_tokens and not self.token_prefix:
            raise ValueError("token_prefix must be non-empty when rotate_tokens is set")
