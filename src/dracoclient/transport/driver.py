"""Abstract interface for service transports.

A transport moves one encoded argument buffer to the service and brings
back one response body. It owns the endpoint, headers and cookies; it
knows nothing about the codec. The session token is passed in and handed
back explicitly so the caller decides how updates are serialized.

Implementations:
- HttpTransport: multipart POST over httpx
- MockTransport: scripted in-memory service for tests
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CallResponse:
    """Raw result of one service call.

    Attributes:
        body: Response payload, transport framing removed
        token: Session token returned by the service, if any
    """

    body: bytes
    token: str | None = None


class Transport(ABC):
    """Abstract interface for service transports.

    Examples:
        ```python
        from dracoclient import encode, decode
        from dracoclient.transport import HttpTransport

        async with HttpTransport() as transport:
            response = await transport.service_call(
                "UserCreatureService", "getCreadex", encode([]), token=None
            )
            creadex = decode(response.body)
        ```
    """

    @abstractmethod
    async def ping(self) -> bool:
        """Check that the service is reachable.

        Returns:
            True if the service answered, False otherwise (never raises)
        """

    @abstractmethod
    async def service_call(
        self, service: str, method: str, payload: bytes, token: str | None
    ) -> CallResponse:
        """Send one encoded argument list and return the raw response.

        Args:
            service: Remote service name (e.g. ``"AuthService"``)
            method: Method name on that service
            payload: Encoded argument list
            token: Current session token, or None before the first response

        Returns:
            CallResponse with the body and the token the service returned

        Raises:
            TransportError: If the exchange fails
        """

    @abstractmethod
    async def close(self) -> None:
        """Release connections held by the transport."""

    async def __aenter__(self) -> Transport:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
