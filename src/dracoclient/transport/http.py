"""HTTP transport built on httpx."""

from __future__ import annotations

import logging

import httpx

from ..exceptions import TransportError
from .config import TransportSettings
from .driver import CallResponse, Transport

logger = logging.getLogger(__name__)

TOKEN_HEADER = "dcportal"


class HttpTransport(Transport):
    """Sends service calls as multipart form posts.

    Each call posts ``service``, ``method`` and the encoded arguments as an
    ``args.dat`` file part to ``/serviceCall``. The session token travels in
    the ``dcportal`` header in both directions. Cookies set by the service
    are kept by the underlying client for its lifetime.

    Args:
        settings: Transport settings; read from the environment if None
        http_transport: httpx transport to use instead of the network
            (e.g. ``httpx.MockTransport`` in tests)
    """

    def __init__(
        self,
        settings: TransportSettings | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings if settings is not None else TransportSettings()
        self._client = httpx.AsyncClient(
            base_url=self.settings.base_url,
            headers=self.settings.headers(),
            proxy=self.settings.proxy,
            timeout=self.settings.timeout,
            transport=http_transport,
        )

    async def ping(self) -> bool:
        try:
            response = await self._client.post(
                "/ping", headers={"Content-Type": "application/x-www-form-urlencoded"}
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Ping to %s failed: %s", self.settings.base_url, e)
            return False
        return True

    async def service_call(
        self, service: str, method: str, payload: bytes, token: str | None
    ) -> CallResponse:
        headers = {TOKEN_HEADER: token} if token is not None else {}
        try:
            response = await self._client.post(
                "/serviceCall",
                data={"service": service, "method": method},
                files={"args": ("args.dat", payload, "application/octet-stream")},
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise TransportError(f"{service}.{method}: {e}") from e

        if response.is_error:
            raise TransportError(
                f"{service}.{method}: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        logger.debug(
            "%s.%s -> %d bytes (HTTP %d)", service, method, len(response.content), response.status_code
        )
        return CallResponse(body=response.content, token=response.headers.get(TOKEN_HEADER))

    async def close(self) -> None:
        await self._client.aclose()
