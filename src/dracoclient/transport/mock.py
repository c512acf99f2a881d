"""In-memory transport for tests and offline development.

MockTransport plays the service side of a call: it decodes the arguments
it receives, answers with encoded host values and hands out session
tokens. Responses come from, in order of precedence:

1. a handler registered for the (service, method) pair,
2. the queue of scripted responses,
3. ``config.default_response``.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable

from ..codec import WireValue, decode, encode
from ..exceptions import TransportError
from .config import MockTransportConfig
from .driver import CallResponse, Transport

logger = logging.getLogger(__name__)

Handler = Callable[[WireValue], Any]


@dataclass(frozen=True)
class RecordedCall:
    """One call as seen by the mock service."""

    service: str
    method: str
    payload: bytes
    token: str | None

    @property
    def args(self) -> WireValue:
        """Decoded argument list."""
        return decode(self.payload)


@dataclass(frozen=True)
class _Scripted:
    body: bytes
    token: str | None


class MockTransport(Transport):
    """Scripted service for exercising the client without a network.

    Attributes:
        config: Mock transport configuration
        calls: Every call received, in order

    Examples:
        ```python
        from dracoclient import DracoClient, WireRecord, WireBytes
        from dracoclient.transport import MockTransport

        transport = MockTransport()
        transport.on("AuthService", "trySingIn", lambda args: WireRecord(
            "AuthResult", (("info", WireRecord("UserInfo", (("userId", WireBytes(b"u1")),))),)
        ))

        client = DracoClient(transport)
        await client.login()
        assert transport.calls[-1].method == "trySingIn"
        ```
    """

    def __init__(self, config: MockTransportConfig | None = None) -> None:
        self.config = config if config is not None else MockTransportConfig()
        self.calls: list[RecordedCall] = []
        self.pings = 0
        self.closed = False
        self._handlers: dict[tuple[str, str], Handler] = {}
        self._queue: deque[_Scripted] = deque()
        self._random = random.Random(self.config.seed)
        self._token_counter = 0

    def on(self, service: str, method: str, handler: Handler) -> None:
        """Answer every call to service.method with handler(args)."""
        self._handlers[(service, method)] = handler

    def queue_response(self, value: Any, token: str | None = None) -> None:
        """Answer the next unhandled call with value, encoded."""
        self._queue.append(_Scripted(encode(value), token))

    def queue_raw(self, body: bytes, token: str | None = None) -> None:
        """Answer the next unhandled call with body as-is (e.g. corrupt data)."""
        self._queue.append(_Scripted(bytes(body), token))

    def calls_to(self, service: str, method: str | None = None) -> list[RecordedCall]:
        """Return recorded calls to service (and method, if given)."""
        return [
            call
            for call in self.calls
            if call.service == service and (method is None or call.method == method)
        ]

    async def ping(self) -> bool:
        self.pings += 1
        return self.config.ping_ok

    async def service_call(
        self, service: str, method: str, payload: bytes, token: str | None
    ) -> CallResponse:
        if self.closed:
            raise RuntimeError("MockTransport closed. Create a new transport to keep calling.")

        self.calls.append(RecordedCall(service, method, bytes(payload), token))

        if self.config.latency:
            await asyncio.sleep(self.config.latency)

        if self._random.random() < self.config.failure_probability:
            logger.info("Simulated failure for %s.%s", service, method)
            raise TransportError(f"{service}.{method}: simulated failure")

        handler = self._handlers.get((service, method))
        if handler is not None:
            body, reply_token = encode(handler(decode(payload))), None
        elif self._queue:
            scripted = self._queue.popleft()
            body, reply_token = scripted.body, scripted.token
        else:
            body, reply_token = encode(self.config.default_response), None

        if self.config.rotate_tokens:
            self._token_counter += 1
            reply_token = f"{self.config.token_prefix}{self._token_counter}"

        logger.debug("%s.%s answered with %d bytes", service, method, len(body))
        return CallResponse(body=body, token=reply_token)

    async def close(self) -> None:
        self.closed = True
