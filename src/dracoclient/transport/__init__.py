"""Service transports.

The codec turns arguments into bytes and bytes into values; a transport
moves those bytes to the service and back.

- **HttpTransport**: multipart POST to ``/serviceCall`` over httpx
- **MockTransport**: scripted in-memory service for tests and offline work

Both implement the ``Transport`` interface, so the client does not change
when the backend does.
"""

from __future__ import annotations

from .config import MockTransportConfig, TransportSettings
from .driver import CallResponse, Transport
from .http import HttpTransport
from .mock import MockTransport, RecordedCall

__all__ = [
    "Transport",
    "CallResponse",
    "HttpTransport",
    "MockTransport",
    "RecordedCall",
    "TransportSettings",
    "MockTransportConfig",
]
