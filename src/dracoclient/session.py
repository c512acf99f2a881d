"""Session token state shared by the calls of one client."""

from __future__ import annotations

import threading


class Session:
    """Owns the session token the service rotates on each response.

    Reads and updates go through one lock. A response that carries no
    token leaves the current one in place; otherwise the most recently
    applied response wins.

    Example:
        >>> session = Session()
        >>> session.update("portal-1")
        True
        >>> session.token
        'portal-1'
    """

    def __init__(self, token: str | None = None) -> None:
        self._token = token
        self._updates = 0
        self._lock = threading.Lock()

    @property
    def token(self) -> str | None:
        with self._lock:
            return self._token

    @property
    def updates(self) -> int:
        """Number of tokens applied so far."""
        with self._lock:
            return self._updates

    def update(self, token: str | None) -> bool:
        """Replace the token if the response carried one.

        Returns:
            True if the token was replaced
        """
        if token is None:
            return False
        with self._lock:
            self._token = token
            self._updates += 1
        return True

    def clear(self) -> None:
        with self._lock:
            self._token = None
