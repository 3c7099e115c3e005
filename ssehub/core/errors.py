"""Exceptions raised by the SSE core."""
from __future__ import annotations


class SSEError(Exception):
    """Base class for ssehub errors."""


class ConnectionClosedError(SSEError):
    """Raised when sending to a client whose delivery worker has stopped."""

    def __init__(self, message: str = "connection closed") -> None:
        super().__init__(message)


class ClientShutdownError(SSEError):
    """Raised when ``Client.shutdown`` is called more than once."""
