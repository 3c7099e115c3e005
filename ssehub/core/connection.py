"""Outbound connection abstraction consumed by ``Client``."""
from __future__ import annotations

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, Protocol

Scope = MutableMapping[str, Any]
Message = MutableMapping[str, Any]
Receive = Callable[[], Awaitable[Message]]
Send = Callable[[Message], Awaitable[None]]


class Connection(Protocol):
    """Byte sink with explicit flush and disconnect notification."""

    headers: MutableMapping[str, str]

    async def write(self, data: bytes) -> None:
        ...

    async def flush(self) -> None:
        ...

    async def wait_disconnected(self) -> None:
        ...


def supports_streaming(connection: object) -> bool:
    """Return True when ``connection`` can back an event stream."""
    return all(
        callable(getattr(connection, name, None))
        for name in ("write", "flush", "wait_disconnected")
    ) and hasattr(connection, "headers")


class ASGIConnection:
    """Streams an HTTP response over an ASGI ``send``/``receive`` pair.

    The response start message goes out lazily, on the first flush or write,
    so headers may be set until then. ASGI servers push every body message to
    the socket as it is sent, which makes ``flush`` a no-op once started.
    """

    def __init__(self, scope: Scope, receive: Receive, send: Send) -> None:
        self.headers: dict[str, str] = {}
        self.status_code = 200
        self._scope = scope
        self._receive = receive
        self._send = send
        self._started = False
        self._finished = False
        self._disconnected = False

    @property
    def http_version(self) -> str | None:
        return self._scope.get("http_version")

    @property
    def disconnected(self) -> bool:
        return self._disconnected

    async def write(self, data: bytes) -> None:
        await self.flush()
        await self._send({"type": "http.response.body", "body": data, "more_body": True})

    async def flush(self) -> None:
        if self._started:
            return
        self._started = True
        await self._send(
            {
                "type": "http.response.start",
                "status": self.status_code,
                "headers": [
                    (name.lower().encode("latin-1"), value.encode("latin-1"))
                    for name, value in self.headers.items()
                ],
            }
        )

    async def wait_disconnected(self) -> None:
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                self._disconnected = True
                return

    async def close(self) -> None:
        """Terminate the response body unless the peer has already gone."""
        if self._finished or self._disconnected:
            return
        self._finished = True
        await self.flush()
        await self._send({"type": "http.response.body", "body": b"", "more_body": False})
