"""Per-connection delivery worker."""
from __future__ import annotations

import asyncio

import structlog

from .connection import Connection, supports_streaming
from .errors import ClientShutdownError, ConnectionClosedError
from .event import Event

logger = structlog.get_logger()

# Queue item telling the worker to stop once earlier events are written.
_CLOSE = object()


class Client:
    """Wraps one streaming connection and serialises writes to it.

    Instances come from ``Client.open``. A single worker task owns the
    connection: it takes events off a one-slot queue, writes their wire bytes
    and flushes, until it is shut down or the peer disconnects.
    """

    def __init__(self, connection: Connection) -> None:
        self._connection = connection
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=1)
        self._closed = False
        self._closing = False
        self._worker: asyncio.Task[None] | None = None

    @classmethod
    async def open(
        cls,
        connection: object,
        *,
        http_version: str | None = None,
    ) -> Client | None:
        """Start streaming on ``connection``.

        Returns ``None`` when the connection cannot flush or report
        disconnects; the caller should answer the peer with an error.
        """
        if not supports_streaming(connection):
            logger.warning("sse_connection_unsupported", connection=type(connection).__name__)
            return None

        connection.headers["Content-Type"] = "text/event-stream"
        connection.headers["Cache-Control"] = "no-cache"
        if _needs_keep_alive(http_version):
            connection.headers["Connection"] = "keep-alive"
        await connection.flush()

        client = cls(connection)
        client._worker = asyncio.create_task(client._run(), name="sse-client")
        return client

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def closing(self) -> bool:
        return self._closing

    async def send(self, event: Event) -> None:
        """Queue a copy of ``event`` for delivery.

        Waits while a previously queued event is still pending. Raises
        ``ConnectionClosedError`` once the client is shut down or gone.
        """
        if self._closed or self._closing:
            raise ConnectionClosedError()
        if not await self._enqueue(event.clone()):
            raise ConnectionClosedError()

    async def shutdown(self) -> None:
        """Stop the worker after pending events are written, and wait for it."""
        if self._closing:
            raise ClientShutdownError("client already shut down")
        self._closing = True
        await self._enqueue(_CLOSE)
        await self.wait()

    async def wait(self) -> None:
        """Wait until the worker exits, without asking it to."""
        await asyncio.shield(self._worker)

    async def _enqueue(self, item: object) -> bool:
        if self._worker.done():
            return False
        put = asyncio.ensure_future(self._queue.put(item))
        try:
            await asyncio.wait({put, self._worker}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            delivered = put.done()
            if not delivered:
                put.cancel()
        return delivered

    async def _run(self) -> None:
        disconnect = asyncio.ensure_future(self._connection.wait_disconnected())
        get: asyncio.Future[object] | None = None
        try:
            while True:
                get = asyncio.ensure_future(self._queue.get())
                await asyncio.wait({get, disconnect}, return_when=asyncio.FIRST_COMPLETED)
                if disconnect.done():
                    error = disconnect.exception()
                    if error is not None:
                        logger.warning("sse_disconnect_watch_failed", error=str(error))
                    else:
                        logger.info("sse_client_disconnected")
                    return

                item = get.result()
                if item is _CLOSE:
                    logger.debug("sse_client_shutdown")
                    return

                try:
                    await self._connection.write(item.read())
                    await self._connection.flush()
                except OSError as exc:
                    logger.info("sse_client_write_failed", error=str(exc))
                    return
        finally:
            self._closed = True
            disconnect.cancel()
            if get is not None and not get.done():
                get.cancel()


def _needs_keep_alive(http_version: str | None) -> bool:
    # HTTP/2 and later forbid connection-specific headers.
    if not http_version:
        return True
    major, _, _ = http_version.partition(".")
    try:
        return int(major) < 2
    except ValueError:
        return True
