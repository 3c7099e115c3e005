"""Client registry with broadcast and topic publishing.

A ``Stream`` indexes live clients by identity together with the topics each
one subscribed to. It is also an ASGI application: every accepted request
becomes a client that stays registered for as long as its connection lives.
"""
from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Iterable

import structlog
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from .client import Client
from .connection import ASGIConnection, Receive, Scope, Send
from .errors import ConnectionClosedError
from .event import Event
from .locks import ReadWriteLock

logger = structlog.get_logger()

EVENT_STREAM = "text/event-stream"

ConnectHook = Callable[[Request, Client], Awaitable[None] | None]
ConnectionFactory = Callable[[Scope, Receive, Send], object]


class Stream:
    """Fan events out to registered clients, optionally filtered by topic."""

    def __init__(self, *, connection_factory: ConnectionFactory = ASGIConnection) -> None:
        self._clients: dict[Client, set[str]] = {}
        self._lock = ReadWriteLock()
        self._connect_hook: ConnectHook | None = None
        self.connection_factory = connection_factory

    async def register(self, client: Client) -> None:
        """Add ``client`` for broadcasts; no effect if already registered."""
        async with self._lock.write():
            self._clients.setdefault(client, set())

    async def remove(self, client: Client) -> None:
        """Forget ``client`` without shutting it down."""
        async with self._lock.write():
            self._clients.pop(client, None)

    async def subscribe(self, topic: str, client: Client) -> None:
        """Subscribe ``client`` to ``topic``, registering it if needed."""
        async with self._lock.write():
            self._clients.setdefault(client, set()).add(topic)

    async def unsubscribe(self, topic: str, client: Client) -> None:
        """Drop the topic membership only; the client keeps getting broadcasts."""
        async with self._lock.write():
            topics = self._clients.get(client)
            if topics is not None:
                topics.discard(topic)

    async def broadcast(self, event: Event) -> int:
        """Send ``event`` to every registered client.

        The client list is read under the shared lock and the sends happen
        after it is released, so a stalled client never holds up
        registration or later broadcasts. Returns the number of clients that
        accepted the event.
        """
        async with self._lock.read():
            targets = list(self._clients)
        return await self._deliver(targets, event)

    async def publish(self, topic: str, event: Event) -> int:
        """Send ``event`` to the clients subscribed to ``topic``."""
        async with self._lock.read():
            targets = [client for client, topics in self._clients.items() if topic in topics]
        return await self._deliver(targets, event, topic=topic)

    async def shutdown(self) -> None:
        """Shut down and unregister every client."""
        async with self._lock.write():
            clients = [client for client in self._clients if not client.closing]
            await asyncio.gather(*(client.shutdown() for client in clients))
            self._clients.clear()
        logger.info("sse_stream_shutdown", clients=len(clients))

    def num_clients(self) -> int:
        """Best-effort count of registered clients."""
        return len(self._clients)

    def __len__(self) -> int:
        return len(self._clients)

    def topics(self, client: Client) -> frozenset[str]:
        return frozenset(self._clients.get(client, ()))

    def set_connect_hook(self, hook: ConnectHook | None) -> None:
        """Set the callback run for each client accepted over HTTP.

        Only one hook is kept; setting another replaces it. The hook runs on
        the request's task after the client is registered, so it may already
        be receiving events.
        """
        self._connect_hook = hook

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self._serve(scope, receive, send, ())

    def topic_handler(self, topics: Iterable[str]) -> TopicHandler:
        """Return an ASGI app that also subscribes each client to ``topics``."""
        return TopicHandler(self, topics)

    async def _deliver(self, clients: list[Client], event: Event, *, topic: str | None = None) -> int:
        results = await asyncio.gather(
            *(client.send(event) for client in clients),
            return_exceptions=True,
        )
        delivered = 0
        for result in results:
            if isinstance(result, ConnectionClosedError):
                logger.debug("sse_send_skipped", topic=topic, reason=str(result))
            elif isinstance(result, BaseException):
                raise result
            else:
                delivered += 1
        return delivered

    async def _serve(self, scope: Scope, receive: Receive, send: Send, topics: tuple[str, ...]) -> None:
        if scope["type"] != "http":
            raise RuntimeError(f"Stream only serves HTTP requests, not {scope['type']!r}")

        request = Request(scope, receive)
        if not accepts_event_stream(request):
            response = PlainTextResponse("This is an EventStream endpoint", status_code=406)
            await response(scope, receive, send)
            return

        connection = self.connection_factory(scope, receive, send)
        client = await Client.open(connection, http_version=scope.get("http_version"))
        if client is None:
            response = PlainTextResponse("EventStream not supported for this connection", status_code=500)
            await response(scope, receive, send)
            return

        await self.register(client)
        for topic in topics:
            await self.subscribe(topic, client)
        logger.info("sse_client_connected", path=scope.get("path"), topics=list(topics))

        try:
            hook = self._connect_hook
            if hook is not None:
                result = hook(request, client)
                if inspect.isawaitable(result):
                    await result
            await client.wait()
        finally:
            await self.remove(client)
            if not client.closed and not client.closing:
                await client.shutdown()
            close = getattr(connection, "close", None)
            if close is not None:
                await close()


class TopicHandler:
    """ASGI app registering its clients on a stream plus a fixed topic list."""

    def __init__(self, stream: Stream, topics: Iterable[str]) -> None:
        self.stream = stream
        self.topics = tuple(topics)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.stream._serve(scope, receive, send, self.topics)


def accepts_event_stream(request: Request) -> bool:
    """Check whether the request's Accept header lists the SSE media type."""
    accept = request.headers.get("accept", "")
    return any(
        part.split(";", 1)[0].strip().lower() == EVENT_STREAM
        for part in accept.split(",")
    )
