"""Server-sent events for asyncio web services.

Three objects make up the library. ``Event`` holds one message and renders
it in wire format. ``Client`` wraps a streaming HTTP connection and runs a
worker task that writes events to it, stopping cleanly when the peer goes
away. ``Stream`` registers clients, broadcasts or publishes events to them
by topic, and doubles as an ASGI endpoint that turns each request into a
registered client.
"""
from .core.client import Client
from .core.connection import ASGIConnection, Connection
from .core.errors import ClientShutdownError, ConnectionClosedError, SSEError
from .core.event import Event
from .core.factory import EventIDFactory, EventTypeFactory, data_event, type_event
from .core.stream import Stream, TopicHandler

__all__ = [
    "ASGIConnection",
    "Client",
    "ClientShutdownError",
    "Connection",
    "ConnectionClosedError",
    "Event",
    "EventIDFactory",
    "EventTypeFactory",
    "SSEError",
    "Stream",
    "TopicHandler",
    "data_event",
    "type_event",
]
