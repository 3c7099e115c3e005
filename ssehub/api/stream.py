"""Server-sent events endpoints."""
from __future__ import annotations

from collections.abc import Iterable

from fastapi import FastAPI

from ..core.stream import Stream


def add_stream_routes(
    app: FastAPI,
    hub: Stream,
    topics: Iterable[str] = (),
    *,
    prefix: str = "/api",
) -> None:
    """Expose ``hub`` for broadcast clients and one route per topic.

    ``/stream`` clients receive broadcasts only; ``/topics/<topic>`` clients
    are also subscribed to that topic.
    """
    app.add_route(f"{prefix}/stream", hub, methods=["GET"])
    for topic in topics:
        app.add_route(f"{prefix}/topics/{topic}", hub.topic_handler([topic]), methods=["GET"])
