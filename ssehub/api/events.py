"""Endpoints that push events to connected stream clients."""
from __future__ import annotations

import structlog
from fastapi import APIRouter

from ..core.hub import stream
from ..models.events import DeliveryResponse, EventIn, StatsResponse

logger = structlog.get_logger()

router = APIRouter(tags=["events"])


@router.post("/events", response_model=DeliveryResponse)
async def broadcast_event(payload: EventIn) -> DeliveryResponse:
    """Send an event to every connected client."""
    delivered = await stream.broadcast(payload.to_event())
    logger.debug("sse_event_broadcast", event_type=payload.event, delivered=delivered)
    return DeliveryResponse(delivered=delivered)


@router.post("/events/{topic}", response_model=DeliveryResponse)
async def publish_event(topic: str, payload: EventIn) -> DeliveryResponse:
    """Send an event to the clients subscribed to ``topic``."""
    delivered = await stream.publish(topic, payload.to_event())
    logger.debug("sse_event_published", topic=topic, event_type=payload.event, delivered=delivered)
    return DeliveryResponse(delivered=delivered, topic=topic)


@router.get("/stats", response_model=StatsResponse)
async def stream_stats() -> StatsResponse:
    return StatsResponse(clients=stream.num_clients())
