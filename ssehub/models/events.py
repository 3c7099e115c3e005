"""Pydantic models for the event publishing API."""
from __future__ import annotations

from pydantic import BaseModel, Field

from ..core.event import Event


class EventIn(BaseModel):
    id: str | None = None
    event: str | None = None
    data: str = ""
    retry: int = Field(default=0, ge=0)

    def to_event(self) -> Event:
        return Event(
            self.data,
            id=self.id or "",
            type=self.event or "",
            retry=self.retry,
        )


class DeliveryResponse(BaseModel):
    delivered: int
    topic: str | None = None


class StatsResponse(BaseModel):
    clients: int
