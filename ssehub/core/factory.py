"""Helpers that build pre-stamped events."""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from .event import Event


class EventFactory(Protocol):
    def new(self) -> Event:
        ...


def _base_event(
    new_func: Callable[[], Event] | None,
    new_fact: EventFactory | None,
) -> Event:
    if new_func is not None:
        return new_func()
    if new_fact is not None:
        return new_fact.new()
    return Event()


@dataclass(slots=True)
class EventIDFactory:
    """Creates events carrying sequential ``id`` fields.

    The base event comes from ``new_func`` if set, otherwise from
    ``new_fact``, otherwise it is a fresh ``Event``.
    """

    new_fact: EventFactory | None = None
    new_func: Callable[[], Event] | None = None
    next: int = 0

    def new(self) -> Event:
        event = _base_event(self.new_func, self.new_fact)
        event.set_id(str(self.next))
        self.next += 1
        return event


@dataclass(slots=True)
class EventTypeFactory:
    """Creates events of one fixed type."""

    type: str
    new_fact: EventFactory | None = None
    new_func: Callable[[], Event] | None = None

    def new(self) -> Event:
        return _base_event(self.new_func, self.new_fact).set_type(self.type)


def data_event(data: str) -> Event:
    return Event().append_data(data)


def type_event(event_type: str) -> Event:
    return Event(type=event_type)
