"""Tests for event factories."""
from __future__ import annotations

from ..core.event import Event
from ..core.factory import EventIDFactory, EventTypeFactory, data_event, type_event


def test_id_factory_counts_up() -> None:
    factory = EventIDFactory()
    assert [factory.new().id for _ in range(3)] == ["0", "1", "2"]
    assert factory.next == 3


def test_id_factory_uses_new_func() -> None:
    factory = EventIDFactory(new_func=lambda: data_event("tick"), next=10)
    event = factory.new()
    assert event.render() == "id: 10\ndata: tick\n\n"


def test_new_func_takes_precedence_over_new_fact() -> None:
    factory = EventIDFactory(
        new_fact=EventTypeFactory("from-fact"),
        new_func=lambda: type_event("from-func"),
    )
    assert factory.new().type == "from-func"


def test_factories_compose() -> None:
    factory = EventTypeFactory("status", new_fact=EventIDFactory(next=1))
    first = factory.new()
    second = factory.new()
    assert (first.id, first.type) == ("1", "status")
    assert (second.id, second.type) == ("2", "status")


def test_type_factory_defaults_to_fresh_event() -> None:
    event = EventTypeFactory("ping").new()
    assert isinstance(event, Event)
    assert event.render() == "event: ping\n\n"


def test_helpers() -> None:
    assert data_event("a\nb").data == ("a", "b")
    assert type_event("x").render() == "event: x\n\n"
