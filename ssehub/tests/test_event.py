"""Tests for the event wire encoder."""
from __future__ import annotations

import pytest

from ..core.event import Event


def test_render_orders_fields() -> None:
    event = Event().set_id("7").set_type("tick").append_data("hello")
    assert event.render() == "event: tick\nid: 7\ndata: hello\n\n"


def test_render_includes_retry_last() -> None:
    event = Event("payload", id="1", type="update", retry=1500)
    assert str(event) == "event: update\nid: 1\ndata: payload\nretry: 1500\n\n"


def test_empty_event_is_blank_line() -> None:
    assert Event().render() == "\n"


def test_render_is_idempotent() -> None:
    event = Event("one\ntwo", id="3")
    assert event.render() == event.render()
    assert bytes(event) == event.render().encode("utf-8")


def test_append_data_drops_blank_lines() -> None:
    event = Event().append_data("a\n\nb")
    assert event.data == ("a", "b")
    assert event.render() == "data: a\ndata: b\n\n"


def test_set_data_replaces_lines() -> None:
    event = Event("first\nsecond")
    event.set_data("third")
    assert event.render() == "data: third\n\n"


@pytest.mark.parametrize(
    "mutate, expected",
    [
        (lambda e: e.set_id("9"), "id: 9\ndata: x\n\n"),
        (lambda e: e.set_type("ping"), "event: ping\ndata: x\n\n"),
        (lambda e: e.set_retry(10), "data: x\nretry: 10\n\n"),
        (lambda e: e.set_data("y"), "data: y\n\n"),
        (lambda e: e.append_data("y"), "data: x\ndata: y\n\n"),
        (lambda e: e.write(b"y\n"), "data: x\ndata: y\n\n"),
    ],
)
def test_mutation_discards_cached_bytes(mutate, expected) -> None:
    event = Event("x")
    assert event.render() == "data: x\n\n"
    mutate(event)
    assert event.render() == expected


def test_write_reports_bytes_accepted() -> None:
    event = Event()
    payload = "first\nsecond\n".encode("utf-8")
    assert event.write(payload) == len(payload)
    assert event.data == ("first", "second")


def test_negative_retry_rejected() -> None:
    with pytest.raises(ValueError):
        Event().set_retry(-1)


def test_read_in_chunks_until_exhausted() -> None:
    event = Event("hello", id="1")
    wire = b"id: 1\ndata: hello\n\n"

    chunks = []
    while True:
        chunk = event.read(4)
        if not chunk:
            break
        chunks.append(chunk)

    assert b"".join(chunks) == wire
    assert all(len(chunk) <= 4 for chunk in chunks)
    assert event.read() == b""


def test_read_restarts_after_mutation() -> None:
    event = Event("hello")
    assert event.read() == b"data: hello\n\n"
    assert event.read() == b""
    event.set_id("2")
    assert event.read() == b"id: 2\ndata: hello\n\n"


def test_write_raw_bypasses_fields() -> None:
    source = Event("copied", type="note")
    event = Event()
    raw = source.render().encode("utf-8")

    assert event.write_raw(raw) == len(raw)
    assert event.read() == raw
    assert event.render() == source.render()
    assert event.data == ()


def test_structured_mutation_discards_raw_content() -> None:
    event = Event()
    event.write_raw(b"data: raw\n\n")
    event.set_id("5")
    assert event.render() == "id: 5\n\n"


def test_clone_is_independent() -> None:
    original = Event("a", id="1", type="t", retry=5)
    original.render()
    copy = original.clone()
    assert copy.render() == original.render()

    copy.append_data("b").set_id("2")
    assert original.render() == "event: t\nid: 1\ndata: a\nretry: 5\n\n"

    original.set_type("changed")
    assert copy.render() == "event: t\nid: 2\ndata: a\ndata: b\nretry: 5\n\n"


def test_setters_chain() -> None:
    event = Event()
    assert event.set_id("1").set_type("t").set_retry(1).set_data("d").append_data("e") is event


def test_write_accepts_invalid_utf8() -> None:
    event = Event()
    payload = b"caf\xe9\n\xff\xfe"

    assert event.write(payload) == len(payload)
    assert len(event.data) == 2
    assert event.read() == b"data: caf\xe9\ndata: \xff\xfe\n\n"
    assert bytes(event) == b"data: caf\xe9\ndata: \xff\xfe\n\n"


def test_clone_keeps_undecodable_bytes() -> None:
    event = Event()
    event.write(b"\x80raw")
    assert event.clone().read() == b"data: \x80raw\n\n"
