"""Server-sent event message and its wire-format encoder."""
from __future__ import annotations

from collections.abc import Iterable


class Event:
    """One SSE message.

    The wire rendering is cached and regenerated lazily: every structured
    mutation marks the cache dirty, and the next ``read``/``render`` rebuilds
    it. An event is not safe to mutate while another task is reading it;
    ``Client.send`` hands each delivery worker its own clone.
    """

    __slots__ = ("_id", "_type", "_data", "_retry", "_buf", "_pos", "_dirty", "_raw")

    def __init__(
        self,
        data: str | None = None,
        *,
        id: str = "",
        type: str = "",
        retry: int = 0,
    ) -> None:
        self._id = ""
        self._type = ""
        self._data: list[str] = []
        self._retry = 0
        self._buf = bytearray()
        self._pos = 0
        self._dirty = True
        self._raw = False
        self.set_id(id).set_type(type).set_retry(retry)
        if data is not None:
            self.append_data(data)

    @property
    def id(self) -> str:
        return self._id

    @property
    def type(self) -> str:
        return self._type

    @property
    def data(self) -> tuple[str, ...]:
        return tuple(self._data)

    @property
    def retry(self) -> int:
        return self._retry

    def set_id(self, value: str) -> Event:
        self._id = value
        return self._invalidate()

    def set_type(self, value: str) -> Event:
        self._type = value
        return self._invalidate()

    def set_retry(self, value: int) -> Event:
        """Set the reconnection delay in milliseconds; ``0`` leaves it unset."""
        if value < 0:
            raise ValueError(f"retry must be >= 0, got {value}")
        self._retry = int(value)
        return self._invalidate()

    def set_data(self, value: str) -> Event:
        """Replace every data line with the lines of ``value``."""
        self._data = list(_split_lines(value))
        return self._invalidate()

    def append_data(self, value: str) -> Event:
        """Append the lines of ``value``; blank lines are dropped."""
        self._data.extend(_split_lines(value))
        return self._invalidate()

    def write(self, payload: bytes) -> int:
        """File-style write; each call contributes one or more data lines.

        Bytes that are not valid UTF-8 are kept as-is and come back unchanged
        from ``read``.
        """
        self.append_data(payload.decode("utf-8", "surrogateescape"))
        return len(payload)

    def write_raw(self, payload: bytes) -> int:
        """Append already-encoded wire bytes, bypassing the structured fields.

        Only meant for rebuilding a previously serialised event. Any later
        structured mutation throws the raw content away.
        """
        if self._dirty:
            self._buf.clear()
            self._pos = 0
        self._buf.extend(payload)
        self._dirty = False
        self._raw = True
        return len(payload)

    def read(self, size: int = -1) -> bytes:
        """Read wire bytes, regenerating them first if the event changed.

        Successive calls continue where the previous one stopped; ``b""``
        signals the end of the event until the next mutation.
        """
        if self._dirty:
            self._regenerate()
        end = len(self._buf) if size is None or size < 0 else self._pos + size
        chunk = bytes(self._buf[self._pos:end])
        self._pos += len(chunk)
        return chunk

    def render(self) -> str:
        """Return the complete wire text, rewinding any partial read."""
        if not self._raw:
            self._regenerate()
        self._pos = 0
        return self._buf.decode("utf-8", "surrogateescape")

    def clone(self) -> Event:
        """Copy the structured fields; the cached buffer is not shared."""
        copy = Event(id=self._id, type=self._type, retry=self._retry)
        copy._data = list(self._data)
        return copy

    def __str__(self) -> str:
        return self.render()

    def __bytes__(self) -> bytes:
        return self.render().encode("utf-8", "surrogateescape")

    def __repr__(self) -> str:
        return (
            f"Event(id={self._id!r}, type={self._type!r}, "
            f"data={self._data!r}, retry={self._retry!r})"
        )

    def _invalidate(self) -> Event:
        self._dirty = True
        self._raw = False
        return self

    def _regenerate(self) -> None:
        lines: list[str] = []
        if self._type:
            lines.append(f"event: {self._type}\n")
        if self._id:
            lines.append(f"id: {self._id}\n")
        lines.extend(f"data: {entry}\n" for entry in self._data)
        if self._retry > 0:
            lines.append(f"retry: {self._retry}\n")
        lines.append("\n")
        self._buf = bytearray("".join(lines).encode("utf-8", "surrogateescape"))
        self._pos = 0
        self._dirty = False


def _split_lines(value: str) -> Iterable[str]:
    return (entry for entry in value.split("\n") if entry)
