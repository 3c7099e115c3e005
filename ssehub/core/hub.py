"""Process-wide stream and the optional tick broadcaster."""
from __future__ import annotations

import asyncio

import structlog

from .factory import EventIDFactory, data_event
from .stream import Stream

logger = structlog.get_logger()


class Ticker:
    """Broadcasts a ``tick`` data event on a fixed interval."""

    def __init__(self, target: Stream, interval: float) -> None:
        self._target = target
        self._interval = interval
        self._ids = EventIDFactory(new_func=lambda: data_event("tick"), next=1)
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="sse-ticker")
        logger.info("sse_ticker_started", interval=self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("sse_ticker_stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self._target.broadcast(self._ids.new())


stream = Stream()
