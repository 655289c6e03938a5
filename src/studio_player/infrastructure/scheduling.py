"""Scheduler implementation on top of the asyncio event loop."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from studio_player.application.interfaces.scheduler import ScheduledCall, Scheduler


class _AsyncioScheduledCall(ScheduledCall):
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()


class AsyncioScheduler(Scheduler):
    """Runs callbacks with ``loop.call_later`` on the player's loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        return _AsyncioScheduledCall(self.loop.call_later(max(0.0, delay), callback))

    def time(self) -> float:
        return self.loop.time()
