"""
Simulated Playback Primitive

Timer-driven stand-in for beats that have no uploaded audio file yet, so the
player flow (progress, end of track, auto-advance) can be previewed without
a real resource. It honours the same ready/tick/ended/error contract as a
real primitive; observers cannot tell the difference except through the
``simulated`` flag on the snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from studio_player.application.interfaces.playback_primitive import (
    PlaybackPrimitive,
    PrimitiveListener,
)
from studio_player.application.interfaces.scheduler import ScheduledCall, Scheduler
from studio_player.domain.playback.value_objects import PlaybackErrorKind
from studio_player.domain.shared.exceptions import PlaybackPrimitiveError
from studio_player.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL: float = 0.25


class SimulatedPlaybackPrimitive(PlaybackPrimitive):
    """Advances a virtual clock while "playing" and reports it like real audio."""

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        ready_delay: float = 0.0,
    ) -> None:
        self._scheduler = scheduler
        self._tick_interval = tick_interval if tick_interval > 0 else DEFAULT_TICK_INTERVAL
        self._ready_delay = max(0.0, ready_delay)

        self._listener: PrimitiveListener | None = None
        self._url: str | None = None
        self._duration = 0.0
        # Position at the moment output last started or stopped.
        self._position = 0.0
        # Scheduler time output started at; None while not outputting.
        self._anchor: float | None = None
        self._pending: ScheduledCall | None = None
        self._volume = 1.0

    @property
    def url(self) -> str | None:
        return self._url

    @property
    def volume(self) -> float:
        return self._volume

    @property
    def is_outputting(self) -> bool:
        return self._anchor is not None

    @property
    def position(self) -> float:
        if self._anchor is None:
            return self._position
        elapsed = self._scheduler.time() - self._anchor
        return min(self._duration, self._position + elapsed)

    def bind(
        self, url: str, listener: PrimitiveListener, *, duration_hint: float | None = None
    ) -> None:
        self.unbind()
        self._url = url
        self._listener = listener

        if not duration_hint or duration_hint <= 0:
            self._schedule(
                0.0,
                lambda: listener.on_error(
                    ErrorMessages.SIMULATED_NO_DURATION, PlaybackErrorKind.LOAD
                ),
            )
            return

        self._duration = float(duration_hint)
        logger.debug(LogTemplates.SIMULATED_BOUND, url, self._duration)
        self._schedule(self._ready_delay, lambda: listener.on_ready(self._duration))

    def play(self) -> None:
        self._require_bound("play")
        if self._anchor is not None:
            return
        if self._position >= self._duration:
            self._position = 0.0
        self._anchor = self._scheduler.time()
        self._cancel_pending()
        self._schedule(self._next_tick_delay(), self._tick)

    def pause(self) -> None:
        if self._anchor is None:
            return
        self._position = self.position
        self._anchor = None
        self._cancel_pending()

    def seek(self, seconds: float) -> None:
        self._require_bound("seek")
        self._position = min(max(0.0, seconds), self._duration)
        if self._anchor is not None:
            self._anchor = self._scheduler.time()
            self._cancel_pending()
            self._schedule(self._next_tick_delay(), self._tick)

    def set_volume(self, volume: float) -> None:
        self._volume = volume

    def unbind(self) -> None:
        self._cancel_pending()
        self._listener = None
        self._url = None
        self._anchor = None
        self._position = 0.0
        self._duration = 0.0

    def _tick(self) -> None:
        self._pending = None
        listener = self._listener
        if listener is None or self._anchor is None:
            return

        position = self.position
        if position >= self._duration:
            self._position = self._duration
            self._anchor = None
            listener.on_position_tick(self._duration)
            if self._listener is listener:
                logger.debug(LogTemplates.SIMULATED_ENDED, self._url)
                listener.on_ended()
            return

        listener.on_position_tick(position)
        # The listener may have paused, seeked or rebound us meanwhile.
        if self._listener is listener and self._anchor is not None and self._pending is None:
            self._schedule(self._next_tick_delay(), self._tick)

    def _next_tick_delay(self) -> float:
        remaining = self._duration - self.position
        return max(0.0, min(self._tick_interval, remaining))

    def _schedule(self, delay: float, callback: Callable[[], None]) -> None:
        def _run() -> None:
            self._pending = None
            callback()

        self._pending = self._scheduler.call_later(delay, _run)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _require_bound(self, command: str) -> None:
        if self._listener is None:
            raise PlaybackPrimitiveError(command, ErrorMessages.PRIMITIVE_NOT_BOUND)
