from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable

import pytest

from studio_player.application.interfaces.playback_primitive import (
    PlaybackPrimitive,
    PrimitiveListener,
)
from studio_player.application.interfaces.scheduler import ScheduledCall, Scheduler
from studio_player.domain.playback.value_objects import PlaybackErrorKind
from studio_player.domain.shared.exceptions import PlaybackPrimitiveError

# ============================================================================
# Test Doubles
# ============================================================================


class FakePrimitive(PlaybackPrimitive):
    """Primitive that records commands and lets tests fire callbacks by hand."""

    def __init__(self) -> None:
        self.commands: list[tuple] = []
        self.listeners: list[PrimitiveListener] = []
        self.listener: PrimitiveListener | None = None
        self.url: str | None = None
        self.volume: float | None = None
        self.failing: set[str] = set()

    def _record(self, *command: object) -> None:
        self.commands.append(command)
        if command[0] in self.failing:
            raise PlaybackPrimitiveError(str(command[0]), "boom")

    def bind(self, url, listener, *, duration_hint=None):
        self._record("bind", url)
        self.url = url
        self.listener = listener
        self.listeners.append(listener)

    def play(self):
        self._record("play")

    def pause(self):
        self._record("pause")

    def seek(self, seconds):
        self._record("seek", seconds)

    def set_volume(self, volume):
        self._record("set_volume", volume)
        self.volume = volume

    def unbind(self):
        self._record("unbind")
        self.listener = None
        self.url = None

    # Callback helpers

    def ready(self, duration: float = 180.0) -> None:
        assert self.listener is not None
        self.listener.on_ready(duration)

    def tick(self, seconds: float) -> None:
        assert self.listener is not None
        self.listener.on_position_tick(seconds)

    def end(self) -> None:
        assert self.listener is not None
        self.listener.on_ended()

    def error(self, reason: str = "decode failed", kind=PlaybackErrorKind.DECODE) -> None:
        assert self.listener is not None
        self.listener.on_error(reason, kind)

    def names(self) -> list[str]:
        return [command[0] for command in self.commands]

    def clear(self) -> None:
        self.commands.clear()


class _ManualCall(ScheduledCall):
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Scheduler whose clock only moves when a test calls :meth:`advance`."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, _ManualCall, Callable[[], None]]] = []
        self._seq = itertools.count()

    def call_later(self, delay, callback):
        handle = _ManualCall()
        heapq.heappush(self._queue, (self.now + max(0.0, delay), next(self._seq), handle, callback))
        return handle

    def time(self) -> float:
        return self.now

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def advance(self, seconds: float = 0.0) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = due
            callback()
        self.now = target


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def event_bus():
    """Fresh synchronous event bus."""
    from studio_player.domain.shared.events import EventBus

    return EventBus()


@pytest.fixture(autouse=True)
def reset_global_state():
    """Reset global singletons between tests."""
    yield
    from studio_player.config.settings import clear_settings_cache
    from studio_player.domain.shared.events import reset_event_bus

    reset_event_bus()
    clear_settings_cache()


@pytest.fixture
def primitive():
    return FakePrimitive()


@pytest.fixture
def simulated_primitive():
    return FakePrimitive()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def make_track():
    """Factory for tracks; tracks have audio unless ``audio_url=None`` is passed."""
    from studio_player.domain.playback.entities import Track

    def _make(track_id: str, *, audio_url: str | None = "auto", duration: float | None = 180.0, **kwargs):
        if audio_url == "auto":
            audio_url = f"http://localhost:3000/uploads/{track_id}.mp3"
        return Track(
            id=track_id,
            title=kwargs.pop("title", f"Beat {track_id}"),
            audio_url=audio_url,
            duration_hint=duration,
            **kwargs,
        )

    return _make


@pytest.fixture
def tracks(make_track):
    """Three playable tracks: a, b, c."""
    return [make_track("a"), make_track("b"), make_track("c")]


@pytest.fixture
def recorder(event_bus):
    """Collects every published event by type, in publish order."""
    from studio_player.domain.playback import events as playback_events

    recorded: list = []
    for name in (
        "PlaybackStateChanged",
        "TrackStarted",
        "TrackFinished",
        "TrackUnavailable",
        "PlaybackFailed",
        "AutoplayBlocked",
        "QueueReplaced",
        "QueueExhausted",
        "PlayerClosed",
    ):
        event_bus.subscribe(getattr(playback_events, name), recorded.append)
    return recorded


@pytest.fixture
def controller(primitive, event_bus):
    """Controller with a fake primitive and no simulation."""
    from studio_player.application.services.playback_controller import PlaybackQueueController

    return PlaybackQueueController(primitive=primitive, event_bus=event_bus)


@pytest.fixture
def loaded_controller(controller, tracks):
    """Controller whose queue holds the three sample tracks."""
    controller.replace_queue(tracks)
    return controller
