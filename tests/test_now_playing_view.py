"""Unit tests for NowPlayingConsoleView."""

from __future__ import annotations

from io import StringIO

import pytest

from studio_player.domain.playback.entities import PlaybackSnapshot, TrackQueue
from studio_player.domain.playback.events import (
    AutoplayBlocked,
    PlaybackFailed,
    PlaybackStateChanged,
    QueueExhausted,
    TrackUnavailable,
)
from studio_player.domain.playback.value_objects import TransportState
from studio_player.domain.shared.messages import PlayerUIMessages
from studio_player.infrastructure.console import NowPlayingConsoleView

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def stream():
    return StringIO()


@pytest.fixture
def view(stream, event_bus):
    view = NowPlayingConsoleView(stream, bar_width=4)
    view.attach(event_bus)
    return view


@pytest.fixture
def snapshot(make_track):
    def _make(**overrides):
        track = make_track("a", title="Midnight Dreams", producer="Doc Rolds", duration=180.0)
        fields = dict(
            queue=TrackQueue.of([track]),
            current_index=0,
            transport=TransportState.PLAYING,
            position_seconds=45.0,
            duration_seconds=180.0,
            volume=0.8,
        )
        fields.update(overrides)
        return PlaybackSnapshot(**fields)

    return _make


def _lines(stream: StringIO) -> list[str]:
    return stream.getvalue().splitlines()


# =============================================================================
# Rendering
# =============================================================================


class TestRender:
    """Tests for the status line."""

    def test_playing_line(self, view, snapshot):
        line = view.render(snapshot())

        assert line == "PLAY   Midnight Dreams - Doc Rolds  0:45 / 3:00  [#---]  vol 80%"

    def test_nothing_selected(self, view):
        assert view.render(PlaybackSnapshot()) == PlayerUIMessages.NOTHING_PLAYING

    def test_simulated_badge(self, view, snapshot):
        line = view.render(snapshot(simulated=True))

        assert line.endswith(f"({PlayerUIMessages.SIMULATED_BADGE})")

    def test_paused_label(self, view, snapshot):
        assert view.render(snapshot(transport=TransportState.PAUSED)).startswith("PAUSE")

    def test_track_without_producer(self, view, make_track):
        snap = PlaybackSnapshot(
            queue=TrackQueue.of([make_track("b", title="Cloud Nine")]),
            current_index=0,
            transport=TransportState.LOADING,
        )

        line = view.render(snap)

        assert "Cloud Nine  0:00 / 0:00" in line
        assert " - " not in line


# =============================================================================
# Event Handling
# =============================================================================


class TestEvents:
    """Tests for the view reacting to published events."""

    def test_state_change_writes_line(self, view, stream, event_bus, snapshot):
        event_bus.publish(PlaybackStateChanged(snapshot=snapshot()))

        assert _lines(stream) == [view.render(snapshot())]

    def test_identical_lines_written_once(self, view, stream, event_bus, snapshot):
        event_bus.publish(PlaybackStateChanged(snapshot=snapshot(position_seconds=45.2)))
        event_bus.publish(PlaybackStateChanged(snapshot=snapshot(position_seconds=45.7)))
        event_bus.publish(PlaybackStateChanged(snapshot=snapshot(position_seconds=46.0)))

        assert len(_lines(stream)) == 2

    def test_track_unavailable(self, view, stream, event_bus):
        event_bus.publish(TrackUnavailable(track_id="3", track_title="Trap Soul"))

        assert _lines(stream) == [f"Trap Soul: {PlayerUIMessages.PREVIEW_UNAVAILABLE}"]

    def test_playback_failed(self, view, stream, event_bus):
        event_bus.publish(PlaybackFailed(reason="Could not load media (failed)"))

        assert _lines(stream) == [
            PlayerUIMessages.PLAYBACK_ERROR.format(reason="Could not load media (failed)")
        ]

    def test_autoplay_blocked_and_queue_exhausted(self, view, stream, event_bus):
        event_bus.publish(AutoplayBlocked())
        event_bus.publish(QueueExhausted())

        assert _lines(stream) == [
            PlayerUIMessages.AUTOPLAY_BLOCKED,
            PlayerUIMessages.QUEUE_FINISHED,
        ]

    def test_detach_stops_output(self, view, stream, event_bus):
        view.detach()

        event_bus.publish(QueueExhausted())

        assert stream.getvalue() == ""

    def test_attach_twice_subscribes_once(self, view, stream, event_bus):
        view.attach(event_bus)

        event_bus.publish(QueueExhausted())

        assert len(_lines(stream)) == 1

    def test_follows_controller(self, view, stream, loaded_controller, primitive):
        loaded_controller.select_track("a")
        primitive.ready(180.0)

        lines = _lines(stream)
        assert any(line.startswith("LOAD ") for line in lines)
        assert lines[-1].startswith("PLAY ")
        assert "Beat a" in lines[-1]
