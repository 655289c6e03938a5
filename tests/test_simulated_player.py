"""
Unit Tests for the Simulated Playback Primitive

Tests for:
- Ready / error reporting on bind
- Tick cadence and end of track on a manual clock
- Pause, seek and unbind
- Driving the controller end to end without real audio
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from studio_player.application.services.playback_controller import PlaybackQueueController
from studio_player.domain.playback.value_objects import PlaybackErrorKind, TransportState
from studio_player.domain.shared.exceptions import PlaybackPrimitiveError
from studio_player.infrastructure.audio.simulated_player import SimulatedPlaybackPrimitive


@pytest.fixture
def sim(scheduler):
    return SimulatedPlaybackPrimitive(scheduler, tick_interval=1.0, ready_delay=0.5)


@pytest.fixture
def listener():
    return MagicMock()


class TestBind:
    """Tests for binding a simulated resource."""

    def test_ready_after_delay(self, sim, scheduler, listener):
        sim.bind("simulated:a", listener, duration_hint=10.0)

        scheduler.advance(0.4)
        listener.on_ready.assert_not_called()

        scheduler.advance(0.1)
        listener.on_ready.assert_called_once_with(10.0)
        assert sim.url == "simulated:a"

    @pytest.mark.parametrize("hint", [None, 0.0])
    def test_missing_duration_reports_load_error(self, sim, scheduler, listener, hint):
        sim.bind("simulated:a", listener, duration_hint=hint)

        scheduler.advance(0.0)

        listener.on_error.assert_called_once()
        assert listener.on_error.call_args[0][1] == PlaybackErrorKind.LOAD
        listener.on_ready.assert_not_called()

    def test_rebind_cancels_pending_ready(self, sim, scheduler, listener):
        second = MagicMock()
        sim.bind("simulated:a", listener, duration_hint=10.0)
        sim.bind("simulated:b", second, duration_hint=20.0)

        scheduler.advance(1.0)

        listener.on_ready.assert_not_called()
        second.on_ready.assert_called_once_with(20.0)

    def test_unbind_cancels_everything(self, sim, scheduler, listener):
        sim.bind("simulated:a", listener, duration_hint=10.0)
        sim.unbind()

        scheduler.advance(5.0)

        listener.on_ready.assert_not_called()
        assert sim.url is None
        assert scheduler.pending == 0

    def test_commands_require_binding(self, sim):
        with pytest.raises(PlaybackPrimitiveError):
            sim.play()
        with pytest.raises(PlaybackPrimitiveError):
            sim.seek(1.0)

    def test_pause_and_volume_without_binding(self, sim):
        sim.pause()
        sim.set_volume(0.3)

        assert sim.volume == 0.3


class TestPlayback:
    """Tests for the virtual clock."""

    @pytest.fixture
    def playing(self, sim, scheduler, listener):
        sim.bind("simulated:a", listener, duration_hint=3.0)
        scheduler.advance(0.5)
        sim.play()
        return sim

    def test_ticks_every_interval(self, playing, scheduler, listener):
        scheduler.advance(2.0)

        ticks = [c.args[0] for c in listener.on_position_tick.call_args_list]
        assert ticks == [1.0, 2.0]
        assert playing.is_outputting

    def test_reaches_end(self, playing, scheduler, listener):
        scheduler.advance(3.0)

        assert listener.on_position_tick.call_args_list[-1].args[0] == 3.0
        listener.on_ended.assert_called_once()
        assert playing.is_outputting is False
        assert scheduler.pending == 0

    def test_pause_freezes_position(self, playing, scheduler, listener):
        scheduler.advance(1.5)
        playing.pause()

        scheduler.advance(10.0)

        assert playing.position == 1.5
        listener.on_ended.assert_not_called()

    def test_resume_continues_from_position(self, playing, scheduler, listener):
        scheduler.advance(1.5)
        playing.pause()
        playing.play()

        scheduler.advance(1.5)

        listener.on_ended.assert_called_once()

    def test_seek_while_playing(self, playing, scheduler, listener):
        playing.seek(2.5)

        scheduler.advance(0.5)

        listener.on_ended.assert_called_once()

    def test_seek_is_clamped(self, playing):
        playing.seek(99.0)

        assert playing.position == 3.0

    def test_play_after_end_restarts(self, playing, scheduler, listener):
        scheduler.advance(3.0)

        playing.play()
        scheduler.advance(1.0)

        assert listener.on_position_tick.call_args_list[-1].args[0] == 1.0

    def test_listener_pausing_during_tick_stops_ticks(self, sim, scheduler):
        listener = MagicMock()
        listener.on_position_tick.side_effect = lambda seconds: sim.pause()
        sim.bind("simulated:a", listener, duration_hint=10.0)
        scheduler.advance(0.5)
        sim.play()

        scheduler.advance(5.0)

        assert listener.on_position_tick.call_count == 1


class TestWithController:
    """The controller drives simulated beats like real ones."""

    def test_demo_beat_plays_to_the_end(self, make_track, scheduler, event_bus, primitive):
        sim = SimulatedPlaybackPrimitive(scheduler, tick_interval=0.25)
        controller = PlaybackQueueController(
            primitive=primitive,
            simulated_primitive=sim,
            event_bus=event_bus,
            simulate_missing_audio=True,
        )
        controller.replace_queue(
            [make_track("1", audio_url=None, duration=2.0), make_track("2", audio_url=None, duration=1.0)]
        )

        controller.select_track("1")
        scheduler.advance(0.0)
        assert controller.snapshot.transport == TransportState.PLAYING
        assert controller.snapshot.simulated is True

        scheduler.advance(1.0)
        assert controller.snapshot.position_seconds == 1.0

        scheduler.advance(1.0)
        assert controller.snapshot.current_index == 1

        scheduler.advance(0.0)
        scheduler.advance(1.0)
        snapshot = controller.snapshot
        assert snapshot.transport == TransportState.PAUSED
        assert snapshot.position_seconds == snapshot.duration_seconds == 1.0

    def test_pause_via_controller_stops_clock(self, make_track, scheduler, event_bus, primitive):
        sim = SimulatedPlaybackPrimitive(scheduler)
        controller = PlaybackQueueController(
            primitive=primitive,
            simulated_primitive=sim,
            event_bus=event_bus,
            simulate_missing_audio=True,
        )
        controller.replace_queue([make_track("1", audio_url=None, duration=5.0)])
        controller.select_track("1")
        scheduler.advance(0.0)

        scheduler.advance(1.0)
        controller.toggle_play_pause()
        scheduler.advance(10.0)

        assert controller.snapshot.transport == TransportState.PAUSED
        assert controller.snapshot.position_seconds == 1.0
