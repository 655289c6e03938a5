"""Playback Queue Controller - the single owner of the playback session."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from pydantic import ValidationError

from ...domain.playback.entities import PlaybackSnapshot, PlaybackState, Track, TrackQueue
from ...domain.playback.events import (
    AutoplayBlocked,
    PlaybackFailed,
    PlaybackStateChanged,
    PlayerClosed,
    QueueExhausted,
    QueueReplaced,
    TrackFinished,
    TrackStarted,
    TrackUnavailable,
)
from ...domain.playback.value_objects import (
    NavigationPolicy,
    PlaybackErrorKind,
    TrackId,
    TransportState,
)
from ...domain.shared.messages import LogTemplates
from ..interfaces.playback_primitive import PrimitiveListener

if TYPE_CHECKING:
    from ...domain.shared.events import EventBus
    from ..interfaces.playback_primitive import PlaybackPrimitive

logger = logging.getLogger(__name__)

SIMULATED_URL_SCHEME = "simulated:"


class _LoadListener(PrimitiveListener):
    """Routes primitive callbacks back to the controller tagged with their load generation."""

    def __init__(self, controller: PlaybackQueueController, generation: int) -> None:
        self._controller = controller
        self._generation = generation

    def on_ready(self, duration: float) -> None:
        self._controller._handle_ready(self._generation, duration)

    def on_position_tick(self, seconds: float) -> None:
        self._controller._handle_tick(self._generation, seconds)

    def on_ended(self) -> None:
        self._controller._handle_ended(self._generation)

    def on_error(self, reason: str, kind: PlaybackErrorKind = PlaybackErrorKind.UNKNOWN) -> None:
        self._controller._handle_error(self._generation, reason, kind)


class PlaybackQueueController:
    """Owns the queue, the transport state and the single bound playback primitive.

    User intents (select, toggle, next, previous, seek, volume, close) and
    primitive callbacks (ready, tick, ended, error) are both expected on the
    same event loop. Every committed change is published synchronously as a
    :class:`PlaybackStateChanged` snapshot; no public operation raises.

    Each load is tagged with a generation number. Callbacks carrying an older
    generation belong to a superseded or closed load and are dropped.
    """

    def __init__(
        self,
        *,
        primitive: PlaybackPrimitive,
        event_bus: EventBus,
        simulated_primitive: PlaybackPrimitive | None = None,
        navigation_policy: NavigationPolicy = NavigationPolicy.CLAMP,
        auto_advance: bool = True,
        simulate_missing_audio: bool = False,
        default_volume: float = 0.8,
    ) -> None:
        self._primitive = primitive
        self._simulated_primitive = simulated_primitive
        self._event_bus = event_bus
        self._navigation_policy = navigation_policy
        self._auto_advance = auto_advance
        self._simulate_missing_audio = simulate_missing_audio and simulated_primitive is not None

        self._state = PlaybackState(volume=_clamp_unit(default_volume, fallback=0.8))
        self._generation = 0
        self._bound: PlaybackPrimitive | None = None

        self._last_snapshot = self._take_snapshot()
        self._publishing = False

        self._apply_volume(self._state.volume)

    # === Read side ===

    @property
    def snapshot(self) -> PlaybackSnapshot:
        return self._take_snapshot()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def navigation_policy(self) -> NavigationPolicy:
        return self._navigation_policy

    def is_playable(self, track: Track) -> bool:
        """Whether selecting ``track`` would start playback rather than signal unavailability."""
        if track.has_audio:
            return True
        return self._simulate_missing_audio and bool(track.duration_hint)

    def subscribe(self, handler: Callable[[PlaybackSnapshot], None]) -> Callable[[], None]:
        """Call ``handler`` with every committed snapshot; returns an unsubscribe callable."""

        def _on_state_changed(event: PlaybackStateChanged) -> None:
            handler(event.snapshot)

        self._event_bus.subscribe(PlaybackStateChanged, _on_state_changed)

        def unsubscribe() -> None:
            self._event_bus.unsubscribe(PlaybackStateChanged, _on_state_changed)

        return unsubscribe

    # === User intents ===

    def select_track(
        self,
        track_id: TrackId | str | int,
        queue_override: TrackQueue | Iterable[Track] | None = None,
    ) -> None:
        """Play ``track_id``, or toggle play/pause if it is already the current track.

        When ``queue_override`` is given and differs from the current queue it
        replaces the queue before the lookup.
        """
        try:
            wanted = TrackId.coerce(track_id)
            target_queue = self._state.queue if queue_override is None else _as_queue(queue_override)
        except (ValueError, ValidationError) as e:
            logger.warning(LogTemplates.SELECT_INVALID_ARGUMENT, track_id, e)
            return

        index = target_queue.index_of(wanted)
        if index is None:
            logger.warning(LogTemplates.TRACK_NOT_IN_QUEUE, wanted)
            return

        track = target_queue.tracks[index]
        if not self.is_playable(track):
            self._signal_unavailable(track)
            return

        replaced = target_queue != self._state.queue
        kept = self._swap_queue(target_queue) if replaced else True

        current = self._state.current_track
        if (
            current is not None
            and current.id == wanted
            and self._state.transport != TransportState.ERRORED
        ):
            logger.debug(LogTemplates.SELECT_SAME_TRACK, current.title)
            self.toggle_play_pause()
        else:
            self._load(index)

        if replaced:
            self._commit()
            self._publish_queue_replaced(kept)

    def toggle_play_pause(self) -> None:
        state = self._state
        track = state.current_track
        if track is None:
            logger.debug(LogTemplates.TOGGLE_NOTHING_SELECTED)
            return

        if not self.is_playable(track):
            self._signal_unavailable(track)
            return

        if state.transport == TransportState.PLAYING:
            if not self._command("pause", lambda primitive: primitive.pause()):
                return
            state.transition_to(TransportState.PAUSED)
            logger.debug(LogTemplates.PLAYBACK_PAUSED, track.title)
            self._commit()
        elif state.transport == TransportState.PAUSED:
            if state.duration_seconds > 0 and state.position_seconds >= state.duration_seconds:
                # Parked at the end: replay from the start.
                if not self._command("seek", lambda primitive: primitive.seek(0.0)):
                    return
                state.position_seconds = 0.0
            if not self._command("play", lambda primitive: primitive.play()):
                return
            state.transition_to(TransportState.PLAYING)
            state.clear_error()
            logger.debug(LogTemplates.PLAYBACK_RESUMED, track.title)
            self._commit()
        elif state.transport == TransportState.LOADING:
            state.play_when_ready = not state.play_when_ready
            self._commit()
        else:
            logger.debug(LogTemplates.TOGGLE_IGNORED, state.transport.value)

    def next(self) -> None:
        self._navigate(1)

    def previous(self) -> None:
        self._navigate(-1)

    def seek_to(self, seconds: float) -> None:
        state = self._state
        if not math.isfinite(seconds):
            logger.warning(LogTemplates.SEEK_INVALID, seconds)
            return
        if state.current_index is None or not state.transport.is_active:
            logger.debug(LogTemplates.SEEK_NOTHING_LOADED)
            return
        if state.duration_seconds <= 0:
            logger.debug(LogTemplates.SEEK_DURATION_UNKNOWN)
            return

        target = state.clamp_position(seconds)
        if not self._command("seek", lambda primitive: primitive.seek(target)):
            return
        state.position_seconds = target
        self._commit()

    def set_volume(self, volume: float) -> None:
        if not math.isfinite(volume):
            logger.warning(LogTemplates.VOLUME_INVALID, volume)
            return

        self._state.volume = _clamp_unit(volume)
        self._apply_volume(self._state.volume)
        self._commit()

    def close(self) -> None:
        """Stop and unbind the primitive and return to IDLE. The queue is kept."""
        self._generation += 1
        self._release_primitive()

        was_open = (
            self._state.transport != TransportState.IDLE or self._state.current_index is not None
        )
        self._state.reset_selection()
        self._commit()

        if was_open:
            logger.info(LogTemplates.PLAYER_CLOSED)
            self._event_bus.publish(PlayerClosed())

    def replace_queue(self, tracks: TrackQueue | Iterable[Track]) -> None:
        """Atomically swap in a new queue.

        The current selection follows its track id into the new queue; if the
        id is gone the player is closed.
        """
        try:
            queue = _as_queue(tracks)
        except ValidationError as e:
            logger.warning(LogTemplates.QUEUE_INVALID, e)
            return

        if queue == self._state.queue:
            return

        kept = self._swap_queue(queue)
        if not kept and self._state.transport != TransportState.IDLE:
            self._generation += 1
            self._release_primitive()
            self._state.reset_selection()
        self._commit()
        self._publish_queue_replaced(kept)

    # === Primitive callbacks ===

    def _handle_ready(self, generation: int, duration: float) -> None:
        if self._is_stale(generation, "ready"):
            return

        state = self._state
        if state.transport != TransportState.LOADING:
            logger.debug(LogTemplates.CALLBACK_IGNORED, "ready", state.transport.value)
            return

        if math.isfinite(duration) and duration > 0:
            state.duration_seconds = duration
        state.position_seconds = state.clamp_position(state.position_seconds)

        if state.play_when_ready:
            self._start_output()
        else:
            state.transition_to(TransportState.PAUSED)
            self._commit()

    def _handle_tick(self, generation: int, seconds: float) -> None:
        if self._is_stale(generation, "tick"):
            return

        state = self._state
        if state.transport not in {
            TransportState.LOADING,
            TransportState.PLAYING,
            TransportState.PAUSED,
        }:
            return
        if not math.isfinite(seconds):
            return

        state.position_seconds = state.clamp_position(seconds)
        self._commit()

    def _handle_ended(self, generation: int) -> None:
        if self._is_stale(generation, "ended"):
            return

        state = self._state
        if state.transport != TransportState.PLAYING:
            logger.debug(LogTemplates.CALLBACK_IGNORED, "ended", state.transport.value)
            return

        finished_index = state.current_index
        track = state.current_track
        if finished_index is None or track is None:
            return

        if state.duration_seconds <= 0:
            state.duration_seconds = state.position_seconds
        state.position_seconds = state.duration_seconds
        state.transition_to(TransportState.ENDED)
        logger.info(LogTemplates.TRACK_FINISHED, track.title)
        self._commit()
        self._event_bus.publish(TrackFinished.from_track(track, finished_index))

        # A handler may have closed the player or selected another track.
        if generation != self._generation or state.transport != TransportState.ENDED:
            return

        next_index = self._find_playable(finished_index, 1, wrap=False) if self._auto_advance else None
        if next_index is not None:
            self._load(next_index)
            return

        if self._bound is not None:
            try:
                self._bound.pause()
            except Exception:
                logger.exception(LogTemplates.PRIMITIVE_COMMAND_FAILED, "pause")
        state.transition_to(TransportState.PAUSED)
        logger.info(LogTemplates.QUEUE_EXHAUSTED, track.title)
        self._commit()
        self._event_bus.publish(QueueExhausted(last_track_id=track.id, last_track_title=track.title))

    def _handle_error(self, generation: int, reason: str, kind: PlaybackErrorKind) -> None:
        if self._is_stale(generation, "error"):
            return

        state = self._state
        track = state.current_track

        if kind.is_recoverable:
            if state.transport == TransportState.LOADING:
                state.play_when_ready = False
            elif state.transport == TransportState.PLAYING:
                state.transition_to(TransportState.PAUSED)
            else:
                logger.debug(LogTemplates.CALLBACK_IGNORED, "autoplay-blocked", state.transport.value)
                return
            state.record_error(reason, kind)
            logger.warning(LogTemplates.AUTOPLAY_BLOCKED, track.title if track else None, reason)
            self._commit()
            self._event_bus.publish(
                AutoplayBlocked(track_id=track.id if track else None, reason=reason)
            )
            return

        if state.transport not in {
            TransportState.LOADING,
            TransportState.PLAYING,
            TransportState.PAUSED,
        }:
            logger.debug(LogTemplates.CALLBACK_IGNORED, "error", state.transport.value)
            return

        self._fail(reason, kind)

    # === Internals ===

    def _load(self, index: int) -> None:
        state = self._state
        track = state.queue.tracks[index]
        simulated = not track.has_audio

        self._generation += 1
        generation = self._generation
        self._release_primitive()

        state.begin_load(index, simulated=simulated)
        self._commit()

        primitive = self._simulated_primitive if simulated else self._primitive
        if primitive is None:
            self._fail(f"No playback primitive for '{track.title}'", PlaybackErrorKind.LOAD)
            return
        url = f"{SIMULATED_URL_SCHEME}{track.id}" if simulated else str(track.audio_url)

        self._bound = primitive
        logger.info(LogTemplates.TRACK_LOADING, track.title, index, generation)
        self._push_volume(primitive, state.volume)
        try:
            primitive.bind(url, _LoadListener(self, generation), duration_hint=track.duration_hint)
        except Exception as e:
            logger.exception(LogTemplates.PRIMITIVE_BIND_FAILED, url)
            if generation == self._generation:
                self._fail(str(e) or "bind failed", PlaybackErrorKind.LOAD)

    def _start_output(self) -> None:
        state = self._state
        if not self._command("play", lambda primitive: primitive.play()):
            return

        state.play_when_ready = False
        state.transition_to(TransportState.PLAYING)
        state.clear_error()
        self._commit()

        track = state.current_track
        if track is not None and state.current_index is not None:
            logger.info(LogTemplates.TRACK_STARTED, track.title)
            self._event_bus.publish(
                TrackStarted.from_track(
                    track,
                    state.current_index,
                    state.duration_seconds,
                    simulated=state.simulated,
                )
            )

    def _fail(self, reason: str, kind: PlaybackErrorKind) -> None:
        """Move to ERRORED, drop the binding and surface the reason."""
        state = self._state
        track = state.current_track

        self._generation += 1
        self._release_primitive()

        state.play_when_ready = False
        state.record_error(reason, kind)
        state.transition_to(TransportState.ERRORED)
        logger.error(LogTemplates.PLAYBACK_FAILED, track.title if track else None, kind.value, reason)
        self._commit()
        self._event_bus.publish(
            PlaybackFailed(track_id=track.id if track else None, reason=reason, kind=kind)
        )

    def _command(self, name: str, command: Callable[[PlaybackPrimitive], None]) -> bool:
        """Send a transport command to the bound primitive; failures move to ERRORED."""
        primitive = self._bound
        if primitive is None:
            logger.warning(LogTemplates.PRIMITIVE_NOT_BOUND, name)
            return False
        try:
            command(primitive)
        except Exception as e:
            logger.exception(LogTemplates.PRIMITIVE_COMMAND_FAILED, name)
            self._fail(str(e) or f"{name} failed", PlaybackErrorKind.COMMAND)
            return False
        return True

    def _navigate(self, step: int) -> None:
        index = self._state.current_index
        if index is None:
            logger.debug(LogTemplates.NAVIGATION_NOTHING_SELECTED)
            return

        target = self._find_playable(
            index, step, wrap=self._navigation_policy == NavigationPolicy.WRAP
        )
        if target is None:
            logger.debug(LogTemplates.NAVIGATION_OUT_OF_BOUNDS, index, step)
            return
        self._load(target)

    def _find_playable(self, start: int, step: int, *, wrap: bool) -> int | None:
        """Nearest playable index from ``start`` in direction ``step``.

        Unplayable tracks passed over are announced with ``TrackUnavailable``.
        """
        queue = self._state.queue
        length = len(queue)
        for offset in range(1, length):
            candidate = start + step * offset
            if wrap:
                candidate %= length
            elif not queue.is_valid_index(candidate):
                return None
            track = queue.tracks[candidate]
            if self.is_playable(track):
                return candidate
            self._signal_unavailable(track)
        return None

    def _signal_unavailable(self, track: Track) -> None:
        logger.info(LogTemplates.TRACK_UNAVAILABLE, track.title)
        self._event_bus.publish(TrackUnavailable.from_track(track))

    def _swap_queue(self, queue: TrackQueue) -> bool:
        """Install ``queue``; returns whether the current selection survived."""
        current = self._state.current_track
        remapped = queue.index_of(current.id) if current is not None else None
        self._state.swap_queue(queue, remapped)
        return remapped is not None

    def _publish_queue_replaced(self, kept: bool) -> None:
        track_count = len(self._state.queue)
        logger.info(LogTemplates.QUEUE_REPLACED, track_count, kept)
        self._event_bus.publish(QueueReplaced(track_count=track_count, kept_selection=kept))

    def _release_primitive(self) -> None:
        bound, self._bound = self._bound, None
        if bound is None:
            return
        try:
            bound.unbind()
        except Exception:
            logger.exception(LogTemplates.PRIMITIVE_UNBIND_FAILED)

    def _apply_volume(self, volume: float) -> None:
        for primitive in (self._primitive, self._simulated_primitive):
            if primitive is not None:
                self._push_volume(primitive, volume)

    @staticmethod
    def _push_volume(primitive: PlaybackPrimitive, volume: float) -> None:
        """Volume is independent of transport; a rejected level is only logged."""
        try:
            primitive.set_volume(volume)
        except Exception:
            logger.exception(LogTemplates.PRIMITIVE_COMMAND_FAILED, "set_volume")

    def _is_stale(self, generation: int, callback: str) -> bool:
        if generation != self._generation:
            logger.debug(LogTemplates.STALE_CALLBACK, callback, generation, self._generation)
            return True
        return False

    def _take_snapshot(self) -> PlaybackSnapshot:
        return self._state.to_snapshot(wraps=self._navigation_policy == NavigationPolicy.WRAP)

    def _commit(self) -> None:
        """Publish the current snapshot if it changed.

        Handlers that call back into the controller do not get their snapshot
        published mid-delivery; the loop re-publishes once the current round
        has reached every handler, so the last snapshot seen is always the
        latest one.
        """
        if self._publishing:
            return

        self._publishing = True
        try:
            while True:
                snapshot = self._take_snapshot()
                if snapshot == self._last_snapshot:
                    break
                self._last_snapshot = snapshot
                self._event_bus.publish(PlaybackStateChanged(snapshot=snapshot))
        finally:
            self._publishing = False


def _as_queue(tracks: TrackQueue | Iterable[Track]) -> TrackQueue:
    if isinstance(tracks, TrackQueue):
        return tracks
    return TrackQueue.of(tracks)


def _clamp_unit(value: float, fallback: float = 0.0) -> float:
    if not math.isfinite(value):
        return fallback
    return min(1.0, max(0.0, float(value)))
