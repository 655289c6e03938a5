"""Now-playing status line for terminals."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any, TextIO

from studio_player.domain.playback.events import (
    AutoplayBlocked,
    PlaybackFailed,
    PlaybackStateChanged,
    QueueExhausted,
    TrackUnavailable,
)
from studio_player.domain.playback.value_objects import TransportState
from studio_player.domain.shared.messages import PlayerUIMessages
from studio_player.utils.text import format_volume, progress_bar, truncate

if TYPE_CHECKING:
    from studio_player.domain.playback.entities import PlaybackSnapshot
    from studio_player.domain.shared.events import DomainEvent, EventBus

TRANSPORT_LABELS: dict[TransportState, str] = {
    TransportState.IDLE: "     ",
    TransportState.LOADING: "LOAD ",
    TransportState.PLAYING: "PLAY ",
    TransportState.PAUSED: "PAUSE",
    TransportState.ENDED: "END  ",
    TransportState.ERRORED: "ERROR",
}


class NowPlayingConsoleView:
    """Read-only observer rendering the playback session as text lines.

    Only lines that differ from the previous one are written, so position
    ticks inside the same second produce no output.
    """

    def __init__(self, stream: TextIO | None = None, *, bar_width: int = 20) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._bar_width = bar_width
        self._last_line: str | None = None
        self._event_bus: EventBus | None = None
        self._handlers: list[tuple[type[DomainEvent], Any]] = [
            (PlaybackStateChanged, self._on_state_changed),
            (TrackUnavailable, self._on_track_unavailable),
            (PlaybackFailed, self._on_playback_failed),
            (AutoplayBlocked, self._on_autoplay_blocked),
            (QueueExhausted, self._on_queue_exhausted),
        ]

    def attach(self, event_bus: EventBus) -> None:
        if self._event_bus is not None:
            return
        for event_type, handler in self._handlers:
            event_bus.subscribe(event_type, handler)
        self._event_bus = event_bus

    def detach(self) -> None:
        if self._event_bus is None:
            return
        for event_type, handler in self._handlers:
            self._event_bus.unsubscribe(event_type, handler)
        self._event_bus = None

    def render(self, snapshot: PlaybackSnapshot) -> str:
        track = snapshot.current_track
        if track is None:
            return PlayerUIMessages.NOTHING_PLAYING

        title = truncate(track.title)
        if track.producer:
            title = f"{title} - {truncate(track.producer, 24)}"

        parts = [
            TRANSPORT_LABELS[snapshot.transport],
            title,
            f"{snapshot.position_formatted} / {snapshot.duration_formatted}",
            progress_bar(snapshot.progress_percentage, self._bar_width),
            f"vol {format_volume(snapshot.volume)}",
        ]
        if snapshot.simulated:
            parts.append(f"({PlayerUIMessages.SIMULATED_BADGE})")
        return "  ".join(parts)

    def _write(self, line: str) -> None:
        self._stream.write(line + "\n")
        self._stream.flush()

    def _on_state_changed(self, event: PlaybackStateChanged) -> None:
        line = self.render(event.snapshot)
        if line == self._last_line:
            return
        self._last_line = line
        self._write(line)

    def _on_track_unavailable(self, event: TrackUnavailable) -> None:
        self._write(f"{event.track_title}: {PlayerUIMessages.PREVIEW_UNAVAILABLE}")

    def _on_playback_failed(self, event: PlaybackFailed) -> None:
        self._write(PlayerUIMessages.PLAYBACK_ERROR.format(reason=event.reason))

    def _on_autoplay_blocked(self, event: AutoplayBlocked) -> None:
        self._write(PlayerUIMessages.AUTOPLAY_BLOCKED)

    def _on_queue_exhausted(self, event: QueueExhausted) -> None:
        self._write(PlayerUIMessages.QUEUE_FINISHED)
