"""Domain events for the playback bounded context.

``PlaybackStateChanged`` carries the full snapshot and is published after
every committed transition. The remaining events are signals: things a
caller may want to react to (show a "coming soon" badge, prompt for a
click after autoplay was blocked) that are not visible in the state alone.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from studio_player.domain.playback.entities import PlaybackSnapshot
from studio_player.domain.playback.value_objects import (
    OptionalTrackIdField,
    PlaybackErrorKind,
    TrackIdField,
)
from studio_player.domain.shared.events import DomainEvent
from studio_player.domain.shared.types import NonNegativeFloat, NonNegativeInt, QueueIndexInt

if TYPE_CHECKING:
    from studio_player.domain.playback.entities import Track


class PlaybackEvent(DomainEvent):
    """Base class for all playback domain events."""


class PlaybackStateChanged(PlaybackEvent):
    event_type: Literal["PlaybackStateChanged"] = "PlaybackStateChanged"
    snapshot: PlaybackSnapshot


class TrackStarted(PlaybackEvent):
    event_type: Literal["TrackStarted"] = "TrackStarted"
    track_id: TrackIdField
    track_title: str
    queue_index: QueueIndexInt
    duration_seconds: NonNegativeFloat = 0.0
    simulated: bool = False

    @classmethod
    def from_track(
        cls, track: Track, queue_index: int, duration_seconds: float, *, simulated: bool = False
    ) -> TrackStarted:
        """Create event from a Track entity."""
        return cls(
            track_id=track.id,
            track_title=track.title,
            queue_index=queue_index,
            duration_seconds=duration_seconds,
            simulated=simulated,
        )


class TrackFinished(PlaybackEvent):
    event_type: Literal["TrackFinished"] = "TrackFinished"
    track_id: TrackIdField
    track_title: str
    queue_index: QueueIndexInt

    @classmethod
    def from_track(cls, track: Track, queue_index: int) -> TrackFinished:
        """Create event from a Track entity."""
        return cls(track_id=track.id, track_title=track.title, queue_index=queue_index)


class TrackUnavailable(PlaybackEvent):
    """The requested track has no audio preview."""

    event_type: Literal["TrackUnavailable"] = "TrackUnavailable"
    track_id: TrackIdField
    track_title: str

    @classmethod
    def from_track(cls, track: Track) -> TrackUnavailable:
        """Create event from a Track entity."""
        return cls(track_id=track.id, track_title=track.title)


class PlaybackFailed(PlaybackEvent):
    """The primitive could not load, decode or carry out a command."""

    event_type: Literal["PlaybackFailed"] = "PlaybackFailed"
    track_id: OptionalTrackIdField = None
    reason: str
    kind: PlaybackErrorKind = PlaybackErrorKind.UNKNOWN


class AutoplayBlocked(PlaybackEvent):
    """The platform refused to start output without a user gesture."""

    event_type: Literal["AutoplayBlocked"] = "AutoplayBlocked"
    track_id: OptionalTrackIdField = None
    reason: str = ""


class QueueReplaced(PlaybackEvent):
    event_type: Literal["QueueReplaced"] = "QueueReplaced"
    track_count: NonNegativeInt = 0
    kept_selection: bool = False


class QueueExhausted(PlaybackEvent):
    event_type: Literal["QueueExhausted"] = "QueueExhausted"
    last_track_id: OptionalTrackIdField = None
    last_track_title: str = ""


class PlayerClosed(PlaybackEvent):
    event_type: Literal["PlayerClosed"] = "PlayerClosed"
