"""
Playback Bounded Context

Domain logic for tracks, the playback queue and transport state.
"""

from studio_player.domain.playback.entities import (
    PlaybackSnapshot,
    PlaybackState,
    Track,
    TrackQueue,
)
from studio_player.domain.playback.events import (
    AutoplayBlocked,
    PlaybackFailed,
    PlaybackStateChanged,
    QueueExhausted,
    TrackStarted,
    TrackUnavailable,
)
from studio_player.domain.playback.value_objects import (
    NavigationPolicy,
    PlaybackErrorKind,
    TrackId,
    TransportState,
)

__all__ = [
    # Entities
    "Track",
    "TrackQueue",
    "PlaybackState",
    "PlaybackSnapshot",
    # Value Objects
    "TrackId",
    "TransportState",
    "NavigationPolicy",
    "PlaybackErrorKind",
    # Events
    "PlaybackStateChanged",
    "TrackStarted",
    "TrackUnavailable",
    "PlaybackFailed",
    "AutoplayBlocked",
    "QueueExhausted",
]
