"""Immutable value objects for the playback bounded context."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Annotated

from pydantic import PlainSerializer, PlainValidator

from studio_player.domain.shared.messages import ErrorMessages


@dataclass(frozen=True)
class TrackId:
    """Catalog identifier of a beat; stable for the whole session."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError(ErrorMessages.EMPTY_TRACK_ID)

    def __str__(self) -> str:
        return self.value

    def __hash__(self) -> int:
        return hash(self.value)

    @classmethod
    def coerce(cls, value: TrackId | str | int) -> TrackId:
        """Build a TrackId from a raw catalog id (the API returns ints or strings)."""
        if isinstance(value, TrackId):
            return value
        if isinstance(value, bool):
            raise ValueError(ErrorMessages.EMPTY_TRACK_ID)
        return cls(str(value))


# Pydantic-compatible type alias for TrackId fields.
# Serializes as plain string in JSON, stores as TrackId in the model.
TrackIdField = Annotated[
    TrackId,
    PlainValidator(TrackId.coerce),
    PlainSerializer(lambda v: v.value, return_type=str),
]

OptionalTrackIdField = Annotated[
    TrackId | None,
    PlainValidator(lambda v: None if v is None else TrackId.coerce(v)),
    PlainSerializer(lambda v: v.value if v is not None else None, return_type=str | None),
]


class TransportState(Enum):
    """Transport state with enforced transitions.

    State transitions:
    - IDLE -> LOADING (select a track)
    - LOADING -> PLAYING (primitive ready, autoplay)
    - LOADING -> PAUSED (primitive ready, autoplay withdrawn or blocked)
    - PLAYING <-> PAUSED (toggle)
    - PLAYING -> ENDED (end of track)
    - ENDED -> LOADING (auto-advance) | PAUSED (queue exhausted)
    - LOADING/PLAYING/PAUSED -> ERRORED (primitive error)
    - Any but IDLE -> LOADING (select, next, previous)
    - Any -> IDLE (close)
    """

    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"
    ERRORED = "errored"

    def can_transition_to(self, target: TransportState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            TransportState.IDLE: {TransportState.LOADING, TransportState.IDLE},
            TransportState.LOADING: {
                TransportState.LOADING,
                TransportState.PLAYING,
                TransportState.PAUSED,
                TransportState.ERRORED,
                TransportState.IDLE,
            },
            TransportState.PLAYING: {
                TransportState.LOADING,
                TransportState.PAUSED,
                TransportState.ENDED,
                TransportState.ERRORED,
                TransportState.IDLE,
            },
            TransportState.PAUSED: {
                TransportState.LOADING,
                TransportState.PLAYING,
                TransportState.ERRORED,
                TransportState.IDLE,
            },
            TransportState.ENDED: {
                TransportState.LOADING,
                TransportState.PAUSED,
                TransportState.IDLE,
            },
            TransportState.ERRORED: {TransportState.LOADING, TransportState.IDLE},
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_active(self) -> bool:
        return self in {TransportState.PLAYING, TransportState.PAUSED}

    @property
    def is_playing(self) -> bool:
        return self == TransportState.PLAYING


class NavigationPolicy(Enum):
    """What next/previous do at the queue boundaries."""

    CLAMP = "clamp"  # stop at the ends
    WRAP = "wrap"  # cycle around


class PlaybackErrorKind(Enum):
    """Categories of errors a playback primitive can report."""

    LOAD = "load"
    DECODE = "decode"
    NETWORK = "network"
    AUTOPLAY_BLOCKED = "autoplay_blocked"
    COMMAND = "command"
    UNKNOWN = "unknown"

    @property
    def is_recoverable(self) -> bool:
        """Recoverable errors wait for a user gesture instead of failing the track."""
        return self == PlaybackErrorKind.AUTOPLAY_BLOCKED


def format_clock(seconds: float) -> str:
    """Format seconds as M:SS, truncating fractions."""
    if not math.isfinite(seconds) or seconds < 0:
        seconds = 0
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"
