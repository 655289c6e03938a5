"""Core domain entities for the playback bounded context."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from studio_player.domain.playback.value_objects import (
    PlaybackErrorKind,
    TrackId,
    TrackIdField,
    TransportState,
    format_clock,
)
from studio_player.domain.shared.exceptions import InvalidOperationError
from studio_player.domain.shared.messages import ErrorMessages
from studio_player.domain.shared.types import (
    BpmInt,
    NonEmptyStr,
    NonNegativeFloat,
    QueueIndexInt,
    SecondsFloat,
    TrackTitleStr,
    UnitInterval,
)


class Track(BaseModel):
    """Immutable value object representing one playable beat."""

    model_config = ConfigDict(frozen=True)

    id: TrackIdField
    title: TrackTitleStr
    audio_url: NonEmptyStr | None = None
    duration_hint: SecondsFloat | None = None

    # Display-only catalog metadata
    genre: NonEmptyStr | None = None
    bpm: BpmInt | None = None
    key: NonEmptyStr | None = None
    producer: NonEmptyStr | None = None
    cover_art_url: NonEmptyStr | None = None
    price: NonNegativeFloat | None = None
    tags: tuple[str, ...] = ()

    @property
    def has_audio(self) -> bool:
        """Whether the beat has an uploaded preview file."""
        return self.audio_url is not None

    @property
    def duration_formatted(self) -> str:
        if self.duration_hint is None:
            return "Unknown"
        return format_clock(self.duration_hint)

    @property
    def display_title(self) -> str:
        """Get display title with duration if available."""
        if self.duration_hint:
            return f"{self.title} [{self.duration_formatted}]"
        return self.title


class TrackQueue(BaseModel):
    """Ordered, finite sequence of tracks; insertion order is playback order.

    Queues are immutable: replacing the queue means swapping in a new instance.
    """

    model_config = ConfigDict(frozen=True)

    tracks: tuple[Track, ...] = ()

    @model_validator(mode="after")
    def _ids_are_unique(self) -> Self:
        seen: set[TrackId] = set()
        for track in self.tracks:
            if track.id in seen:
                raise ValueError(ErrorMessages.DUPLICATE_TRACK_ID.format(track_id=track.id))
            seen.add(track.id)
        return self

    @classmethod
    def of(cls, tracks: Iterable[Track]) -> TrackQueue:
        return cls(tracks=tuple(tracks))

    def __len__(self) -> int:
        return len(self.tracks)

    @property
    def ids(self) -> tuple[TrackId, ...]:
        return tuple(track.id for track in self.tracks)

    def is_valid_index(self, index: int) -> bool:
        return 0 <= index < len(self.tracks)

    def index_of(self, track_id: TrackId) -> int | None:
        for index, track in enumerate(self.tracks):
            if track.id == track_id:
                return index
        return None

    def get(self, index: int) -> Track | None:
        if self.is_valid_index(index):
            return self.tracks[index]
        return None


class PlaybackState(BaseModel):
    """Mutable playback session state.

    Owned and mutated only by the playback controller; observers get
    :class:`PlaybackSnapshot` copies instead.
    """

    model_config = ConfigDict(validate_assignment=True)

    queue: TrackQueue = Field(default_factory=TrackQueue)
    current_index: QueueIndexInt | None = None
    transport: TransportState = TransportState.IDLE
    position_seconds: NonNegativeFloat = 0.0
    duration_seconds: NonNegativeFloat = 0.0
    volume: UnitInterval = 0.8

    # Timer-driven preview instead of a real audio resource.
    simulated: bool = False
    # Whether the pending load should start output once the primitive is ready.
    play_when_ready: bool = False

    last_error: str | None = None
    last_error_kind: PlaybackErrorKind | None = None

    @model_validator(mode="after")
    def _current_index_in_bounds(self) -> Self:
        if self.current_index is not None and not self.queue.is_valid_index(self.current_index):
            raise ValueError(
                ErrorMessages.INDEX_OUT_OF_BOUNDS.format(
                    index=self.current_index, length=len(self.queue)
                )
            )
        return self

    @property
    def current_track(self) -> Track | None:
        if self.current_index is None:
            return None
        return self.queue.get(self.current_index)

    def transition_to(self, target: TransportState) -> None:
        """Transition to a new transport state."""
        if not self.transport.can_transition_to(target):
            raise InvalidOperationError(
                operation=f"transition to {target.value}",
                current_state=self.transport.value,
                message=f"Cannot transition from {self.transport.value} to {target.value}",
            )
        self.transport = target

    def swap_queue(self, queue: TrackQueue, current_index: int | None) -> None:
        """Replace the queue and the selection together."""
        self.current_index = None
        self.queue = queue
        self.current_index = current_index

    def begin_load(self, index: int, *, simulated: bool) -> None:
        """Select ``index`` and reset the clock for a fresh load."""
        self.transition_to(TransportState.LOADING)
        self.current_index = index
        track = self.queue.tracks[index]
        self.position_seconds = 0.0
        self.duration_seconds = track.duration_hint or 0.0
        self.simulated = simulated
        self.play_when_ready = True
        self.clear_error()

    def clamp_position(self, seconds: float) -> float:
        seconds = max(0.0, seconds)
        if self.duration_seconds > 0:
            seconds = min(seconds, self.duration_seconds)
        return seconds

    def record_error(self, reason: str, kind: PlaybackErrorKind) -> None:
        self.last_error = reason
        self.last_error_kind = kind

    def clear_error(self) -> None:
        self.last_error = None
        self.last_error_kind = None

    def reset_selection(self) -> None:
        """Return to IDLE, keeping the queue."""
        self.transition_to(TransportState.IDLE)
        self.current_index = None
        self.position_seconds = 0.0
        self.duration_seconds = 0.0
        self.simulated = False
        self.play_when_ready = False
        self.clear_error()

    def to_snapshot(self, *, wraps: bool = False) -> PlaybackSnapshot:
        return PlaybackSnapshot(
            queue=self.queue,
            current_index=self.current_index,
            transport=self.transport,
            position_seconds=self.position_seconds,
            duration_seconds=self.duration_seconds,
            volume=self.volume,
            simulated=self.simulated,
            play_when_ready=self.play_when_ready,
            last_error=self.last_error,
            last_error_kind=self.last_error_kind,
            wraps=wraps,
        )


class PlaybackSnapshot(BaseModel):
    """Immutable, read-only view of :class:`PlaybackState` handed to observers."""

    model_config = ConfigDict(frozen=True)

    queue: TrackQueue = Field(default_factory=TrackQueue)
    current_index: QueueIndexInt | None = None
    transport: TransportState = TransportState.IDLE
    position_seconds: NonNegativeFloat = 0.0
    duration_seconds: NonNegativeFloat = 0.0
    volume: UnitInterval = 0.8
    simulated: bool = False
    play_when_ready: bool = False
    last_error: str | None = None
    last_error_kind: PlaybackErrorKind | None = None
    wraps: bool = False

    @property
    def current_track(self) -> Track | None:
        if self.current_index is None:
            return None
        return self.queue.get(self.current_index)

    @property
    def is_playing(self) -> bool:
        return self.transport.is_playing

    @property
    def is_visible(self) -> bool:
        """Whether a player surface should be shown at all."""
        return self.current_index is not None

    @property
    def can_play_next(self) -> bool:
        if self.current_index is None:
            return False
        return self.wraps or self.current_index < len(self.queue) - 1

    @property
    def can_play_previous(self) -> bool:
        if self.current_index is None:
            return False
        return self.wraps or self.current_index > 0

    @property
    def progress_percentage(self) -> float:
        if self.duration_seconds <= 0:
            return 0.0
        return min(100.0, self.position_seconds / self.duration_seconds * 100.0)

    @property
    def position_formatted(self) -> str:
        return format_clock(self.position_seconds)

    @property
    def duration_formatted(self) -> str:
        return format_clock(self.duration_seconds)
