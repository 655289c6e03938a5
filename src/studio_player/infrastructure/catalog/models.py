"""Pydantic models for the beat store API payloads."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from studio_player.domain.playback.entities import Track

API_PATH_SUFFIX = "/api"


class BeatPayload(BaseModel):
    """One entry of ``GET /api/beats``.

    The API returns database documents, so the identifier arrives as either
    ``_id`` or ``id`` and media fields are camelCase. Unknown fields are ignored.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str | int = Field(validation_alias=AliasChoices("_id", "id"))
    title: str
    genre: str | None = None
    bpm: int | None = None
    key: str | None = None
    producer: str | None = None
    duration: float | None = None
    audio_file: str | None = Field(
        default=None, validation_alias=AliasChoices("audioFile", "audio_file")
    )
    cover_art: str | None = Field(
        default=None, validation_alias=AliasChoices("coverArt", "cover_art")
    )
    price: float | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("genre", "key", "producer", "audio_file", "cover_art", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("bpm", "duration", "price", mode="before")
    @classmethod
    def non_positive_to_none(cls, v: Any) -> Any:
        """Zero or negative numbers mean the field was never filled in."""
        if isinstance(v, (int, float)) and not isinstance(v, bool) and v <= 0:
            return None
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def tags_or_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    def to_track(self, media_origin: str) -> Track:
        """Convert to a domain :class:`Track`, resolving media paths against ``media_origin``."""
        return Track(
            id=self.id,
            title=self.title,
            audio_url=resolve_media_url(self.audio_file, media_origin),
            duration_hint=self.duration,
            genre=self.genre,
            bpm=self.bpm,
            key=self.key,
            producer=self.producer,
            cover_art_url=resolve_media_url(self.cover_art, media_origin),
            price=self.price,
            tags=tuple(tag for tag in self.tags if tag),
        )


def media_origin(api_url: str) -> str:
    """Server origin that uploaded media paths are relative to.

    >>> media_origin("http://localhost:3000/api")
    'http://localhost:3000'
    """
    origin = api_url.rstrip("/")
    if origin.endswith(API_PATH_SUFFIX):
        origin = origin[: -len(API_PATH_SUFFIX)]
    return origin


def resolve_media_url(path: str | None, origin: str) -> str | None:
    if not path:
        return None
    if path.startswith(("http://", "https://")):
        return path
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{origin}{path}"
