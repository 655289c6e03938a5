"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the package is defined here once,
so models can simply annotate their fields::

    from studio_player.domain.shared.types import NonEmptyStr, SecondsFloat

    class MyModel(BaseModel):
        title: NonEmptyStr
        duration: SecondsFloat
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

NonNegativeFloat = Annotated[float, Field(ge=0.0)]
"""Float >= 0.0."""

UnitInterval = Annotated[float, Field(ge=0.0, le=1.0)]
"""Float in [0.0, 1.0]: used for volume."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Track title: 1-500 characters."""


# ── Domain-specific numeric constraints ─────────────────────────────

SecondsFloat = Annotated[float, Field(ge=0.0, le=86_400.0)]
"""Playback time in seconds: 0 … 86 400 (24 hours)."""

BpmInt = Annotated[int, Field(ge=1, le=999)]
"""Beats per minute."""

QueueIndexInt = Annotated[int, Field(ge=0)]
"""Zero-based queue index."""
