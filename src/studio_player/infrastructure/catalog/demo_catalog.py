"""Placeholder catalog shown when the store API is unreachable or empty."""

from __future__ import annotations

import logging

from studio_player.application.interfaces.catalog import CatalogService
from studio_player.domain.playback.entities import Track
from studio_player.domain.shared.exceptions import CatalogUnavailableError
from studio_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

DEMO_PRODUCER = "Doc Rolds"

# None of the demo beats has an uploaded preview file.
DEMO_TRACKS: tuple[Track, ...] = (
    Track(id="1", title="Midnight Dreams", producer=DEMO_PRODUCER, genre="Hip-Hop", bpm=92,
          key="C Minor", duration_hint=165, price=50, tags=("dark", "melodic", "trap")),
    Track(id="2", title="Summer Vibes", producer=DEMO_PRODUCER, genre="R&B", bpm=85,
          key="G Major", duration_hint=180, price=50, tags=("smooth", "chill", "vibes")),
    Track(id="3", title="Trap Soul", producer=DEMO_PRODUCER, genre="Trap", bpm=140,
          key="A Minor", duration_hint=195, price=75, tags=("hard", "bass", "808")),
    Track(id="4", title="West Coast Flow", producer=DEMO_PRODUCER, genre="West Coast", bpm=98,
          key="F Minor", duration_hint=210, price=50, tags=("g-funk", "west", "bounce")),
    Track(id="5", title="Dark Matter", producer=DEMO_PRODUCER, genre="Trap", bpm=145,
          key="D Minor", duration_hint=188, price=100, tags=("dark", "aggressive", "drill")),
    Track(id="6", title="Smooth Operator", producer=DEMO_PRODUCER, genre="R&B", bpm=78,
          key="Bb Major", duration_hint=205, price=75, tags=("smooth", "jazz", "soul")),
    Track(id="7", title="Night Rider", producer=DEMO_PRODUCER, genre="Hip-Hop", bpm=88,
          key="E Minor", duration_hint=192, price=50, tags=("night", "dark", "ambient")),
    Track(id="8", title="Cloud Nine", producer=DEMO_PRODUCER, genre="R&B", bpm=72,
          key="Ab Major", duration_hint=178, price=75, tags=("dreamy", "floating", "soft")),
)


class DemoCatalogService(CatalogService):
    """Serves the fixed demo beats."""

    async def fetch_tracks(self) -> list[Track]:
        return list(DEMO_TRACKS)


class FallbackCatalogService(CatalogService):
    """Uses ``primary`` and falls back when it is unavailable or returns nothing."""

    def __init__(self, primary: CatalogService, fallback: CatalogService | None = None) -> None:
        self._primary = primary
        self._fallback = fallback or DemoCatalogService()
        self.used_fallback = False

    async def fetch_tracks(self) -> list[Track]:
        self.used_fallback = False
        try:
            tracks = await self._primary.fetch_tracks()
        except CatalogUnavailableError as e:
            tracks = await self._fallback.fetch_tracks()
            logger.warning(LogTemplates.CATALOG_FALLBACK, e.message, len(tracks))
            self.used_fallback = True
            return tracks

        if tracks:
            return tracks

        tracks = await self._fallback.fetch_tracks()
        logger.warning(LogTemplates.CATALOG_EMPTY_FALLBACK, len(tracks))
        self.used_fallback = True
        return tracks
