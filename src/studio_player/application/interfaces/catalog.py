"""Port interface for the beat catalog."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.playback.entities import Track


class CatalogService(ABC):
    """Interface for fetching the list of beats to play."""

    @abstractmethod
    async def fetch_tracks(self) -> list["Track"]:
        """Fetch the catalog in display order."""
        ...
