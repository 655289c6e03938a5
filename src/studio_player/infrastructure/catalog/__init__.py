"""Beat catalog sources."""

from studio_player.infrastructure.catalog.demo_catalog import (
    DEMO_TRACKS,
    DemoCatalogService,
    FallbackCatalogService,
)
from studio_player.infrastructure.catalog.http_catalog import HttpCatalogService
from studio_player.infrastructure.catalog.models import BeatPayload, media_origin, resolve_media_url

__all__ = [
    "BeatPayload",
    "DEMO_TRACKS",
    "DemoCatalogService",
    "FallbackCatalogService",
    "HttpCatalogService",
    "media_origin",
    "resolve_media_url",
]
