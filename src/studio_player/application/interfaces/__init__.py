"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from studio_player.application.interfaces.catalog import CatalogService
from studio_player.application.interfaces.playback_primitive import (
    PlaybackPrimitive,
    PrimitiveListener,
)
from studio_player.application.interfaces.scheduler import ScheduledCall, Scheduler

__all__ = [
    "CatalogService",
    "PlaybackPrimitive",
    "PrimitiveListener",
    "Scheduler",
    "ScheduledCall",
]
