"""Application services."""

from studio_player.application.services.playback_controller import PlaybackQueueController

__all__ = [
    "PlaybackQueueController",
]
