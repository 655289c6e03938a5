"""Playback primitive implementations."""

from studio_player.infrastructure.audio.simulated_player import SimulatedPlaybackPrimitive
from studio_player.infrastructure.audio.vlc_player import VlcPlaybackPrimitive

__all__ = [
    "SimulatedPlaybackPrimitive",
    "VlcPlaybackPrimitive",
]
