"""Playback queue controller for the beat-store storefront."""

__version__ = "0.1.0"
