# ruff: noqa: N999
"""
Domain Layer

Contains pure playback logic organized by bounded contexts:
- shared/: Cross-cutting types, exceptions, messages and the event bus
- playback/: Tracks, queue, transport state and playback events
"""

from studio_player.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
