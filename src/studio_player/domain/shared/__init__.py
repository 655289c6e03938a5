"""
Shared Domain Kernel

Contains types, exceptions and the event bus shared across bounded contexts.
"""

from studio_player.domain.shared.exceptions import (
    CatalogUnavailableError,
    DomainError,
    InvalidOperationError,
    PlaybackPrimitiveError,
)

__all__ = [
    "DomainError",
    "InvalidOperationError",
    "PlaybackPrimitiveError",
    "CatalogUnavailableError",
]
