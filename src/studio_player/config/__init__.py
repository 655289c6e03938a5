"""Configuration and dependency wiring."""

from studio_player.config.settings import (
    CatalogSettings,
    PlayerSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "CatalogSettings",
    "PlayerSettings",
    "Settings",
    "clear_settings_cache",
    "get_settings",
]
