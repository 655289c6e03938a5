"""Utility functions for formatting player output."""

from __future__ import annotations


def truncate(text: str, max_length: int = 40) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"


def progress_bar(percentage: float, width: int = 20, fill: str = "#", empty: str = "-") -> str:
    """Render ``percentage`` (0-100) as a fixed-width bar, e.g. ``[#####-----]``."""
    percentage = min(100.0, max(0.0, percentage))
    filled = int(round(width * percentage / 100.0))
    return f"[{fill * filled}{empty * (width - filled)}]"


def format_volume(volume: float) -> str:
    return f"{int(round(volume * 100))}%"
