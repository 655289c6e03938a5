"""Terminal renderings of the playback session."""

from studio_player.infrastructure.console.now_playing_view import NowPlayingConsoleView

__all__ = ["NowPlayingConsoleView"]
