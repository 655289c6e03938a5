"""
VLC Playback Primitive

Infrastructure component driving real audio output through libVLC.

libVLC delivers events on its own threads. Every event is marshalled onto
the player's asyncio loop with ``call_soon_threadsafe`` before it reaches the
listener, so the controller only ever runs on the loop thread.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

from studio_player.application.interfaces.playback_primitive import (
    PlaybackPrimitive,
    PrimitiveListener,
)
from studio_player.domain.playback.value_objects import PlaybackErrorKind
from studio_player.domain.shared.exceptions import PlaybackPrimitiveError
from studio_player.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

DEFAULT_INSTANCE_ARGS: tuple[str, ...] = ("--no-video", "--quiet")
DEFAULT_PARSE_TIMEOUT_MS: int = 10_000
MS_PER_SECOND: float = 1000.0


def load_vlc() -> Any:
    """Import python-vlc; libvlc itself is located at import time."""
    try:
        import vlc
    except (ImportError, OSError) as e:
        raise PlaybackPrimitiveError("initialize", ErrorMessages.VLC_NOT_INSTALLED) from e
    return vlc


class VlcPlaybackPrimitive(PlaybackPrimitive):
    """Single libVLC media player bound to one URL at a time."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        *,
        vlc_module: Any | None = None,
        instance_args: Sequence[str] = DEFAULT_INSTANCE_ARGS,
        parse_timeout_ms: int = DEFAULT_PARSE_TIMEOUT_MS,
    ) -> None:
        """Create the VLC instance and media player.

        Args:
            loop: Loop the listener callbacks are delivered on.
            vlc_module: The ``vlc`` module; imported lazily when omitted.
            instance_args: Command-line style options for ``vlc.Instance``.
            parse_timeout_ms: How long media parsing may take before it fails.
        """
        self._loop = loop
        self._vlc = vlc_module if vlc_module is not None else load_vlc()
        self._parse_timeout_ms = parse_timeout_ms

        self._instance = self._vlc.Instance(*instance_args)
        self._player = self._instance.media_player_new()
        logger.debug(LogTemplates.VLC_INSTANCE_CREATED, " ".join(instance_args))

        self._listener: PrimitiveListener | None = None
        self._media: Any = None
        self._url: str | None = None
        # Bumped on every bind/unbind so events for an old binding can be told apart.
        self._token = 0
        self._ready_sent = False

        events = self._player.event_manager()
        event_type = self._vlc.EventType
        events.event_attach(event_type.MediaPlayerTimeChanged, self._on_time_changed)
        events.event_attach(event_type.MediaPlayerEndReached, self._on_end_reached)
        events.event_attach(event_type.MediaPlayerEncounteredError, self._on_encountered_error)

    @property
    def url(self) -> str | None:
        return self._url

    # === Commands (loop thread) ===

    def bind(
        self, url: str, listener: PrimitiveListener, *, duration_hint: float | None = None
    ) -> None:
        self.unbind()
        self._token += 1
        self._listener = listener
        self._url = url
        self._ready_sent = False

        media = self._instance.media_new(url)
        token = self._token
        media.event_manager().event_attach(
            self._vlc.EventType.MediaParsedChanged,
            lambda event: self._post(self._dispatch_parsed, token, media),
        )
        self._media = media
        self._player.set_media(media)
        logger.debug(LogTemplates.VLC_MEDIA_BOUND, url)

        if media.parse_with_options(self._vlc.MediaParseFlag.network, self._parse_timeout_ms) == -1:
            raise PlaybackPrimitiveError(
                "bind", ErrorMessages.VLC_MEDIA_PARSE_FAILED.format(status="parse request rejected")
            )

    def play(self) -> None:
        self._require_bound("play")
        if self._player.get_state() == self._vlc.State.Ended:
            # An ended player has to be stopped before it restarts.
            self._player.stop()
        if self._player.play() == -1:
            raise PlaybackPrimitiveError("play", ErrorMessages.VLC_PLAY_REJECTED)

    def pause(self) -> None:
        if self._media is None:
            return
        self._player.set_pause(1)

    def seek(self, seconds: float) -> None:
        self._require_bound("seek")
        self._player.set_time(int(max(0.0, seconds) * MS_PER_SECOND))

    def set_volume(self, volume: float) -> None:
        level = int(round(min(1.0, max(0.0, volume)) * 100))
        if self._player.audio_set_volume(level) == -1:
            raise PlaybackPrimitiveError("set_volume", f"VLC rejected volume {level}")

    def unbind(self) -> None:
        self._token += 1
        self._listener = None
        self._url = None
        if self._media is None:
            return
        self._player.stop()
        self._player.set_media(None)
        self._media.release()
        self._media = None

    def release(self) -> None:
        """Free the native player; the primitive is unusable afterwards."""
        self.unbind()
        self._player.release()
        self._instance.release()
        logger.debug(LogTemplates.VLC_RELEASED)

    # === VLC events (VLC threads) ===

    def _on_time_changed(self, event: Any) -> None:
        self._post(self._dispatch_time, self._token, event.u.new_time)

    def _on_end_reached(self, event: Any) -> None:
        self._post(self._dispatch_end, self._token)

    def _on_encountered_error(self, event: Any) -> None:
        self._post(self._dispatch_error, self._token)

    def _post(self, callback: Callable[..., None], *args: Any) -> None:
        try:
            self._loop.call_soon_threadsafe(callback, *args)
        except RuntimeError:
            logger.debug(LogTemplates.VLC_LOOP_CLOSED)

    # === Dispatch (loop thread) ===

    def _current_listener(self, token: int) -> PrimitiveListener | None:
        if token != self._token:
            return None
        return self._listener

    def _dispatch_parsed(self, token: int, media: Any) -> None:
        listener = self._current_listener(token)
        if listener is None or self._ready_sent:
            return

        status = media.get_parsed_status()
        statuses = self._vlc.MediaParsedStatus
        duration_ms = media.get_duration()
        duration = duration_ms / MS_PER_SECOND if duration_ms and duration_ms > 0 else 0.0
        logger.debug(LogTemplates.VLC_MEDIA_PARSED, self._url, status, duration)

        if status in (statuses.done, statuses.skipped):
            self._ready_sent = True
            listener.on_ready(duration)
        elif status == statuses.timeout:
            listener.on_error(
                ErrorMessages.VLC_MEDIA_PARSE_FAILED.format(status="timeout"),
                PlaybackErrorKind.NETWORK,
            )
        elif status == statuses.failed:
            listener.on_error(
                ErrorMessages.VLC_MEDIA_PARSE_FAILED.format(status="failed"),
                PlaybackErrorKind.LOAD,
            )

    def _dispatch_time(self, token: int, time_ms: int) -> None:
        listener = self._current_listener(token)
        if listener is None or not self._ready_sent:
            return
        listener.on_position_tick(max(0, time_ms) / MS_PER_SECOND)

    def _dispatch_end(self, token: int) -> None:
        listener = self._current_listener(token)
        if listener is not None:
            listener.on_ended()

    def _dispatch_error(self, token: int) -> None:
        listener = self._current_listener(token)
        if listener is None:
            return
        logger.warning(LogTemplates.VLC_ERROR_EVENT, self._url)
        listener.on_error(ErrorMessages.VLC_PLAYBACK_ERROR, PlaybackErrorKind.DECODE)

    def _require_bound(self, command: str) -> None:
        if self._media is None:
            raise PlaybackPrimitiveError(command, ErrorMessages.PRIMITIVE_NOT_BOUND)
