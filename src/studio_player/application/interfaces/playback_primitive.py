"""Port interface for the audio decode-and-output facility."""

from __future__ import annotations

from abc import ABC, abstractmethod

from studio_player.domain.playback.value_objects import PlaybackErrorKind


class PrimitiveListener(ABC):
    """Callbacks a primitive fires for the resource it is currently bound to.

    A new listener is handed over on every :meth:`PlaybackPrimitive.bind`;
    primitives must only call the listener they were last bound with.
    """

    @abstractmethod
    def on_ready(self, duration: float) -> None:
        """The resource can be played; ``duration`` is 0 when unknown."""
        ...

    @abstractmethod
    def on_position_tick(self, seconds: float) -> None:
        ...

    @abstractmethod
    def on_ended(self) -> None:
        ...

    @abstractmethod
    def on_error(self, reason: str, kind: PlaybackErrorKind = PlaybackErrorKind.UNKNOWN) -> None:
        ...


class PlaybackPrimitive(ABC):
    """Interface for a single audio channel addressed by URL.

    Commands may raise :class:`~studio_player.domain.shared.exceptions.PlaybackPrimitiveError`;
    asynchronous failures are reported through :meth:`PrimitiveListener.on_error`.
    """

    @abstractmethod
    def bind(
        self, url: str, listener: PrimitiveListener, *, duration_hint: float | None = None
    ) -> None:
        """Load the resource at ``url``, replacing any previous binding."""
        ...

    @abstractmethod
    def play(self) -> None:
        ...

    @abstractmethod
    def pause(self) -> None:
        ...

    @abstractmethod
    def seek(self, seconds: float) -> None:
        ...

    @abstractmethod
    def set_volume(self, volume: float) -> None:
        """Apply a volume in [0, 1]; valid with or without a binding."""
        ...

    @abstractmethod
    def unbind(self) -> None:
        """Stop output and drop the resource and listener. Safe to call when unbound."""
        ...
