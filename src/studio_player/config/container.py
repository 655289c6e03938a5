"""Dependency Injection Container

Manages the player's dependency graph, providing lazy initialization
and lifecycle management for the controller, its playback primitives and
the catalog source. Components are created on-demand and cached.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.interfaces.catalog import CatalogService
    from ..application.interfaces.playback_primitive import PlaybackPrimitive
    from ..application.interfaces.scheduler import Scheduler
    from ..application.services.playback_controller import PlaybackQueueController
    from ..domain.shared.events import EventBus
    from ..infrastructure.console.now_playing_view import NowPlayingConsoleView
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. Anything that
    needs the event loop must be built while the loop is running, or with
    ``loop`` set explicitly.
    """

    settings: Settings
    loop: asyncio.AbstractEventLoop | None = None

    _event_bus: EventBus | None = None
    _scheduler: Scheduler | None = None

    # Playback primitives
    _primitive: PlaybackPrimitive | None = None
    _simulated_primitive: PlaybackPrimitive | None = None

    # Catalog
    _catalog_service: CatalogService | None = None

    # Application services
    _controller: PlaybackQueueController | None = None

    # Renderings
    _console_view: NowPlayingConsoleView | None = None

    # === Event bus / scheduling ===

    @property
    def event_bus(self) -> EventBus:
        """Get the global event bus."""
        if self._event_bus is None:
            from ..domain.shared.events import get_event_bus

            self._event_bus = get_event_bus()
        return self._event_bus

    @property
    def scheduler(self) -> Scheduler:
        """Get the asyncio scheduler used by simulated playback."""
        if self._scheduler is None:
            from ..infrastructure.scheduling import AsyncioScheduler

            self._scheduler = AsyncioScheduler(self.loop)
        return self._scheduler

    # === Playback primitives ===

    @property
    def uses_simulated_backend(self) -> bool:
        return self.settings.player.backend == "simulated"

    @property
    def simulated_primitive(self) -> PlaybackPrimitive | None:
        """Get the timer-driven primitive, if simulation is enabled at all."""
        player = self.settings.player
        if not (self.uses_simulated_backend or player.simulate_missing_audio):
            return None
        if self._simulated_primitive is None:
            from ..infrastructure.audio.simulated_player import SimulatedPlaybackPrimitive

            self._simulated_primitive = SimulatedPlaybackPrimitive(
                self.scheduler,
                tick_interval=player.simulated_tick_interval,
                ready_delay=player.simulated_ready_delay,
            )
        return self._simulated_primitive

    @property
    def primitive(self) -> PlaybackPrimitive:
        """Get the primitive for tracks that have an audio file."""
        if self._primitive is None:
            simulated = self.simulated_primitive
            if self.uses_simulated_backend and simulated is not None:
                self._primitive = simulated
            else:
                from ..infrastructure.audio.vlc_player import VlcPlaybackPrimitive

                loop = self.loop or asyncio.get_running_loop()
                self._primitive = VlcPlaybackPrimitive(loop)
        return self._primitive

    # === Catalog ===

    @property
    def catalog_service(self) -> CatalogService:
        """Get the catalog source, with demo fallback when configured."""
        if self._catalog_service is None:
            from ..infrastructure.catalog.http_catalog import HttpCatalogService

            service: CatalogService = HttpCatalogService(self.settings.catalog)
            if self.settings.catalog.fallback_to_demo:
                from ..infrastructure.catalog.demo_catalog import FallbackCatalogService

                service = FallbackCatalogService(service)
            self._catalog_service = service
        return self._catalog_service

    # === Application services ===

    @property
    def controller(self) -> PlaybackQueueController:
        """Get the playback queue controller."""
        if self._controller is None:
            from ..application.services.playback_controller import PlaybackQueueController

            player = self.settings.player
            self._controller = PlaybackQueueController(
                primitive=self.primitive,
                simulated_primitive=self.simulated_primitive,
                event_bus=self.event_bus,
                navigation_policy=player.navigation_policy,
                auto_advance=player.auto_advance,
                simulate_missing_audio=player.simulate_missing_audio or self.uses_simulated_backend,
                default_volume=player.default_volume,
            )
        return self._controller

    @property
    def console_view(self) -> NowPlayingConsoleView:
        """Get the terminal now-playing view."""
        if self._console_view is None:
            from ..infrastructure.console.now_playing_view import NowPlayingConsoleView

            self._console_view = NowPlayingConsoleView()
        return self._console_view

    # === Lifecycle ===

    async def shutdown(self) -> None:
        """Close the player and release native resources."""
        if self._controller is not None:
            try:
                self._controller.close()
            except Exception as exc:
                logger.warning("Failed closing playback controller: %r", exc)

        if self._console_view is not None:
            self._console_view.detach()

        release = getattr(self._primitive, "release", None)
        if release is not None:
            try:
                release()
            except Exception as exc:
                logger.warning("Failed releasing playback primitive: %r", exc)

        self._controller = None
        self._primitive = None
        self._simulated_primitive = None


def create_container(
    settings: Settings, loop: asyncio.AbstractEventLoop | None = None
) -> Container:
    """Create a new dependency injection container."""
    return Container(settings, loop)
