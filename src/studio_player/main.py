#!/usr/bin/env python3
"""Main entry point for the studio player."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from studio_player import __version__
from studio_player.domain.playback.events import PlaybackFailed, PlayerClosed, QueueExhausted
from studio_player.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from studio_player.config.container import Container
    from studio_player.config.settings import Settings

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    logging.getLogger().setLevel(resolved_level)


def _unit_interval(value: str) -> float:
    try:
        volume = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid volume: {value!r}") from None
    if not 0.0 <= volume <= 1.0:
        raise argparse.ArgumentTypeError("volume must be between 0.0 and 1.0")
    return volume


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="studio-player",
        description="Preview the beat store catalog from the terminal.",
    )
    parser.add_argument("--api-url", help="catalog API base URL (e.g. http://localhost:3000/api)")
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="simulate playback for beats without an uploaded audio file",
    )
    parser.add_argument(
        "--backend",
        choices=("vlc", "simulated"),
        help="playback backend for beats with audio (default: vlc)",
    )
    parser.add_argument("--track", metavar="ID", help="beat to start with (default: first playable)")
    parser.add_argument("--volume", type=_unit_interval, help="initial volume, 0.0 to 1.0")
    parser.add_argument(
        "--wrap", action="store_true", help="wrap around at the ends of the queue"
    )
    parser.add_argument(
        "--log-level", choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"), type=str.upper
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return ``settings`` with command-line options layered on top."""
    from studio_player.config.settings import CatalogSettings, PlayerSettings

    player_updates: dict[str, object] = {}
    if args.simulate:
        player_updates["simulate_missing_audio"] = True
    if args.backend:
        player_updates["backend"] = args.backend
    if args.volume is not None:
        player_updates["default_volume"] = args.volume
    if args.wrap:
        player_updates["navigation_policy"] = "wrap"

    catalog_updates: dict[str, object] = {}
    if args.api_url:
        catalog_updates["api_url"] = args.api_url

    updates: dict[str, object] = {}
    if player_updates:
        updates["player"] = PlayerSettings.model_validate(
            {**settings.player.model_dump(), **player_updates}
        )
    if catalog_updates:
        updates["catalog"] = CatalogSettings.model_validate(
            {**settings.catalog.model_dump(), **catalog_updates}
        )
    if args.log_level:
        updates["log_level"] = args.log_level

    if not updates:
        return settings
    return settings.model_copy(update=updates)


async def run(container: Container, *, track_id: str | None = None) -> int:
    """Load the catalog, start playing and wait until the session is over."""
    logger = logging.getLogger(__name__)
    event_bus = container.event_bus
    finished = asyncio.Event()
    failures: list[PlaybackFailed] = []

    def _on_failed(event: PlaybackFailed) -> None:
        failures.append(event)
        finished.set()

    def _on_over(event: QueueExhausted | PlayerClosed) -> None:
        finished.set()

    event_bus.subscribe(PlaybackFailed, _on_failed)
    event_bus.subscribe(QueueExhausted, _on_over)
    event_bus.subscribe(PlayerClosed, _on_over)

    try:
        controller = container.controller
        container.console_view.attach(event_bus)
        logger.info(
            LogTemplates.APP_BACKEND,
            container.settings.player.backend,
            container.settings.player.simulate_missing_audio,
        )

        tracks = await container.catalog_service.fetch_tracks()
        controller.replace_queue(tracks)

        queue = controller.snapshot.queue
        if track_id is not None:
            if track_id not in {str(track.id) for track in queue.tracks}:
                logger.error(ErrorMessages.TRACK_NOT_FOUND.format(track_id=track_id))
                return 1
            start = track_id
        else:
            playable = [track for track in queue.tracks if controller.is_playable(track)]
            if not playable:
                logger.error(ErrorMessages.NO_PLAYABLE_TRACK)
                return 1
            start = str(playable[0].id)

        controller.select_track(start)
        if controller.snapshot.current_index is None:
            # The requested beat has no preview; the view already said so.
            return 1

        await finished.wait()
        return 1 if failures else 0
    finally:
        event_bus.unsubscribe(PlaybackFailed, _on_failed)
        event_bus.unsubscribe(QueueExhausted, _on_over)
        event_bus.unsubscribe(PlayerClosed, _on_over)
        try:
            await container.shutdown()
        except Exception as e:
            logger.warning(LogTemplates.APP_CONTAINER_SHUTDOWN_ERROR, e)


def main(argv: list[str] | None = None) -> int:
    from studio_player.config.settings import get_settings

    args = build_parser().parse_args(argv)

    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)

    logger = logging.getLogger(__name__)

    try:
        settings = apply_cli_overrides(settings, args)
    except ValidationError as e:
        logger.error(LogTemplates.APP_FATAL_ERROR, e)
        return 1

    logger.info(LogTemplates.APP_STARTING.format(environment=settings.environment))

    from studio_player.config.container import create_container

    container = create_container(settings)

    try:
        exit_code = asyncio.run(run(container, track_id=args.track))
        logger.info(LogTemplates.APP_STOPPED)
        return exit_code
    except KeyboardInterrupt:
        logger.info(LogTemplates.APP_KEYBOARD_INTERRUPT)
        return 0
    except Exception as e:
        logger.exception(LogTemplates.APP_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
