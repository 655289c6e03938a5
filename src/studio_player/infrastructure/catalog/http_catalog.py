"""HTTP client for the beat store catalog API."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from studio_player.application.interfaces.catalog import CatalogService
from studio_player.domain.playback.entities import Track
from studio_player.domain.shared.exceptions import CatalogUnavailableError
from studio_player.domain.shared.messages import ErrorMessages, LogTemplates
from studio_player.infrastructure.catalog.models import BeatPayload, media_origin

if TYPE_CHECKING:
    from studio_player.config.settings import CatalogSettings

logger = logging.getLogger(__name__)

RETRY_ON_STATUS: frozenset[int] = frozenset({429, 500, 502, 503, 504})
DEFAULT_RETRY_BASE_DELAY: float = 0.25
MAX_RETRY_DELAY: float = 5.0
RETRY_JITTER: float = 0.15


class _RetryableError(Exception):
    """A failed attempt that is worth repeating."""


class HttpCatalogService(CatalogService):
    """Fetches ``GET {api_url}/beats`` and converts entries to tracks.

    Timeouts, connection failures and 5xx responses are retried with
    jittered exponential backoff. Entries that fail validation are skipped
    with a warning instead of failing the whole catalog.
    """

    def __init__(
        self,
        settings: CatalogSettings,
        *,
        client: httpx.AsyncClient | None = None,
        retry_base_delay: float = DEFAULT_RETRY_BASE_DELAY,
    ) -> None:
        self._settings = settings
        self._client = client
        self._retry_base_delay = max(0.0, retry_base_delay)
        self._api_url = settings.api_url.rstrip("/")
        self._media_origin = media_origin(self._api_url)

    @property
    def beats_url(self) -> str:
        return f"{self._api_url}/beats"

    async def fetch_tracks(self) -> list[Track]:
        url = self.beats_url
        logger.info(LogTemplates.CATALOG_FETCHING, url)

        payload = await self._get_json(url)
        if not isinstance(payload, list):
            raise CatalogUnavailableError(url, 1, ErrorMessages.CATALOG_BAD_PAYLOAD)

        tracks: list[Track] = []
        seen: set[str] = set()
        for entry in payload:
            try:
                track = BeatPayload.model_validate(entry).to_track(self._media_origin)
            except ValidationError as e:
                logger.warning(LogTemplates.CATALOG_SKIPPED_ENTRY, e)
                continue
            if str(track.id) in seen:
                logger.warning(
                    LogTemplates.CATALOG_SKIPPED_ENTRY,
                    ErrorMessages.DUPLICATE_TRACK_ID.format(track_id=track.id),
                )
                continue
            seen.add(str(track.id))
            tracks.append(track)

        logger.info(LogTemplates.CATALOG_FETCHED, len(tracks))
        return tracks

    async def _get_json(self, url: str) -> Any:
        if self._client is not None:
            return await self._get_with_retries(self._client, url)
        async with httpx.AsyncClient(timeout=self._settings.timeout_seconds) as client:
            return await self._get_with_retries(client, url)

    async def _get_with_retries(self, client: httpx.AsyncClient, url: str) -> Any:
        max_attempts = self._settings.retries + 1
        for attempt in range(1, max_attempts + 1):
            try:
                return await self._attempt(client, url, attempt)
            except _RetryableError as e:
                logger.warning(LogTemplates.CATALOG_RETRY, attempt, max_attempts, e)
                if attempt >= max_attempts:
                    raise CatalogUnavailableError(url, attempt, str(e)) from e
                await asyncio.sleep(self._compute_delay(attempt))
        raise CatalogUnavailableError(url, max_attempts)  # pragma: no cover

    async def _attempt(self, client: httpx.AsyncClient, url: str, attempt: int) -> Any:
        try:
            response = await client.get(url, timeout=self._settings.timeout_seconds)
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            raise _RetryableError(f"{type(e).__name__}: {e}") from e
        except httpx.RequestError as e:
            raise CatalogUnavailableError(url, attempt, f"{type(e).__name__}: {e}") from e

        if response.status_code in RETRY_ON_STATUS:
            raise _RetryableError(f"HTTP {response.status_code}")
        if response.is_error:
            raise CatalogUnavailableError(url, attempt, f"HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise CatalogUnavailableError(url, attempt, ErrorMessages.CATALOG_BAD_PAYLOAD) from e

    def _compute_delay(self, attempt: int) -> float:
        delay = min(MAX_RETRY_DELAY, self._retry_base_delay * (2 ** (attempt - 1)))
        spread = delay * RETRY_JITTER
        return max(0.0, delay + random.uniform(-spread, spread))
