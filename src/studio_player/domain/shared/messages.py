"""Centralized message constants for error messages, logging, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Track / Queue Validation Errors
    EMPTY_TRACK_ID = "Track ID cannot be empty"
    DUPLICATE_TRACK_ID = "Track ID '{track_id}' appears more than once in the queue"
    INDEX_OUT_OF_BOUNDS = "Current index {index} is outside a queue of {length} track(s)"

    # Settings Validation Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_API_URL = "Catalog API URL must start with http:// or https://"

    # Playback Primitive Errors
    SIMULATED_NO_DURATION = "No duration available to simulate playback"
    VLC_NOT_INSTALLED = "python-vlc is not installed or libvlc could not be loaded"
    VLC_MEDIA_PARSE_FAILED = "Could not load media ({status})"
    VLC_PLAYBACK_ERROR = "VLC encountered an error while playing the media"
    VLC_PLAY_REJECTED = "VLC refused to start playback"
    PRIMITIVE_NOT_BOUND = "No media bound"

    # Catalog Errors
    CATALOG_BAD_PAYLOAD = "Catalog response is not a list of beats"

    # Application Errors
    NO_PLAYABLE_TRACK = "No playable track in the catalog"
    TRACK_NOT_FOUND = "Track '{track_id}' is not in the catalog"


class LogTemplates:
    """Log message templates (printf-style, passed to the logger lazily)."""

    # Selection / Transport
    SELECT_INVALID_ARGUMENT = "Ignoring select_track(%r): %s"
    SELECT_SAME_TRACK = "Track '%s' already current, toggling play/pause"
    TRACK_NOT_IN_QUEUE = "Track %s not found in queue"
    TRACK_UNAVAILABLE = "No audio preview for '%s'"
    TRACK_LOADING = "Loading '%s' (index=%s, generation=%s)"
    TRACK_STARTED = "Started playing: %s"
    TRACK_FINISHED = "Track finished: %s"
    PLAYBACK_PAUSED = "Paused '%s'"
    PLAYBACK_RESUMED = "Resumed '%s'"
    PLAYBACK_FAILED = "Playback failed for '%s' (%s): %s"
    AUTOPLAY_BLOCKED = "Autoplay blocked for '%s': %s"
    TOGGLE_NOTHING_SELECTED = "toggle_play_pause called with no track selected"
    TOGGLE_IGNORED = "toggle_play_pause ignored in state %s"
    NAVIGATION_NOTHING_SELECTED = "Navigation ignored, no track selected"
    NAVIGATION_OUT_OF_BOUNDS = "No playable track from index %s in direction %+d"
    SEEK_INVALID = "Ignoring seek to non-finite position %r"
    SEEK_NOTHING_LOADED = "Seek ignored, no track loaded"
    SEEK_DURATION_UNKNOWN = "Seek ignored, duration unknown"
    VOLUME_INVALID = "Ignoring non-finite volume %r"
    PLAYER_CLOSED = "Player closed"

    # Queue
    QUEUE_REPLACED = "Queue replaced with %s track(s) (selection kept=%s)"
    QUEUE_INVALID = "Rejected queue: %s"
    QUEUE_EXHAUSTED = "Queue exhausted after '%s'"

    # Primitive callbacks / commands
    STALE_CALLBACK = "Dropping stale %s callback (generation %s, current %s)"
    CALLBACK_IGNORED = "Ignoring %s callback in state %s"
    PRIMITIVE_NOT_BOUND = "Cannot %s: no primitive bound"
    PRIMITIVE_BIND_FAILED = "Failed to bind %s"
    PRIMITIVE_COMMAND_FAILED = "Primitive command '%s' failed"
    PRIMITIVE_UNBIND_FAILED = "Failed to unbind playback primitive"

    # Simulated playback
    SIMULATED_BOUND = "Simulating %s for %.1fs"
    SIMULATED_ENDED = "Simulated playback of %s reached the end"

    # VLC
    VLC_INSTANCE_CREATED = "VLC instance created (%s)"
    VLC_MEDIA_BOUND = "VLC media bound: %s"
    VLC_MEDIA_PARSED = "VLC media parsed: %s (status=%s, duration=%.1fs)"
    VLC_ERROR_EVENT = "VLC reported an error for %s"
    VLC_LOOP_CLOSED = "Event loop closed, dropping VLC event"
    VLC_RELEASED = "VLC player released"

    # Catalog
    CATALOG_FETCHING = "Fetching catalog from %s"
    CATALOG_FETCHED = "Fetched %d beat(s) from catalog"
    CATALOG_RETRY = "Catalog request attempt=%d/%d failed: %s"
    CATALOG_SKIPPED_ENTRY = "Skipping malformed catalog entry: %s"
    CATALOG_FALLBACK = "Catalog unavailable (%s), using %d demo beat(s)"
    CATALOG_EMPTY_FALLBACK = "Catalog empty, using %d demo beat(s)"

    # Application Lifecycle
    APP_STARTING = "Starting studio player in {environment} mode"
    APP_BACKEND = "Playback backend: %s (simulate missing audio=%s)"
    APP_STOPPED = "Studio player stopped"
    APP_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    APP_FATAL_ERROR = "Fatal error: %s"
    APP_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"


class PlayerUIMessages:
    """User-facing strings rendered by player surfaces."""

    PREVIEW_UNAVAILABLE = "Audio preview coming soon! Contact us to hear the full track."
    AUTOPLAY_BLOCKED = "Playback was blocked by the browser; press play to start."
    PLAYBACK_ERROR = "Audio playback error: {reason}"
    QUEUE_FINISHED = "End of queue."
    NOTHING_PLAYING = "Nothing playing"
    SIMULATED_BADGE = "preview"
