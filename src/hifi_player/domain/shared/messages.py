"""Centralized message constants for error messages, validation, and log output."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions, validation failures and ``Error`` notifications."""

    # Track List Validation Errors
    POSITIONS_NOT_ASCENDING = "Track list positions must be positive and ascending"
    POSITION_MISMATCH = "Track at position {position} carries a different position"
    MULTIPLE_PLAYING = "At most one track may be playing"

    # Catalog Errors
    ALBUM_NOT_FOUND = "Album '{album_id}' could not be loaded: {reason}"
    TRACK_NOT_FOUND = "Track {track_id} could not be loaded: {reason}"
    PLAYLIST_NOT_FOUND = "Playlist {playlist_id} could not be loaded: {reason}"
    NOTHING_STREAMABLE = "{entity} '{identifier}' has no streamable tracks"
    QUERY_FAILED = "{operation} failed: {reason}"
    STREAM_URL_FAILED = "No stream URL for track {track_id}: {reason}"

    # Playback Errors
    LIST_EXHAUSTED = "No streamable tracks remaining"

    # Settings Validation Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"

    # Catalog File Errors
    LIBRARY_FILE_INVALID = "Catalog library file {path} is invalid: {reason}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Application Lifecycle
    APP_STARTING = "Starting hifi-player ({environment})"
    APP_STOPPED = "hifi-player stopped"
    APP_KEYBOARD_INTERRUPT = "Interrupted, shutting down"
    APP_FATAL_ERROR = "Fatal error: %s"

    # Command Bus
    BUS_SEND = "Queued action %s (%d pending)"
    BUS_FULL_WAITING = "Command bus full, waiting to queue %s"
    BUS_CLOSED = "Command bus closed"

    # Controller Lifecycle
    CONTROLLER_STARTED = "Playback controller started"
    CONTROLLER_STOPPED = "Playback controller stopped"
    CONTROLLER_ACTION = "Handling action %s in state %s"
    CONTROLLER_BACKEND_EVENT = "Backend event %s in state %s"
    CONTROLLER_STALE_RESULT = "Discarding stale resolution result (generation %d, current %d)"
    CONTROLLER_PUMP_ENDED = "Backend event stream ended"
    CONTROLLER_PUMP_FAILED = "Backend event stream failed"
    CONTROLLER_BACKEND_STATE = "Backend reports %s"
    CONTROLLER_REJECTED_TRANSITION = "Rejected state transition"
    CONTROLLER_HANDLER_ERROR = "Error while handling %s"

    # Playback Operations
    PLAYBACK_LOADING = "Loading %s"
    PLAYBACK_STARTED = "Started playing '%s' (position %d of %d)"
    PLAYBACK_PAUSED = "Paused playback"
    PLAYBACK_RESUMED = "Resumed playback"
    PLAYBACK_STOPPED = "Stopped playback"
    PLAYBACK_NOTHING_LOADED = "Ignoring %s: nothing is loaded"
    PLAYBACK_IGNORED_WHILE_LOADING = "Ignoring %s while a track is loading"
    PLAYBACK_IGNORED_IN_STATE = "Ignoring %s in state %s"
    PLAYBACK_SEEK = "Seeking to %.1fs of %ds"
    PLAYBACK_QUEUE_EXHAUSTED = "Reached end of track list"
    PLAYBACK_RESTART = "Restarting current track"
    PLAYBACK_QUALITY_MISMATCH = "Stream reports %d bit / %.1f kHz, catalog said %d bit / %.1f kHz"

    # Track List Operations
    TRACKLIST_REPLACED = "Replaced track list with %s list of %d tracks"
    SKIP_OUT_OF_RANGE = "Ignoring skip to position %s: not in current list"
    SKIP_UNAVAILABLE = "Ignoring skip to position %s: track is not streamable"
    TRACK_MARKED_UNAVAILABLE = "Marked position %d unavailable: %s"

    # Catalog Operations
    CATALOG_RESOLVE_FAILED = "Could not resolve %s: %s"
    CATALOG_QUERY_PREFETCHED = "Prefetched %s"
    CATALOG_CACHE_HIT = "Cache hit for %s"
    CATALOG_LIBRARY_LOADED = "Loaded catalog library from %s (%d albums, %d playlists)"

    # Notification Hub
    HUB_SUBSCRIBED = "Subscriber %d attached (%d active)"
    HUB_UNSUBSCRIBED = "Subscriber %d detached (%d active)"
    HUB_DROPPED = "Subscriber %d lagging, dropped oldest notification"
    HUB_DELIVERY_FAILED = "Delivery to subscriber %d failed: %r"
    HUB_CLOSED = "Notification hub closed"
    HUB_EMIT_AFTER_CLOSE = "Ignoring %s emitted after hub closed"
    HUB_HANDLER_ERROR = "Error in notification handler for %s"

    # Notification Log
    NOTIFY_LOADING = "Loading (target %s)"
    NOTIFY_LOADING_FINISHED = "Loading finished (now %s)"
    NOTIFY_STATUS = "Status: %s"
    NOTIFY_POSITION = "Position: %.1fs"
    NOTIFY_TRACKLIST = "Track list: %s, %d tracks, current: %s"
    NOTIFY_BUFFERING = "Buffering %d%%"
    NOTIFY_AUDIO_QUALITY = "Stream quality: %d bit / %.1f kHz"
    NOTIFY_ERROR = "Player error: %s"
    NOTIFY_QUIT = "Player quit"

    # Audio Backend
    BACKEND_LOADED = "Backend loaded %s"
    BACKEND_CLOSED = "Backend closed"
