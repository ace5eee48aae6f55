"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from enum import Enum, IntEnum

UNSTREAMABLE = "UNSTREAMABLE"
"""Selection sentinel for browse entries that cannot be played."""


class PlaybackState(Enum):
    """Controller-owned playback state.

    State transitions:
    - NULL/READY/STOPPED -> LOADING (a new track is requested)
    - LOADING -> BUFFERING -> PLAYING (backend reports progress, then playback)
    - PLAYING <-> PAUSED (toggle)
    - PLAYING/PAUSED/BUFFERING -> LOADING (next/previous/skip inside a list)
    - PLAYING/PAUSED/LOADING/BUFFERING -> STOPPED (stop or queue exhausted)
    - LOADING -> any prior state (resolution failed, state restored)
    """

    NULL = "null"
    READY = "ready"
    LOADING = "loading"
    BUFFERING = "buffering"
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"

    def can_transition_to(self, target: PlaybackState) -> bool:
        """Check if transition to target state is valid."""
        if target == self:
            return True
        valid_transitions = {
            PlaybackState.NULL: {PlaybackState.LOADING, PlaybackState.STOPPED},
            PlaybackState.READY: {PlaybackState.LOADING, PlaybackState.STOPPED},
            PlaybackState.LOADING: set(PlaybackState),
            PlaybackState.BUFFERING: {
                PlaybackState.LOADING,
                PlaybackState.PLAYING,
                PlaybackState.PAUSED,
                PlaybackState.STOPPED,
            },
            PlaybackState.PLAYING: {
                PlaybackState.LOADING,
                PlaybackState.BUFFERING,
                PlaybackState.PAUSED,
                PlaybackState.STOPPED,
            },
            PlaybackState.PAUSED: {
                PlaybackState.LOADING,
                PlaybackState.BUFFERING,
                PlaybackState.PLAYING,
                PlaybackState.STOPPED,
            },
            PlaybackState.STOPPED: {PlaybackState.LOADING, PlaybackState.READY},
        }
        return target in valid_transitions[self]

    @property
    def is_active(self) -> bool:
        return self in {PlaybackState.PLAYING, PlaybackState.PAUSED, PlaybackState.BUFFERING}

    @property
    def is_loading(self) -> bool:
        return self in {PlaybackState.LOADING, PlaybackState.BUFFERING}

    @property
    def is_idle(self) -> bool:
        return self in {PlaybackState.NULL, PlaybackState.READY, PlaybackState.STOPPED}


class TrackStatus(Enum):
    """Per-track playback status inside a track list."""

    UNPLAYED = "unplayed"
    PLAYING = "playing"
    PLAYED = "played"


class TrackListType(Enum):
    """Which parent entity a track list was built from."""

    ALBUM = "album"
    PLAYLIST = "playlist"
    TRACK = "track"
    UNKNOWN = "unknown"


class AudioQuality(IntEnum):
    """Streaming format identifiers understood by the catalog service."""

    MP3 = 5
    CD = 6
    HIFI96 = 7
    HIFI192 = 27

    @property
    def label(self) -> str:
        labels = {
            AudioQuality.MP3: "MP3 320",
            AudioQuality.CD: "CD 16/44.1",
            AudioQuality.HIFI96: "Hi-Res 24/96",
            AudioQuality.HIFI192: "Hi-Res 24/192",
        }
        return labels[self]
