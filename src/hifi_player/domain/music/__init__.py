"""
Music Bounded Context

Domain logic for tracks, track lists, player commands and notifications.
"""

from hifi_player.domain.music.actions import Action, PlayerAction, parse_action
from hifi_player.domain.music.entities import (
    Album,
    Artist,
    Playlist,
    SearchResults,
    Track,
    TrackList,
)
from hifi_player.domain.music.notifications import Notification, PlayerNotification
from hifi_player.domain.music.services import QueueDomainService
from hifi_player.domain.music.value_objects import (
    UNSTREAMABLE,
    AudioQuality,
    PlaybackState,
    TrackListType,
    TrackStatus,
)

__all__ = [
    # Entities
    "Album",
    "Artist",
    "Playlist",
    "SearchResults",
    "Track",
    "TrackList",
    # Value Objects
    "AudioQuality",
    "PlaybackState",
    "TrackListType",
    "TrackStatus",
    "UNSTREAMABLE",
    # Commands and events
    "Action",
    "PlayerAction",
    "parse_action",
    "Notification",
    "PlayerNotification",
    # Services
    "QueueDomainService",
]
