"""Port interface for the streaming catalog service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from hifi_player.domain.music.value_objects import AudioQuality

if TYPE_CHECKING:
    from ...domain.music.entities import Album, Playlist, SearchResults, Track


class CatalogClient(ABC):
    """Interface for album/artist/playlist/track metadata and stream URLs.

    Implementations raise ``CatalogError`` for transport or authentication
    failures and ``EntityNotFoundError`` for unknown identifiers.
    """

    @abstractmethod
    async def get_album(self, album_id: str) -> Album:
        """Fetch an album with its full track listing."""
        ...

    @abstractmethod
    async def get_track(self, track_id: int) -> Track:
        ...

    @abstractmethod
    async def get_artist_albums(self, artist_id: int) -> list[Album]:
        ...

    @abstractmethod
    async def get_playlist(self, playlist_id: int) -> Playlist:
        """Fetch a playlist, following pagination until every track is retrieved."""
        ...

    @abstractmethod
    async def search(self, query: str, limit: int = 10) -> SearchResults:
        ...

    @abstractmethod
    async def get_user_playlists(self) -> list[Playlist]:
        """Playlists owned by the signed-in user (without track listings)."""
        ...

    @abstractmethod
    async def get_track_stream_url(
        self, track_id: int, quality: AudioQuality = AudioQuality.HIFI96
    ) -> str:
        ...
