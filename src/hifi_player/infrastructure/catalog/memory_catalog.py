"""
In-Memory Catalog

Reference ``CatalogClient`` backed by a JSON library file. It serves
metadata the way the streaming service does (paginated playlists, per-quality
stream URLs) without any network I/O.
"""

from __future__ import annotations

import asyncio
import logging
from importlib import resources
from pathlib import Path
from typing import Final
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hifi_player.application.interfaces.catalog import CatalogClient
from hifi_player.domain.music.entities import Album, Artist, Playlist, SearchResults, Track
from hifi_player.domain.music.value_objects import AudioQuality
from hifi_player.domain.shared.exceptions import CatalogError, EntityNotFoundError
from hifi_player.domain.shared.messages import ErrorMessages, LogTemplates
from hifi_player.domain.shared.types import CatalogId, NonNegativeInt, PositiveInt

logger = logging.getLogger(__name__)

STREAM_SCHEME: Final[str] = "sim"
BROKEN_STREAM_SCHEME: Final[str] = "fail"
DEFAULT_PAGE_SIZE: Final[int] = 50
SAMPLE_LIBRARY: Final[str] = "sample_library.json"

# Best format each quality id can carry: (bit depth, sample rate kHz).
_QUALITY_CEILING: Final[dict[AudioQuality, tuple[int, float]]] = {
    AudioQuality.MP3: (16, 44.1),
    AudioQuality.CD: (16, 44.1),
    AudioQuality.HIFI96: (24, 96.0),
    AudioQuality.HIFI192: (24, 192.0),
}


class CatalogLibrary(BaseModel):
    """On-disk layout of the catalog library file."""

    model_config = ConfigDict(frozen=True)

    artists: list[Artist] = Field(default_factory=list)
    albums: list[Album] = Field(default_factory=list)
    playlists: list[Playlist] = Field(default_factory=list)
    user_playlist_ids: list[CatalogId] = Field(default_factory=list)
    # Tracks whose stream URL request fails, and tracks whose stream cannot be opened.
    unresolvable_track_ids: list[CatalogId] = Field(default_factory=list)
    broken_stream_track_ids: list[CatalogId] = Field(default_factory=list)


class PlaylistPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    offset: NonNegativeInt
    limit: PositiveInt
    total: NonNegativeInt
    tracks: list[Track] = Field(default_factory=list)


def stream_uri_for(track: Track, quality: AudioQuality) -> str:
    """Build the simulated stream URI for a track at the requested quality.

    The URI carries what a real stream would report once opened: its length
    and the bit depth / sample rate actually delivered.
    """
    max_depth, max_rate = _QUALITY_CEILING[quality]
    params = {
        "format_id": int(quality),
        "duration": track.duration_seconds,
        "bit_depth": min(track.bit_depth, max_depth),
        "sample_rate": min(track.sample_rate, max_rate),
    }
    return f"{STREAM_SCHEME}://track/{track.id}?{urlencode(params)}"


class InMemoryCatalog(CatalogClient):
    def __init__(
        self,
        library: CatalogLibrary | None = None,
        *,
        latency_ms: int = 0,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._library = library or CatalogLibrary()
        self._latency = latency_ms / 1000
        self._page_size = page_size

        self._albums = {a.id: a for a in self._library.albums}
        self._playlists = {p.id: p for p in self._library.playlists}
        self._artists = {a.id: a for a in self._library.artists}
        for album in self._library.albums:
            if album.artist is not None:
                self._artists.setdefault(album.artist.id, album.artist)

        self._tracks: dict[int, Track] = {}
        for album in self._library.albums:
            summary = album.summary()
            for track in album.tracks:
                self._tracks[track.id] = track.model_copy(update={"album": summary})
        for playlist in self._library.playlists:
            for track in playlist.tracks:
                self._tracks.setdefault(track.id, track)

    @classmethod
    def from_file(cls, path: str | Path, **kwargs: int) -> InMemoryCatalog:
        """Load a library file.

        Raises:
            CatalogError: If the file cannot be read or does not validate.
        """
        path = Path(path)
        try:
            library = CatalogLibrary.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as exc:
            raise CatalogError(
                ErrorMessages.LIBRARY_FILE_INVALID.format(path=path, reason=exc)
            ) from exc

        logger.info(
            LogTemplates.CATALOG_LIBRARY_LOADED, path, len(library.albums), len(library.playlists)
        )
        return cls(library, **kwargs)

    @classmethod
    def sample(cls, **kwargs: int) -> InMemoryCatalog:
        """Catalog populated with the library bundled with the package."""
        data = resources.files(__package__).joinpath(SAMPLE_LIBRARY).read_text(encoding="utf-8")
        return cls(CatalogLibrary.model_validate_json(data), **kwargs)

    @property
    def library(self) -> CatalogLibrary:
        return self._library

    async def _simulate_latency(self) -> None:
        if self._latency > 0:
            await asyncio.sleep(self._latency)

    async def get_album(self, album_id: str) -> Album:
        await self._simulate_latency()
        album = self._albums.get(album_id)
        if album is None:
            raise EntityNotFoundError("Album", album_id)
        return album

    async def get_track(self, track_id: int) -> Track:
        await self._simulate_latency()
        track = self._tracks.get(track_id)
        if track is None:
            raise EntityNotFoundError("Track", track_id)
        return track

    async def get_artist_albums(self, artist_id: int) -> list[Album]:
        await self._simulate_latency()
        if artist_id not in self._artists:
            raise EntityNotFoundError("Artist", artist_id)
        return [
            a.summary()
            for a in self._library.albums
            if a.artist is not None and a.artist.id == artist_id
        ]

    async def _get_playlist_page(self, playlist_id: int, offset: int) -> PlaylistPage:
        await self._simulate_latency()
        playlist = self._playlists.get(playlist_id)
        if playlist is None:
            raise EntityNotFoundError("Playlist", playlist_id)
        return PlaylistPage(
            offset=offset,
            limit=self._page_size,
            total=len(playlist.tracks),
            tracks=playlist.tracks[offset : offset + self._page_size],
        )

    async def get_playlist(self, playlist_id: int) -> Playlist:
        page = await self._get_playlist_page(playlist_id, 0)
        tracks = list(page.tracks)
        while len(tracks) < page.total:
            page = await self._get_playlist_page(playlist_id, len(tracks))
            if not page.tracks:
                break
            tracks.extend(page.tracks)
        return self._playlists[playlist_id].model_copy(update={"tracks": tracks})

    async def search(self, query: str, limit: int = 10) -> SearchResults:
        await self._simulate_latency()
        needle = query.strip().lower()

        def matches(*fields: str | None) -> bool:
            return any(f is not None and needle in f.lower() for f in fields)

        albums = [
            a.summary()
            for a in self._library.albums
            if matches(a.title, a.artist.name if a.artist else None)
        ]
        artists = [a for a in self._artists.values() if matches(a.name)]
        tracks = [
            t
            for t in self._tracks.values()
            if matches(t.title, t.artist.name if t.artist else None)
        ]
        playlists = [p.summary() for p in self._library.playlists if matches(p.title, p.owner)]
        return SearchResults(
            query=query,
            albums=albums[:limit],
            artists=artists[:limit],
            tracks=tracks[:limit],
            playlists=playlists[:limit],
        )

    async def get_user_playlists(self) -> list[Playlist]:
        await self._simulate_latency()
        return [
            self._playlists[pid].summary()
            for pid in self._library.user_playlist_ids
            if pid in self._playlists
        ]

    async def get_track_stream_url(
        self, track_id: int, quality: AudioQuality = AudioQuality.HIFI96
    ) -> str:
        await self._simulate_latency()
        track = self._tracks.get(track_id)
        if track is None:
            raise EntityNotFoundError("Track", track_id)
        if track_id in self._library.unresolvable_track_ids or not track.available:
            raise CatalogError(
                ErrorMessages.STREAM_URL_FAILED.format(
                    track_id=track_id, reason="not streamable in this region"
                ),
                status=404,
            )
        if track_id in self._library.broken_stream_track_ids:
            return f"{BROKEN_STREAM_SCHEME}://track/{track_id}"
        return stream_uri_for(track, quality)
