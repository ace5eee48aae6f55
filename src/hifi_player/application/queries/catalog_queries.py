"""Request/response catalog reads used by browse and search views."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Final

from pydantic import BaseModel, ConfigDict

from hifi_player.domain.music import actions
from hifi_player.domain.music.entities import Album, Playlist, SearchResults, TrackList
from hifi_player.domain.music.value_objects import TrackListType
from hifi_player.domain.shared.messages import LogTemplates
from hifi_player.domain.shared.types import NonNegativeFloat

if TYPE_CHECKING:
    from ..interfaces.catalog import CatalogClient

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL: Final[float] = 300.0
CACHE_MAX_SIZE: Final[int] = 200


class CacheEntry(BaseModel):
    """Cached catalog result with the time it was stored."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Any
    cached_at: NonNegativeFloat


class CatalogQueryService:
    """Catalog reads with a short-lived result cache.

    Results are returned directly to the caller. Read actions arriving on the
    command bus go through ``prefetch`` so a following direct query is served
    from the cache. Catalog exceptions propagate unchanged.
    """

    def __init__(
        self,
        *,
        catalog: CatalogClient,
        search_limit: int = 10,
        cache_ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._catalog = catalog
        self._search_limit = search_limit
        self._cache_ttl = cache_ttl
        self._clock = clock
        self._cache: dict[str, CacheEntry] = {}

    async def search(self, query: str) -> SearchResults:
        return await self._cached(
            f"search:{query.strip().lower()}",
            lambda: self._catalog.search(query, self._search_limit),
        )

    async def artist_albums(self, artist_id: int) -> list[Album]:
        return await self._cached(
            f"artist:{artist_id}", lambda: self._catalog.get_artist_albums(artist_id)
        )

    async def playlist_tracks(self, playlist_id: int) -> TrackList:
        """Every track of a playlist, unstreamable entries included."""

        async def fetch() -> TrackList:
            playlist = await self._catalog.get_playlist(playlist_id)
            return TrackList.for_browsing(
                playlist.tracks,
                list_type=TrackListType.PLAYLIST,
                playlist=playlist.summary(),
            )

        return await self._cached(f"playlist:{playlist_id}", fetch)

    async def user_playlists(self) -> list[Playlist]:
        return await self._cached("user_playlists", self._catalog.get_user_playlists)

    async def prefetch(self, action: actions.Action) -> None:
        """Run the read named by a catalog action so its result is cached."""
        match action:
            case actions.Search(query=query):
                await self.search(query)
            case actions.FetchArtistAlbums(artist_id=artist_id):
                await self.artist_albums(artist_id)
            case actions.FetchPlaylistTracks(playlist_id=playlist_id):
                await self.playlist_tracks(playlist_id)
            case actions.FetchUserPlaylists():
                await self.user_playlists()
            case _:
                raise ValueError(f"{action.kind} is not a catalog read")
        logger.debug(LogTemplates.CATALOG_QUERY_PREFETCHED, action.kind)

    def invalidate(self) -> None:
        self._cache.clear()

    async def _cached(self, key: str, fetch: Callable[[], Awaitable[Any]]) -> Any:
        now = self._clock()
        cached = self._cache.get(key)
        if cached is not None:
            if now - cached.cached_at < self._cache_ttl:
                logger.debug(LogTemplates.CATALOG_CACHE_HIT, key)
                return cached.value
            self._cache.pop(key, None)

        value = await fetch()
        self._cache[key] = CacheEntry(value=value, cached_at=now)

        if len(self._cache) > CACHE_MAX_SIZE:
            expired = [k for k, e in self._cache.items() if now - e.cached_at >= self._cache_ttl]
            for k in expired:
                self._cache.pop(k, None)
        return value
