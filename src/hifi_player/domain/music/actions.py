"""Player commands carried by the command bus.

Actions are fire-and-forget: they carry no reply channel, their effects are
observed through notifications (or, for catalog reads, through
``CatalogQueryService``).
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from hifi_player.domain.shared.types import CatalogId, NonEmptyStr


class PlayerAction(BaseModel):
    """Base class for all player actions."""

    model_config = ConfigDict(frozen=True)


class Play(PlayerAction):
    kind: Literal["play"] = "play"


class Pause(PlayerAction):
    kind: Literal["pause"] = "pause"


class PlayPause(PlayerAction):
    kind: Literal["playPause"] = "playPause"


class Next(PlayerAction):
    kind: Literal["next"] = "next"


class Previous(PlayerAction):
    kind: Literal["previous"] = "previous"


class Stop(PlayerAction):
    kind: Literal["stop"] = "stop"


class Quit(PlayerAction):
    kind: Literal["quit"] = "quit"


class SkipTo(PlayerAction):
    kind: Literal["skipTo"] = "skipTo"
    position: int


class JumpForward(PlayerAction):
    kind: Literal["jumpForward"] = "jumpForward"


class JumpBackward(PlayerAction):
    kind: Literal["jumpBackward"] = "jumpBackward"


class PlayAlbum(PlayerAction):
    kind: Literal["playAlbum"] = "playAlbum"
    album_id: NonEmptyStr


class PlayTrack(PlayerAction):
    kind: Literal["playTrack"] = "playTrack"
    track_id: CatalogId


class PlayUri(PlayerAction):
    kind: Literal["playUri"] = "playUri"
    uri: NonEmptyStr


class PlayPlaylist(PlayerAction):
    kind: Literal["playPlaylist"] = "playPlaylist"
    playlist_id: CatalogId


class Search(PlayerAction):
    kind: Literal["search"] = "search"
    query: NonEmptyStr


class FetchArtistAlbums(PlayerAction):
    kind: Literal["fetchArtistAlbums"] = "fetchArtistAlbums"
    artist_id: CatalogId


class FetchPlaylistTracks(PlayerAction):
    kind: Literal["fetchPlaylistTracks"] = "fetchPlaylistTracks"
    playlist_id: CatalogId


class FetchUserPlaylists(PlayerAction):
    kind: Literal["fetchUserPlaylists"] = "fetchUserPlaylists"


Action = Annotated[
    Play
    | Pause
    | PlayPause
    | Next
    | Previous
    | Stop
    | Quit
    | SkipTo
    | JumpForward
    | JumpBackward
    | PlayAlbum
    | PlayTrack
    | PlayUri
    | PlayPlaylist
    | Search
    | FetchArtistAlbums
    | FetchPlaylistTracks
    | FetchUserPlaylists,
    Field(discriminator="kind"),
]

_action_adapter: TypeAdapter[Action] = TypeAdapter(Action)

# Actions that start a new track and therefore pass through Loading.
LOADING_ACTIONS: tuple[type[PlayerAction], ...] = (
    PlayAlbum,
    PlayTrack,
    PlayUri,
    PlayPlaylist,
    SkipTo,
    Next,
    Previous,
)

CATALOG_READ_ACTIONS: tuple[type[PlayerAction], ...] = (
    Search,
    FetchArtistAlbums,
    FetchPlaylistTracks,
    FetchUserPlaylists,
)


def parse_action(data: str | bytes | dict[str, object]) -> Action:
    """Parse an action from its JSON text or a decoded mapping."""
    if isinstance(data, dict):
        return _action_adapter.validate_python(data)
    return _action_adapter.validate_json(data)
