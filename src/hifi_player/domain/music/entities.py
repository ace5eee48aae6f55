"""Core domain entities for the music bounded context."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from hifi_player.domain.music.value_objects import (
    UNSTREAMABLE,
    TrackListType,
    TrackStatus,
)
from hifi_player.domain.shared.exceptions import EntityNotFoundError
from hifi_player.domain.shared.messages import ErrorMessages
from hifi_player.domain.shared.types import (
    BitDepth,
    CatalogId,
    DurationSeconds,
    NonEmptyStr,
    NonNegativeInt,
    ReleaseYear,
    SampleRateKhz,
    TrackTitleStr,
)

_MAX_TITLE_LENGTH = 500


class Artist(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: CatalogId
    name: NonEmptyStr
    albums_count: NonNegativeInt = 0


class Track(BaseModel):
    """Immutable value object representing a playable track.

    ``position`` is the track's slot in the list that holds it (0 until the
    track is placed in a list); ``number`` is its index on the source album.
    """

    model_config = ConfigDict(frozen=True)

    id: CatalogId
    title: TrackTitleStr
    artist: Artist | None = None
    album: Album | None = None
    position: NonNegativeInt = 0
    number: NonNegativeInt = 0
    duration_seconds: DurationSeconds = 0
    bit_depth: BitDepth = 16
    sample_rate: SampleRateKhz = 44.1
    explicit: bool = False
    hires_available: bool = False
    available: bool = True
    stream_url: str | None = None
    status: TrackStatus = TrackStatus.UNPLAYED

    @property
    def duration_formatted(self) -> str:
        """Format duration as MM:SS or HH:MM:SS."""
        hours, remainder = divmod(self.duration_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)

        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"

    @property
    def display_title(self) -> str:
        if self.artist is not None:
            return f"{self.artist.name} - {self.title.strip()}"
        return self.title.strip()

    @property
    def selection_key(self) -> str:
        """Identifier a browser should submit, or the unstreamable sentinel."""
        return str(self.id) if self.available else UNSTREAMABLE

    def with_status(self, status: TrackStatus) -> Track:
        return self.model_copy(update={"status": status})

    def at_position(self, position: int) -> Track:
        return self.model_copy(update={"position": position, "status": TrackStatus.UNPLAYED})


class Album(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: NonEmptyStr
    title: NonEmptyStr
    artist: Artist | None = None
    release_year: ReleaseYear = 0
    total_tracks: NonNegativeInt = 0
    hires_available: bool = False
    explicit: bool = False
    available: bool = True
    cover_art: str | None = None
    tracks: list[Track] = Field(default_factory=list)

    @property
    def selection_key(self) -> str:
        return self.id if self.available else UNSTREAMABLE

    def summary(self) -> Album:
        """Copy of this album without its track listing, for track back-references."""
        return self.model_copy(update={"tracks": []})


class Playlist(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: CatalogId
    title: NonEmptyStr
    owner: str | None = None
    total_tracks: NonNegativeInt = 0
    tracks: list[Track] = Field(default_factory=list)

    def summary(self) -> Playlist:
        return self.model_copy(update={"tracks": []})


class SearchResults(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str
    albums: list[Album] = Field(default_factory=list)
    artists: list[Artist] = Field(default_factory=list)
    tracks: list[Track] = Field(default_factory=list)
    playlists: list[Playlist] = Field(default_factory=list)


Track.model_rebuild()


class TrackList(BaseModel):
    """Aggregate root: the ordered list of tracks currently loaded for playback.

    Positions are one-based, unique and ascending in source order. At most one
    entry holds ``TrackStatus.PLAYING`` at any time.
    """

    queue: dict[int, Track] = Field(default_factory=dict)
    list_type: TrackListType = TrackListType.UNKNOWN
    album: Album | None = None
    playlist: Playlist | None = None

    @model_validator(mode="after")
    def _check_invariants(self) -> TrackList:
        previous = 0
        for position, track in self.queue.items():
            if position <= previous:
                raise ValueError(ErrorMessages.POSITIONS_NOT_ASCENDING)
            if track.position != position:
                raise ValueError(ErrorMessages.POSITION_MISMATCH.format(position=position))
            previous = position
        playing = [t for t in self.queue.values() if t.status == TrackStatus.PLAYING]
        if len(playing) > 1:
            raise ValueError(ErrorMessages.MULTIPLE_PLAYING)
        return self

    # === Construction ===

    @classmethod
    def _positioned(cls, tracks: Iterable[Track], *, keep_unavailable: bool) -> dict[int, Track]:
        queue: dict[int, Track] = {}
        position = 1
        for track in tracks:
            if not track.available and not keep_unavailable:
                continue
            queue[position] = track.at_position(position)
            position += 1
        return queue

    @classmethod
    def from_album(cls, album: Album) -> TrackList:
        """Build a playback queue from an album, skipping unstreamable tracks."""
        summary = album.summary()
        tracks = (t.model_copy(update={"album": summary}) for t in album.tracks)
        return cls(
            queue=cls._positioned(tracks, keep_unavailable=False),
            list_type=TrackListType.ALBUM,
            album=summary,
        )

    @classmethod
    def from_playlist(cls, playlist: Playlist) -> TrackList:
        """Build a playback queue from a playlist, skipping unstreamable tracks."""
        return cls(
            queue=cls._positioned(playlist.tracks, keep_unavailable=False),
            list_type=TrackListType.PLAYLIST,
            playlist=playlist.summary(),
        )

    @classmethod
    def from_track(cls, track: Track) -> TrackList:
        return cls(
            queue=cls._positioned([track], keep_unavailable=False),
            list_type=TrackListType.TRACK,
            album=track.album,
        )

    @classmethod
    def from_uri(cls, uri: str) -> TrackList:
        """Ad-hoc single-entry list that streams ``uri`` directly."""
        track = Track(
            id=0,
            title=uri[:_MAX_TITLE_LENGTH] or "unknown",
            position=1,
            number=1,
            stream_url=uri,
        )
        return cls(queue={1: track}, list_type=TrackListType.UNKNOWN)

    @classmethod
    def for_browsing(
        cls,
        tracks: Iterable[Track],
        *,
        list_type: TrackListType = TrackListType.UNKNOWN,
        album: Album | None = None,
        playlist: Playlist | None = None,
    ) -> TrackList:
        """Build a list for search/browse views.

        Unstreamable entries are kept; their ``selection_key`` is the
        ``UNSTREAMABLE`` sentinel so a browser can disable them.
        """
        return cls(
            queue=cls._positioned(tracks, keep_unavailable=True),
            list_type=list_type,
            album=album,
            playlist=playlist,
        )

    # === Queries ===

    def __contains__(self, position: object) -> bool:
        return position in self.queue

    def total(self) -> int:
        return len(self.queue)

    def is_empty(self) -> bool:
        return not self.queue

    def positions(self) -> list[int]:
        return list(self.queue)

    def available_positions(self) -> list[int]:
        return [p for p, t in self.queue.items() if t.available]

    def get(self, position: int) -> Track | None:
        return self.queue.get(position)

    def current_track(self) -> Track | None:
        for track in self.queue.values():
            if track.status == TrackStatus.PLAYING:
                return track
        return None

    def current_position(self) -> int | None:
        track = self.current_track()
        return track.position if track is not None else None

    def unplayed_tracks(self) -> tuple[Track, ...]:
        """Tracks not yet finished (unplayed or playing), in position order."""
        return tuple(t for t in self.queue.values() if t.status != TrackStatus.PLAYED)

    def played_tracks(self) -> tuple[Track, ...]:
        return tuple(t for t in self.queue.values() if t.status == TrackStatus.PLAYED)

    # === Mutation ===

    def _require(self, position: int) -> Track:
        track = self.queue.get(position)
        if track is None:
            raise EntityNotFoundError("Track position", position)
        return track

    def set_status(self, position: int, status: TrackStatus) -> Track:
        """Set one entry's status, demoting any other playing entry to played."""
        track = self._require(position)
        if status == TrackStatus.PLAYING:
            for other_position, other in self.queue.items():
                if other_position != position and other.status == TrackStatus.PLAYING:
                    self.queue[other_position] = other.with_status(TrackStatus.PLAYED)
        updated = track.with_status(status)
        self.queue[position] = updated
        return updated

    def mark_current(self, position: int) -> Track:
        """Make ``position`` the playing entry; earlier entries become played, later unplayed."""
        self._require(position)
        for other_position, other in self.queue.items():
            if other_position < position:
                wanted = TrackStatus.PLAYED
            elif other_position > position:
                wanted = TrackStatus.UNPLAYED
            else:
                continue
            if other.status != wanted:
                self.queue[other_position] = other.with_status(wanted)
        return self.set_status(position, TrackStatus.PLAYING)

    def mark_unavailable(self, position: int) -> Track:
        track = self._require(position)
        updated = track.model_copy(update={"available": False})
        self.queue[position] = updated
        return updated

    def finish_current(self, status: TrackStatus = TrackStatus.PLAYED) -> Track | None:
        """Move the playing entry (if any) to ``status``."""
        position = self.current_position()
        if position is None:
            return None
        return self.set_status(position, status)
