from __future__ import annotations

import asyncio
from collections.abc import Callable

import pytest
import pytest_asyncio

from hifi_player.application.interfaces.audio_backend import (
    AudioBackend,
    BackendEvent,
    BufferingChanged,
    EndOfStream,
    StateChanged,
)
from hifi_player.application.interfaces.catalog import CatalogClient
from hifi_player.domain.music.entities import Album, Artist, Playlist, SearchResults, Track
from hifi_player.domain.music.notifications import Notification
from hifi_player.domain.music.value_objects import AudioQuality, PlaybackState
from hifi_player.domain.shared.exceptions import (
    BackendOpenError,
    CatalogError,
    EntityNotFoundError,
)

# ============================================================================
# Fake Collaborators
# ============================================================================


def make_track(track_id: int, number: int = 1, **kwargs) -> Track:
    defaults = {
        "title": f"Track {track_id}",
        "artist": Artist(id=1, name="Test Artist"),
        "number": number,
        "duration_seconds": 180,
    }
    defaults.update(kwargs)
    return Track(id=track_id, **defaults)


def make_album(album_id: str, count: int, *, unavailable: tuple[int, ...] = (), base_id: int = 100):
    """Album of ``count`` tracks; ``unavailable`` holds 1-based track numbers."""
    tracks = [
        make_track(base_id + n, number=n, available=n not in unavailable)
        for n in range(1, count + 1)
    ]
    return Album(
        id=album_id,
        title=f"Album {album_id}",
        artist=Artist(id=1, name="Test Artist"),
        total_tracks=count,
        tracks=tracks,
    )


class FakeCatalog(CatalogClient):
    """Catalog double with per-call failure injection and blocking gates."""

    def __init__(self) -> None:
        self.albums: dict[str, Album] = {}
        self.tracks: dict[int, Track] = {}
        self.playlists: dict[int, Playlist] = {}
        self.user_playlists: list[Playlist] = []
        self.failures: dict[str, Exception] = {}
        self.unresolvable: set[int] = set()
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[str] = []
        self.cancelled: list[str] = []

    def add_album(self, album: Album) -> Album:
        self.albums[album.id] = album
        for track in album.tracks:
            self.tracks[track.id] = track.model_copy(update={"album": album.summary()})
        return album

    def gate(self, key: str) -> asyncio.Event:
        """Make the call identified by ``key`` (e.g. ``album:A1``) wait for the returned event."""
        event = asyncio.Event()
        self.gates[key] = event
        return event

    async def _enter(self, key: str) -> None:
        self.calls.append(key)
        gate = self.gates.get(key)
        if gate is not None:
            try:
                await gate.wait()
            except asyncio.CancelledError:
                self.cancelled.append(key)
                raise
        failure = self.failures.get(key)
        if failure is not None:
            raise failure

    async def get_album(self, album_id: str) -> Album:
        await self._enter(f"album:{album_id}")
        if album_id not in self.albums:
            raise EntityNotFoundError("Album", album_id)
        return self.albums[album_id]

    async def get_track(self, track_id: int) -> Track:
        await self._enter(f"track:{track_id}")
        if track_id not in self.tracks:
            raise EntityNotFoundError("Track", track_id)
        return self.tracks[track_id]

    async def get_artist_albums(self, artist_id: int) -> list[Album]:
        await self._enter(f"artist:{artist_id}")
        return [a for a in self.albums.values() if a.artist and a.artist.id == artist_id]

    async def get_playlist(self, playlist_id: int) -> Playlist:
        await self._enter(f"playlist:{playlist_id}")
        if playlist_id not in self.playlists:
            raise EntityNotFoundError("Playlist", playlist_id)
        return self.playlists[playlist_id]

    async def search(self, query: str, limit: int = 10) -> SearchResults:
        await self._enter(f"search:{query}")
        tracks = [t for t in self.tracks.values() if query.lower() in t.title.lower()]
        return SearchResults(query=query, tracks=tracks[:limit])

    async def get_user_playlists(self) -> list[Playlist]:
        await self._enter("user_playlists")
        return list(self.user_playlists)

    async def get_track_stream_url(
        self, track_id: int, quality: AudioQuality = AudioQuality.HIFI96
    ) -> str:
        await self._enter(f"stream:{track_id}")
        if track_id in self.unresolvable:
            raise CatalogError(f"No stream for {track_id}", status=404)
        return f"sim://track/{track_id}"


class FakeBackend(AudioBackend):
    """Backend double that records calls and scripts the events a real engine sends.

    With ``auto_start`` every ``play()`` after a ``load()`` reports two
    buffering steps and then Playing at ``stream_quality``.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []
        self.loaded: list[str] = []
        self.broken: set[str] = set()
        self.auto_start = True
        self.stream_quality: tuple[int, float] | None = None
        self.closed = False
        self._fresh_load = False
        self._events: asyncio.Queue[BackendEvent | None] = asyncio.Queue()

    def emit(self, event: BackendEvent) -> None:
        self._events.put_nowait(event)

    def finish(self) -> None:
        self.emit(EndOfStream())

    def calls_named(self, name: str) -> list[object]:
        return [arg for call, arg in self.calls if call == name]

    async def load(self, uri: str) -> None:
        self.calls.append(("load", uri))
        if uri in self.broken:
            raise BackendOpenError(uri)
        self.loaded.append(uri)
        self._fresh_load = True

    async def play(self) -> None:
        self.calls.append(("play", None))
        if self._fresh_load and self.auto_start:
            self._fresh_load = False
            bit_depth, sample_rate = self.stream_quality or (None, None)
            self.emit(BufferingChanged(percent=50))
            self.emit(BufferingChanged(percent=100))
            self.emit(
                StateChanged(
                    state=PlaybackState.PLAYING, bit_depth=bit_depth, sample_rate=sample_rate
                )
            )

    async def pause(self) -> None:
        self.calls.append(("pause", None))

    async def stop(self) -> None:
        self.calls.append(("stop", None))

    async def seek(self, seconds: float) -> None:
        self.calls.append(("seek", seconds))

    async def close(self) -> None:
        self.calls.append(("close", None))
        self.closed = True
        self._events.put_nowait(None)

    async def events(self):
        while True:
            event = await self._events.get()
            if event is None:
                return
            yield event


# ============================================================================
# Player Harness
# ============================================================================


class PlayerHarness:
    """A running controller wired to fakes, plus a recording subscriber."""

    def __init__(self, *, bus, controls, hub, catalog, backend, queries, controller) -> None:
        self.bus = bus
        self.controls = controls
        self.hub = hub
        self.catalog = catalog
        self.backend = backend
        self.queries = queries
        self.controller = controller
        self.subscription = hub.subscribe()
        self.seen: list[Notification] = []

    async def until(
        self, predicate: Callable[[Notification], bool], timeout: float = 2.0
    ) -> Notification:
        """Record notifications until one matches ``predicate`` and return it."""

        async def read() -> Notification:
            while True:
                notification = await self.subscription.receive()
                self.seen.append(notification)
                if predicate(notification):
                    return notification

        return await asyncio.wait_for(read(), timeout)

    async def until_status(self, state: PlaybackState) -> Notification:
        return await self.until(lambda n: n.kind == "status" and n.state == state)

    def mark(self) -> int:
        """Index into ``seen`` from which later assertions should look."""
        return len(self.seen)

    def kinds(self, since: int = 0) -> list[str]:
        return [n.kind for n in self.seen[since:]]

    async def settle(self) -> None:
        """Let the controller drain everything queued so far."""
        for _ in range(50):
            await asyncio.sleep(0)


@pytest.fixture
def fake_catalog():
    catalog = FakeCatalog()
    catalog.add_album(make_album("A1", 4, unavailable=(3,), base_id=100))
    catalog.add_album(make_album("A5", 5, base_id=500))
    catalog.tracks[42] = make_track(42, title="The Answer", duration_seconds=42)
    catalog.playlists[7] = Playlist(
        id=7, title="Mix", total_tracks=2, tracks=[make_track(701), make_track(702)]
    )
    return catalog


@pytest.fixture
def album_factory():
    return make_album


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest_asyncio.fixture
async def player(fake_catalog, fake_backend):
    from hifi_player.application.queries.catalog_queries import CatalogQueryService
    from hifi_player.application.services.command_bus import CommandBus, Controls
    from hifi_player.application.services.notification_hub import NotificationHub
    from hifi_player.application.services.playback_controller import PlaybackController

    bus = CommandBus(10)
    hub = NotificationHub(buffer_size=512)
    queries = CatalogQueryService(catalog=fake_catalog)
    controller = PlaybackController(
        bus=bus,
        hub=hub,
        catalog=fake_catalog,
        backend=fake_backend,
        queries=queries,
        jump_seconds=15,
    )
    harness = PlayerHarness(
        bus=bus,
        controls=Controls(bus),
        hub=hub,
        catalog=fake_catalog,
        backend=fake_backend,
        queries=queries,
        controller=controller,
    )
    controller.start()
    yield harness

    if controller.is_running:
        if not bus.is_closed:
            await harness.controls.quit()
        await asyncio.wait_for(controller.wait_closed(), 2.0)
