"""
Unit Tests for the Playback Controller

Tests for:
- Loading an album/track/playlist/URI and the notification sequence it produces
- Playing/Paused toggling and Stop
- Next/Previous/SkipTo navigation and end-of-list handling
- Seeking with JumpForward/JumpBackward
- Catalog and backend failure handling
- Superseded and cancelled resolutions, including a failed load after an earlier one started
- Catalog reads issued through the command bus
- Quit

Drives a running controller through the fake catalog and backend from conftest.
"""

from __future__ import annotations

import pytest

from hifi_player.application.interfaces.audio_backend import (
    BackendFailure,
    PositionChanged,
    StateChanged,
)
from hifi_player.domain.music.value_objects import PlaybackState, TrackListType, TrackStatus
from hifi_player.domain.shared.exceptions import CatalogError, ChannelClosedError
from hifi_player.domain.shared.messages import ErrorMessages


async def wait_for_call(player, key: str) -> None:
    for _ in range(200):
        if key in player.catalog.calls:
            return
        await player.settle()
    raise AssertionError(f"catalog call {key} never happened")


async def wait_for_load(player, uri: str) -> None:
    for _ in range(200):
        if uri in player.backend.loaded:
            return
        await player.settle()
    raise AssertionError(f"backend never loaded {uri}")


async def start_album(player, album_id: str = "A1") -> None:
    await player.controls.play_album(album_id)
    await player.until_status(PlaybackState.PLAYING)


class TestPlayAlbum:
    """Tests for resolving an album into the current track list."""

    @pytest.mark.asyncio
    async def test_album_skips_unstreamable_tracks(self, player):
        """Should enqueue only the 3 streamable tracks, positioned 1..3."""
        await start_album(player)

        tracklist = player.controller.snapshot()
        assert tracklist.positions() == [1, 2, 3]
        assert [t.id for t in tracklist.queue.values()] == [101, 102, 104]
        assert tracklist.list_type == TrackListType.ALBUM
        assert tracklist.album is not None and tracklist.album.id == "A1"

    @pytest.mark.asyncio
    async def test_loading_buffering_playing_order(self, player):
        """Should emit Loading, then Buffering, then Playing."""
        await start_album(player)

        kinds = player.kinds()
        first_loading = kinds.index("loading")
        first_buffering = kinds.index("buffering")
        playing = len(kinds) - 1
        assert first_loading < first_buffering < playing
        assert player.seen[first_loading].is_loading is True
        assert player.seen[first_loading].target_state == PlaybackState.PLAYING
        assert player.seen[-1].state == PlaybackState.PLAYING

    @pytest.mark.asyncio
    async def test_every_buffering_percentage_is_reported(self, player):
        """Should re-emit Buffering for each percentage the backend reports."""
        await start_album(player)

        buffering = [n for n in player.seen if n.kind == "buffering"]
        assert [n.percent for n in buffering] == [50, 100]
        assert [n.is_buffering for n in buffering] == [True, False]

    @pytest.mark.asyncio
    async def test_first_track_becomes_playing(self, player):
        """Should mark position 1 as Playing and hand its stream to the backend."""
        await start_album(player)

        tracklist = player.controller.snapshot()
        assert tracklist.current_position() == 1
        assert tracklist.get(1).status == TrackStatus.PLAYING
        assert player.backend.loaded == ["sim://track/101"]
        assert player.controller.state == PlaybackState.PLAYING

    @pytest.mark.asyncio
    async def test_current_track_list_notification_is_a_snapshot(self, player):
        """Should emit a CurrentTrackList that later mutations do not touch."""
        await start_album(player)
        notification = next(n for n in player.seen if n.kind == "currentTrackList")

        await player.controls.next()
        await player.until_status(PlaybackState.PLAYING)

        assert notification.list.current_position() == 1

    @pytest.mark.asyncio
    async def test_album_with_nothing_streamable_reports_error(
        self, player, fake_catalog, album_factory
    ):
        """Should emit Error and leave the state untouched."""
        fake_catalog.add_album(album_factory("EMPTY", 2, unavailable=(1, 2), base_id=900))

        await player.controls.play_album("EMPTY")
        error = await player.until(lambda n: n.kind == "error")
        loading = await player.until(lambda n: n.kind == "loading" and not n.is_loading)

        assert "no streamable tracks" in error.message
        assert loading.target_state == PlaybackState.NULL
        assert player.controller.state == PlaybackState.NULL
        assert player.controller.snapshot().is_empty()

    @pytest.mark.asyncio
    async def test_unknown_album_reports_error(self, player):
        """Should emit Error naming the album."""
        await player.controls.play_album("missing")
        error = await player.until(lambda n: n.kind == "error")

        assert error.message.startswith("Album 'missing' could not be loaded")
        assert player.backend.loaded == []


class TestReplaceWhilePlaying:
    """Tests for starting a new entity while another one plays."""

    @pytest.mark.asyncio
    async def test_play_track_while_playing(self, player):
        """Should emit one Loading pair and leave no stale Playing track."""
        await start_album(player)
        old_list = player.controller._tracklist
        since = player.mark()

        await player.controls.play_track(42)
        await player.until_status(PlaybackState.PLAYING)

        loading = [n for n in player.seen[since:] if n.kind == "loading"]
        assert [n.is_loading for n in loading] == [True, False]
        assert old_list.get(1).status == TrackStatus.PLAYED

        tracklist = player.controller.snapshot()
        assert tracklist.list_type == TrackListType.TRACK
        assert tracklist.current_track().id == 42
        assert sum(t.status == TrackStatus.PLAYING for t in tracklist.queue.values()) == 1

    @pytest.mark.asyncio
    async def test_newer_load_supersedes_older(self, player, fake_catalog):
        """Should discard the older resolution and emit Loading only once."""
        gate = fake_catalog.gate("album:A1")

        await player.controls.play_album("A1")
        await wait_for_call(player, "album:A1")
        await player.controls.play_album("A5")
        await player.until_status(PlaybackState.PLAYING)
        gate.set()
        await player.settle()

        loading = [n for n in player.seen if n.kind == "loading"]
        assert [n.is_loading for n in loading] == [True, False]
        assert "album:A1" in fake_catalog.cancelled
        assert player.controller.snapshot().album.id == "A5"


class TestResolutionFailure:
    """Tests for catalog failures while loading."""

    @pytest.mark.asyncio
    async def test_transport_error_keeps_paused_state(self, player, fake_catalog):
        """Should emit Error and return to Paused when PlayPlaylist fails."""
        await start_album(player)
        await player.controls.pause()
        await player.until_status(PlaybackState.PAUSED)
        fake_catalog.failures["playlist:7"] = CatalogError("connection reset")
        since = player.mark()

        await player.controls.play_playlist(7)
        error = await player.until(lambda n: n.kind == "error")
        loading = await player.until(lambda n: n.kind == "loading" and not n.is_loading)

        assert error.message == ErrorMessages.PLAYLIST_NOT_FOUND.format(
            playlist_id=7, reason="connection reset"
        )
        assert loading.target_state == PlaybackState.PAUSED
        assert player.controller.state == PlaybackState.PAUSED
        assert player.controller.snapshot().album.id == "A1"
        assert "status" not in player.kinds(since)

    @pytest.mark.asyncio
    async def test_stop_cancels_pending_resolution(self, player, fake_catalog):
        """Should cancel the catalog call and ignore anything it returns."""
        gate = fake_catalog.gate("album:A5")

        await player.controls.play_album("A5")
        await wait_for_call(player, "album:A5")
        await player.controls.stop()
        await player.until_status(PlaybackState.STOPPED)
        gate.set()
        await player.settle()

        assert "album:A5" in fake_catalog.cancelled
        assert player.controller.snapshot().is_empty()
        assert player.backend.loaded == []
        loading = [n for n in player.seen if n.kind == "loading"]
        assert loading[-1].is_loading is False
        assert loading[-1].target_state == PlaybackState.STOPPED


class TestOverlappingLoads:
    """Tests for a load that fails after an earlier one reached the backend."""

    @pytest.mark.asyncio
    async def test_failed_load_falls_back_to_started_track(self, player, fake_catalog):
        """Should keep loading the track the backend holds and finish on its Playing."""
        player.backend.auto_start = False
        fake_catalog.failures["playlist:7"] = CatalogError("connection reset")

        await player.controls.play_album("A1")
        await wait_for_load(player, "sim://track/101")
        await player.controls.play_playlist(7)
        await player.until(lambda n: n.kind == "error")
        await player.settle()

        assert player.controller.state == PlaybackState.LOADING
        assert player.controller.is_loading

        player.backend.emit(StateChanged(state=PlaybackState.PLAYING))
        await player.until_status(PlaybackState.PLAYING)

        assert player.controller.state == PlaybackState.PLAYING
        tracklist = player.controller.snapshot()
        assert tracklist.album.id == "A1"
        assert tracklist.current_position() == 1
        loading = [n for n in player.seen if n.kind == "loading"]
        assert [(n.is_loading, n.target_state) for n in loading] == [
            (True, PlaybackState.PLAYING),
            (False, PlaybackState.PLAYING),
        ]

    @pytest.mark.asyncio
    async def test_playing_reported_during_failed_load_is_applied(self, player, fake_catalog):
        """Should apply a backend Playing that arrived while the later load was pending."""
        player.backend.auto_start = False
        gate = fake_catalog.gate("playlist:7")

        await player.controls.play_album("A1")
        await wait_for_load(player, "sim://track/101")
        await player.controls.play_playlist(7)
        await wait_for_call(player, "playlist:7")
        player.backend.emit(StateChanged(state=PlaybackState.PLAYING))
        await player.settle()
        assert player.controller.state == PlaybackState.LOADING

        fake_catalog.failures["playlist:7"] = CatalogError("connection reset")
        gate.set()
        await player.until_status(PlaybackState.PLAYING)

        assert player.controller.snapshot().current_position() == 1
        assert not player.controller.is_loading
        assert player.backend.loaded == ["sim://track/101"]

    @pytest.mark.asyncio
    async def test_pause_while_loading_is_ignored(self, player, fake_catalog):
        """Should not pause the outgoing track while the next one resolves."""
        await start_album(player)
        gate = fake_catalog.gate("track:42")
        since = player.mark()

        await player.controls.play_track(42)
        await wait_for_call(player, "track:42")
        await player.controls.pause()
        await player.settle()
        gate.set()
        await player.until_status(PlaybackState.PLAYING)

        assert player.backend.calls_named("pause") == []
        assert PlaybackState.PAUSED not in [
            n.state for n in player.seen[since:] if n.kind == "status"
        ]
        assert player.controller.snapshot().current_track().id == 42


class TestPlayPause:
    """Tests for Play/Pause/PlayPause/Stop."""

    @pytest.mark.asyncio
    async def test_play_pause_twice_returns_to_playing(self, player):
        """Should go Playing -> Paused -> Playing."""
        await start_album(player)

        await player.controls.play_pause()
        await player.until_status(PlaybackState.PAUSED)
        await player.controls.play_pause()
        await player.until_status(PlaybackState.PLAYING)

        assert player.controller.state == PlaybackState.PLAYING
        assert player.backend.calls_named("pause") == [None]
        assert len(player.backend.calls_named("play")) == 2

    @pytest.mark.asyncio
    async def test_pause_with_nothing_loaded_is_noop(self, player):
        """Should not emit anything or touch the backend."""
        await player.controls.pause()
        await player.controls.play_pause()
        await player.settle()

        assert player.subscription.pending() == 0
        assert player.backend.calls == []
        assert player.controller.state == PlaybackState.NULL

    @pytest.mark.asyncio
    async def test_stop_then_play_restarts_current_track(self, player):
        """Should stop the backend, then reload the same track on Play."""
        await start_album(player)
        await player.controls.next()
        await player.until_status(PlaybackState.PLAYING)

        await player.controls.stop()
        await player.until_status(PlaybackState.STOPPED)
        stopped = player.controller.snapshot()
        assert stopped.current_track() is None
        assert stopped.get(2).status == TrackStatus.UNPLAYED

        await player.controls.play()
        await player.until_status(PlaybackState.PLAYING)
        assert player.controller.snapshot().current_position() == 2
        assert player.backend.loaded[-1] == "sim://track/102"


class TestNavigation:
    """Tests for Next/Previous/SkipTo and end-of-stream."""

    @pytest.mark.asyncio
    async def test_skip_to_absent_position_is_noop(self, player):
        """Should leave state and current track unchanged."""
        await start_album(player)
        since = player.mark()

        await player.controls.skip_to(99)
        await player.controls.pause()
        await player.until_status(PlaybackState.PAUSED)

        assert "loading" not in player.kinds(since)
        assert player.controller.snapshot().current_position() == 1
        assert player.backend.loaded == ["sim://track/101"]

    @pytest.mark.asyncio
    async def test_skip_to_position(self, player):
        """Should play the requested entry, marking earlier ones Played."""
        await start_album(player)

        await player.controls.skip_to(3)
        await player.until_status(PlaybackState.PLAYING)

        tracklist = player.controller.snapshot()
        assert tracklist.current_position() == 3
        assert [t.position for t in tracklist.played_tracks()] == [1, 2]

    @pytest.mark.asyncio
    async def test_next_from_last_stops_without_wrapping(self, player):
        """Should transition to Stopped rather than return to position 1."""
        await start_album(player)
        await player.controls.skip_to(3)
        await player.until_status(PlaybackState.PLAYING)

        await player.controls.next()
        await player.until_status(PlaybackState.STOPPED)

        assert player.backend.loaded == ["sim://track/101", "sim://track/104"]
        assert player.controller.state == PlaybackState.STOPPED
        assert player.controller.snapshot().current_track() is None

    @pytest.mark.asyncio
    async def test_previous_moves_back(self, player):
        """Should load the preceding entry and mark later ones Unplayed."""
        await start_album(player)
        await player.controls.skip_to(3)
        await player.until_status(PlaybackState.PLAYING)

        await player.controls.previous()
        await player.until_status(PlaybackState.PLAYING)

        tracklist = player.controller.snapshot()
        assert tracklist.current_position() == 2
        assert tracklist.get(3).status == TrackStatus.UNPLAYED

    @pytest.mark.asyncio
    async def test_previous_on_first_restarts_track(self, player):
        """Should seek to zero instead of loading anything."""
        await start_album(player)

        await player.controls.previous()
        position = await player.until(lambda n: n.kind == "position")

        assert position.elapsed == 0.0
        assert player.backend.calls_named("seek") == [0]
        assert player.backend.loaded == ["sim://track/101"]

    @pytest.mark.asyncio
    async def test_end_of_stream_advances_through_list_then_stops(self, player):
        """Should play all 5 tracks in order and stop after the last."""
        await player.controls.play_album("A5")

        for position in range(1, 6):
            await player.until_status(PlaybackState.PLAYING)
            assert player.controller.snapshot().current_position() == position
            player.backend.finish()

        await player.until_status(PlaybackState.STOPPED)

        assert player.backend.loaded == [f"sim://track/{500 + n}" for n in range(1, 6)]
        tracklist = player.controller.snapshot()
        assert all(t.status == TrackStatus.PLAYED for t in tracklist.queue.values())
        assert player.controller.state == PlaybackState.STOPPED

    @pytest.mark.asyncio
    async def test_next_and_previous_after_stop(self, player):
        """Should navigate from the entry that was playing when Stop arrived."""
        await start_album(player, "A5")
        await player.controls.skip_to(2)
        await player.until_status(PlaybackState.PLAYING)
        await player.controls.stop()
        await player.until_status(PlaybackState.STOPPED)

        await player.controls.next()
        await player.until_status(PlaybackState.PLAYING)
        assert player.controller.snapshot().current_position() == 3

        await player.controls.stop()
        await player.until_status(PlaybackState.STOPPED)
        await player.controls.previous()
        await player.until_status(PlaybackState.PLAYING)

        assert player.controller.snapshot().current_position() == 2
        assert player.backend.loaded[-2:] == ["sim://track/503", "sim://track/502"]

    @pytest.mark.asyncio
    async def test_previous_after_stop_on_first_reloads_it(self, player):
        """Should load the first entry again rather than seek a stopped backend."""
        await start_album(player, "A5")
        await player.controls.stop()
        await player.until_status(PlaybackState.STOPPED)

        await player.controls.previous()
        await player.until_status(PlaybackState.PLAYING)

        assert player.controller.snapshot().current_position() == 1
        assert player.backend.calls_named("seek") == []
        assert player.backend.loaded == ["sim://track/501", "sim://track/501"]


class TestJump:
    """Tests for JumpForward/JumpBackward."""

    @pytest.mark.asyncio
    async def test_jump_forward_and_backward(self, player):
        """Should seek by 15 seconds and emit the new position."""
        await start_album(player)

        await player.controls.jump_forward()
        forward = await player.until(lambda n: n.kind == "position")
        await player.controls.jump_backward()
        backward = await player.until(lambda n: n.kind == "position")

        assert forward.elapsed == 15
        assert backward.elapsed == 0
        assert player.backend.calls_named("seek") == [15, 0]

    @pytest.mark.asyncio
    async def test_jump_is_clamped_to_duration(self, player):
        """Should never seek past the end or before the start."""
        await start_album(player)
        player.backend.emit(PositionChanged(elapsed=170))
        await player.until(lambda n: n.kind == "position" and n.elapsed == 170)

        await player.controls.jump_forward()
        end = await player.until(lambda n: n.kind == "position")
        player.backend.emit(PositionChanged(elapsed=5))
        await player.until(lambda n: n.kind == "position" and n.elapsed == 5)
        await player.controls.jump_backward()
        start = await player.until(lambda n: n.kind == "position")

        assert end.elapsed == 180
        assert start.elapsed == 0


class TestBackendFailures:
    """Tests for streams that cannot be opened or resolved."""

    @pytest.mark.asyncio
    async def test_open_failure_marks_unavailable_and_advances(self, player, fake_backend):
        """Should skip the broken entry without reporting an error."""
        fake_backend.broken.add("sim://track/102")
        await start_album(player)

        player.backend.finish()
        await player.until_status(PlaybackState.PLAYING)

        tracklist = player.controller.snapshot()
        assert tracklist.get(2).available is False
        assert tracklist.current_position() == 3
        assert "error" not in player.kinds()

    @pytest.mark.asyncio
    async def test_backend_failure_during_playback_advances(self, player):
        """Should treat a backend error like an unplayable entry."""
        await start_album(player)

        player.backend.emit(BackendFailure(message="decoder crashed"))
        await player.until_status(PlaybackState.PLAYING)

        tracklist = player.controller.snapshot()
        assert tracklist.get(1).available is False
        assert tracklist.current_position() == 2

    @pytest.mark.asyncio
    async def test_exhausted_list_reports_error_and_stops(self, player, fake_catalog):
        """Should emit the exhaustion error once nothing streamable remains."""
        await start_album(player)
        fake_catalog.unresolvable.update({102, 104})

        await player.controls.next()
        error = await player.until(lambda n: n.kind == "error")
        await player.until_status(PlaybackState.STOPPED)

        assert error.message == ErrorMessages.LIST_EXHAUSTED
        tracklist = player.controller.snapshot()
        assert tracklist.available_positions() == [1]

    @pytest.mark.asyncio
    async def test_stream_quality_differs_from_catalog(self, player, fake_backend):
        """Should report the quality the backend actually negotiated."""
        fake_backend.stream_quality = (24, 96.0)

        await start_album(player)

        quality = next(n for n in player.seen if n.kind == "audioQuality")
        assert quality.bit_depth == 24
        assert quality.sample_rate == 96.0

    @pytest.mark.asyncio
    async def test_matching_stream_quality_is_not_reported(self, player, fake_backend):
        """Should stay silent when the stream matches the catalog metadata."""
        fake_backend.stream_quality = (16, 44.1)

        await start_album(player)

        assert "audioQuality" not in player.kinds()


class TestPlayUri:
    """Tests for ad-hoc URIs."""

    @pytest.mark.asyncio
    async def test_play_uri_bypasses_catalog(self, player):
        """Should build a one-entry Unknown list and stream the URI directly."""
        uri = "https://radio.example/live"

        await player.controls.play_uri(uri)
        await player.until_status(PlaybackState.PLAYING)

        tracklist = player.controller.snapshot()
        assert tracklist.list_type == TrackListType.UNKNOWN
        assert tracklist.total() == 1
        assert player.catalog.calls == []
        assert player.backend.loaded == [uri]


class TestCatalogReads:
    """Tests for Search/Fetch* actions sent through the bus."""

    @pytest.mark.asyncio
    async def test_search_action_warms_query_cache(self, player):
        """Should let a following direct query reuse the fetched results."""
        await player.controls.search("Track 10")
        await wait_for_call(player, "search:Track 10")
        await player.settle()

        results = await player.queries.search("Track 10")

        assert player.catalog.calls.count("search:Track 10") == 1
        assert {t.id for t in results.tracks} >= {101, 102}
        assert player.subscription.pending() == 0

    @pytest.mark.asyncio
    async def test_failed_read_reports_error(self, player, fake_catalog):
        """Should emit an Error notification naming the operation."""
        fake_catalog.failures["user_playlists"] = CatalogError("unauthorized", status=401)

        await player.controls.fetch_user_playlists()
        error = await player.until(lambda n: n.kind == "error")

        assert error.message == "fetchUserPlaylists failed: unauthorized"
        assert player.controller.state == PlaybackState.NULL


class TestQuit:
    """Tests for shutting the player down."""

    @pytest.mark.asyncio
    async def test_quit_closes_everything(self, player):
        """Should emit Quit, close bus and hub, and end the controller."""
        await start_album(player)

        await player.controls.quit()
        await player.until(lambda n: n.kind == "quit")
        await player.controller.wait_closed()

        assert player.bus.is_closed
        assert player.hub.is_closed
        assert player.backend.closed
        assert player.backend.calls_named("stop")
        with pytest.raises(ChannelClosedError):
            await player.subscription.receive()

    @pytest.mark.asyncio
    async def test_closing_bus_ends_controller(self, player):
        """Should stop cleanly when the bus is closed without Quit."""
        await player.bus.close()
        await player.controller.wait_closed()

        assert not player.controller.is_running
        assert player.hub.is_closed
