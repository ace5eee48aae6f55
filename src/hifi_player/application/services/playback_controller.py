"""Playback Controller - the single task that owns the track list and playback state."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from ...domain.music import actions
from ...domain.music.entities import Track, TrackList
from ...domain.music.notifications import (
    AudioQualityNotification,
    BufferingNotification,
    CurrentTrackListNotification,
    ErrorNotification,
    LoadingNotification,
    Notification,
    PositionNotification,
    QuitNotification,
    StatusNotification,
)
from ...domain.music.services import QueueDomainService
from ...domain.music.value_objects import AudioQuality, PlaybackState, TrackStatus
from ...domain.shared.exceptions import (
    BackendOpenError,
    ChannelClosedError,
    DomainError,
    InvalidOperationError,
    InvalidReferenceError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ..interfaces.audio_backend import (
    BackendEvent,
    BackendFailure,
    BufferingChanged,
    EndOfStream,
    PositionChanged,
    StateChanged,
)

if TYPE_CHECKING:
    from ..interfaces.audio_backend import AudioBackend
    from ..interfaces.catalog import CatalogClient
    from ..queries.catalog_queries import CatalogQueryService
    from .command_bus import CommandBus
    from .notification_hub import NotificationHub

logger = logging.getLogger(__name__)

DEFAULT_JUMP_SECONDS = 15


# === Inbox messages produced by resolution tasks ===


class _InternalMessage(BaseModel):
    model_config = ConfigDict(frozen=True)


class _ListResolved(_InternalMessage):
    generation: int
    tracklist: TrackList
    position: int
    url: str


class _StreamResolved(_InternalMessage):
    generation: int
    position: int
    url: str


class _StreamFailed(_InternalMessage):
    generation: int
    position: int
    message: str


class _ResolveFailed(_InternalMessage):
    generation: int
    message: str


class _ReadFailed(_InternalMessage):
    message: str


class PlaybackController:
    """Drains the command bus and drives the audio backend through the track list.

    ``run()`` is the only code path that mutates the track list or the playback
    state. Catalog calls run in spawned tasks and report back through an
    internal inbox, which also receives every backend event, so commands,
    resolution results and backend events are handled one at a time.
    """

    def __init__(
        self,
        *,
        bus: CommandBus,
        hub: NotificationHub,
        catalog: CatalogClient,
        backend: AudioBackend,
        queries: CatalogQueryService,
        jump_seconds: int = DEFAULT_JUMP_SECONDS,
        audio_quality: AudioQuality = AudioQuality.HIFI96,
    ) -> None:
        self._bus = bus
        self._hub = hub
        self._catalog = catalog
        self._backend = backend
        self._queries = queries
        self._jump_seconds = jump_seconds
        self._audio_quality = audio_quality

        self._tracklist = TrackList()
        self._state = PlaybackState.NULL
        self._elapsed = 0.0

        # Loading bookkeeping: a generation number tags every resolution so a
        # superseded result can be recognised when it arrives.
        self._generation = 0
        self._pending: asyncio.Task[None] | None = None
        self._loading = False
        self._loading_position: int | None = None
        self._restore_state = PlaybackState.NULL
        self._ended_while_pending = False
        self._deferred_playing: StateChanged | None = None
        # Where navigation resumes from once Stop has released the current entry.
        self._stopped_position: int | None = None

        self._inbox: asyncio.Queue[BackendEvent | _InternalMessage] = asyncio.Queue()
        self._bus_waiter: asyncio.Task[actions.Action] | None = None
        self._inbox_waiter: asyncio.Task[BackendEvent | _InternalMessage] | None = None
        self._pump_task: asyncio.Task[None] | None = None
        self._reads: set[asyncio.Task[None]] = set()
        self._task: asyncio.Task[None] | None = None
        self._quit_emitted = False

    # === Observers ===

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def snapshot(self) -> TrackList:
        """Deep copy of the current track list."""
        return self._tracklist.model_copy(deep=True)

    # === Lifecycle ===

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self.run())

    async def wait_closed(self) -> None:
        if self._task is not None:
            await self._task

    async def stop(self) -> None:
        """Cancel the controller task without going through ``Quit``."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def run(self) -> None:
        self._pump_task = asyncio.create_task(self._pump_backend_events())
        logger.info(LogTemplates.CONTROLLER_STARTED)
        try:
            while True:
                message = await self._next_message()
                if message is None:
                    break
                try:
                    if isinstance(message, actions.PlayerAction):
                        if not await self._handle_action(message):
                            break
                    elif isinstance(message, BackendEvent):
                        await self._handle_backend_event(message)
                    else:
                        await self._handle_internal(message)
                except InvalidOperationError:
                    logger.exception(LogTemplates.CONTROLLER_REJECTED_TRANSITION)
                except Exception:
                    logger.exception(LogTemplates.CONTROLLER_HANDLER_ERROR, type(message).__name__)
        finally:
            await self._shutdown()
            logger.info(LogTemplates.CONTROLLER_STOPPED)

    async def _next_message(self) -> actions.Action | BackendEvent | _InternalMessage | None:
        """Wait for the next command or inbox item; None once the bus is closed."""
        if self._inbox_waiter is None:
            self._inbox_waiter = asyncio.create_task(self._inbox.get())
        if self._bus_waiter is None:
            self._bus_waiter = asyncio.create_task(self._bus.receive())

        await asyncio.wait(
            {self._inbox_waiter, self._bus_waiter}, return_when=asyncio.FIRST_COMPLETED
        )

        if self._inbox_waiter.done():
            waiter, self._inbox_waiter = self._inbox_waiter, None
            return waiter.result()

        waiter, self._bus_waiter = self._bus_waiter, None
        try:
            return waiter.result()
        except ChannelClosedError:
            return None

    async def _shutdown(self) -> None:
        self._cancel_pending()
        for task in (self._bus_waiter, self._inbox_waiter, *self._reads):
            if task is not None:
                task.cancel()
        self._bus_waiter = self._inbox_waiter = None
        self._reads.clear()

        await self._bus.close()
        if not self._quit_emitted:
            self._emit(QuitNotification())

        if self._pump_task is not None:
            self._pump_task.cancel()
            try:
                await self._pump_task
            except asyncio.CancelledError:
                pass
            self._pump_task = None
        await self._backend.close()

    async def _pump_backend_events(self) -> None:
        try:
            async for event in self._backend.events():
                await self._inbox.put(event)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(LogTemplates.CONTROLLER_PUMP_FAILED)
        logger.debug(LogTemplates.CONTROLLER_PUMP_ENDED)

    # === Helpers ===

    def _emit(self, notification: Notification) -> None:
        if isinstance(notification, QuitNotification):
            self._quit_emitted = True
        self._hub.emit(notification)

    def _set_state(self, target: PlaybackState) -> None:
        if not self._state.can_transition_to(target):
            raise InvalidOperationError(target.value, self._state.value)
        self._state = target

    def _set_status(self, target: PlaybackState) -> None:
        self._set_state(target)
        self._emit(StatusNotification(state=target))

    def _emit_tracklist(self) -> None:
        self._emit(CurrentTrackListNotification.snapshot(self._tracklist))

    def _cursor(self) -> int | None:
        """Navigation anchor: the loading entry, the playing one, else where playback stopped."""
        if self._loading and self._loading_position is not None:
            return self._loading_position
        current = self._tracklist.current_position()
        if current is None and self._state.is_idle:
            return self._stopped_position
        return current

    def _cancel_pending(self) -> None:
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _accept(self, generation: int) -> bool:
        """True if a resolution result belongs to the load in progress."""
        if generation != self._generation:
            logger.debug(LogTemplates.CONTROLLER_STALE_RESULT, generation, self._generation)
            return False
        self._pending = None
        return True

    def _begin_loading(self, position: int | None) -> int:
        """Enter Loading and return the generation for the new resolution."""
        self._cancel_pending()
        self._loading_position = position
        if not self._loading:
            self._loading = True
            self._restore_state = self._state
            self._ended_while_pending = False
            self._deferred_playing = None
            self._emit(LoadingNotification(is_loading=True, target_state=PlaybackState.PLAYING))
        self._set_state(PlaybackState.LOADING)
        return self._generation

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        """Run a resolution task; it stays pending until its result is accepted."""
        self._pending = asyncio.create_task(coro)

    # === Action handling ===

    async def _handle_action(self, action: actions.Action) -> bool:
        """Apply one action; False means the controller should stop."""
        logger.debug(LogTemplates.CONTROLLER_ACTION, action.kind, self._state.value)

        match action:
            case actions.Quit():
                await self._quit()
                return False
            case actions.Play():
                await self._play()
            case actions.Pause():
                await self._pause()
            case actions.PlayPause():
                if self._state == PlaybackState.PLAYING:
                    await self._pause()
                else:
                    await self._play()
            case actions.Stop():
                await self._stop()
            case actions.Next():
                await self._next()
            case actions.Previous():
                await self._previous()
            case actions.SkipTo(position=position):
                self._skip_to(position)
            case actions.JumpForward():
                await self._jump(self._jump_seconds)
            case actions.JumpBackward():
                await self._jump(-self._jump_seconds)
            case actions.PlayAlbum(album_id=album_id):
                self._load_entity(
                    "Album",
                    album_id,
                    lambda: self._build_album(album_id),
                    lambda reason: ErrorMessages.ALBUM_NOT_FOUND.format(
                        album_id=album_id, reason=reason
                    ),
                )
            case actions.PlayPlaylist(playlist_id=playlist_id):
                self._load_entity(
                    "Playlist",
                    playlist_id,
                    lambda: self._build_playlist(playlist_id),
                    lambda reason: ErrorMessages.PLAYLIST_NOT_FOUND.format(
                        playlist_id=playlist_id, reason=reason
                    ),
                )
            case actions.PlayTrack(track_id=track_id):
                self._load_entity(
                    "Track",
                    track_id,
                    lambda: self._build_track(track_id),
                    lambda reason: ErrorMessages.TRACK_NOT_FOUND.format(
                        track_id=track_id, reason=reason
                    ),
                )
            case actions.PlayUri(uri=uri):
                self._load_uri(uri)
            case (
                actions.Search()
                | actions.FetchArtistAlbums()
                | actions.FetchPlaylistTracks()
                | actions.FetchUserPlaylists()
            ):
                self._spawn_read(action)
        return True

    async def _play(self) -> None:
        if self._state == PlaybackState.PAUSED:
            await self._backend.play()
            logger.info(LogTemplates.PLAYBACK_RESUMED)
            self._set_status(PlaybackState.PLAYING)
            return

        if self._state.is_idle and not self._loading:
            position = QueueDomainService.resume_position(self._tracklist)
            if position is None:
                logger.info(LogTemplates.PLAYBACK_NOTHING_LOADED, "play")
                return
            self._load_position(position)
            return

        logger.debug(LogTemplates.PLAYBACK_IGNORED_IN_STATE, "play", self._state.value)

    async def _pause(self) -> None:
        if self._loading:
            # The next stream starts playing once it is handed over.
            logger.info(LogTemplates.PLAYBACK_IGNORED_WHILE_LOADING, "pause")
            return
        if self._state not in (PlaybackState.PLAYING, PlaybackState.BUFFERING):
            logger.info(LogTemplates.PLAYBACK_NOTHING_LOADED, "pause")
            return
        await self._backend.pause()
        logger.info(LogTemplates.PLAYBACK_PAUSED)
        self._set_status(PlaybackState.PAUSED)

    async def _stop(self) -> None:
        if not self._loading and not self._state.is_active:
            logger.info(LogTemplates.PLAYBACK_NOTHING_LOADED, "stop")
            return

        stopped_at = self._cursor()
        self._cancel_pending()
        if self._loading:
            self._loading = False
            self._loading_position = None
            self._emit(LoadingNotification(is_loading=False, target_state=PlaybackState.STOPPED))

        await self._backend.stop()
        self._elapsed = 0.0
        if self._tracklist.finish_current(TrackStatus.UNPLAYED) is not None:
            self._emit_tracklist()
        self._stopped_position = stopped_at
        logger.info(LogTemplates.PLAYBACK_STOPPED)
        self._set_status(PlaybackState.STOPPED)

    async def _quit(self) -> None:
        self._cancel_pending()
        for task in self._reads:
            task.cancel()
        await self._backend.stop()
        self._emit(QuitNotification())
        await self._bus.close()

    async def _next(self) -> None:
        cursor = self._cursor()
        if cursor is None:
            logger.info(LogTemplates.PLAYBACK_NOTHING_LOADED, "next")
            return
        await self._advance(cursor)

    async def _previous(self) -> None:
        cursor = self._cursor()
        if cursor is None:
            logger.info(LogTemplates.PLAYBACK_NOTHING_LOADED, "previous")
            return

        position = QueueDomainService.previous_position(self._tracklist, cursor)
        if position is not None:
            self._load_position(position)
            return

        if self._loading or self._state.is_idle:
            track = self._tracklist.get(cursor)
            if track is not None and track.available:
                self._load_position(cursor)
            return

        logger.info(LogTemplates.PLAYBACK_RESTART)
        await self._backend.seek(0)
        self._elapsed = 0.0
        self._emit(PositionNotification(elapsed=0.0))

    def _skip_to(self, position: int) -> None:
        track = self._tracklist.get(position)
        if track is None:
            logger.info(LogTemplates.SKIP_OUT_OF_RANGE, position)
            return
        if not track.available:
            logger.info(LogTemplates.SKIP_UNAVAILABLE, position)
            return
        self._load_position(position)

    async def _jump(self, offset: int) -> None:
        track = self._tracklist.current_track()
        if track is None or self._loading or not self._state.is_active:
            logger.info(LogTemplates.PLAYBACK_NOTHING_LOADED, "jump")
            return

        target = QueueDomainService.clamp_seek(track, self._elapsed + offset)
        logger.debug(LogTemplates.PLAYBACK_SEEK, target, track.duration_seconds)
        await self._backend.seek(target)
        self._elapsed = target
        self._emit(PositionNotification(elapsed=target))

    # === Loading ===

    async def _advance(self, after: int) -> None:
        """Move to the next available entry after ``after``, or stop at the end."""
        position = QueueDomainService.next_position(self._tracklist, after)
        if position is None:
            logger.info(LogTemplates.PLAYBACK_QUEUE_EXHAUSTED)
            await self._exhaust()
            return
        self._load_position(position)

    def _load_position(self, position: int) -> None:
        track = self._tracklist.get(position)
        if track is None:
            return
        generation = self._begin_loading(position)
        logger.info(LogTemplates.PLAYBACK_LOADING, track.display_title)
        self._spawn(self._resolve_stream(generation, track))

    def _load_uri(self, uri: str) -> None:
        tracklist = TrackList.from_uri(uri)
        generation = self._begin_loading(None)
        logger.info(LogTemplates.PLAYBACK_LOADING, uri)
        self._inbox.put_nowait(
            _ListResolved(generation=generation, tracklist=tracklist, position=1, url=uri)
        )

    def _load_entity(
        self,
        entity_type: str,
        identifier: str | int,
        build: Callable[[], Awaitable[TrackList]],
        describe_failure: Callable[[str], str],
    ) -> None:
        generation = self._begin_loading(None)
        logger.info(LogTemplates.PLAYBACK_LOADING, f"{entity_type.lower()} {identifier}")
        self._spawn(
            self._resolve_list(generation, entity_type, identifier, build, describe_failure)
        )

    async def _build_album(self, album_id: str) -> TrackList:
        album = await self._catalog.get_album(album_id)
        tracklist = TrackList.from_album(album)
        if tracklist.is_empty():
            raise InvalidReferenceError("Album", album_id)
        return tracklist

    async def _build_playlist(self, playlist_id: int) -> TrackList:
        playlist = await self._catalog.get_playlist(playlist_id)
        tracklist = TrackList.from_playlist(playlist)
        if tracklist.is_empty():
            raise InvalidReferenceError("Playlist", playlist_id)
        return tracklist

    async def _build_track(self, track_id: int) -> TrackList:
        track = await self._catalog.get_track(track_id)
        tracklist = TrackList.from_track(track)
        if tracklist.is_empty():
            raise InvalidReferenceError("Track", track_id)
        return tracklist

    async def _stream_url(self, track: Track) -> str:
        if track.stream_url:
            return track.stream_url
        return await self._catalog.get_track_stream_url(track.id, self._audio_quality)

    async def _resolve_list(
        self,
        generation: int,
        entity_type: str,
        identifier: str | int,
        build: Callable[[], Awaitable[TrackList]],
        describe_failure: Callable[[str], str],
    ) -> None:
        label = f"{entity_type.lower()} {identifier}"
        try:
            tracklist = await build()
            for position in tracklist.available_positions():
                track = tracklist.queue[position]
                try:
                    url = await self._stream_url(track)
                except DomainError as exc:
                    logger.warning(LogTemplates.TRACK_MARKED_UNAVAILABLE, position, exc.message)
                    tracklist.mark_unavailable(position)
                    continue
                await self._inbox.put(
                    _ListResolved(
                        generation=generation, tracklist=tracklist, position=position, url=url
                    )
                )
                return
            raise InvalidReferenceError(entity_type, identifier)
        except InvalidReferenceError as exc:
            message = exc.message
        except DomainError as exc:
            message = describe_failure(exc.message)
        except Exception as exc:
            logger.exception(LogTemplates.CATALOG_RESOLVE_FAILED, label, exc)
            message = describe_failure(str(exc))

        logger.warning(LogTemplates.CATALOG_RESOLVE_FAILED, label, message)
        await self._inbox.put(_ResolveFailed(generation=generation, message=message))

    async def _resolve_stream(self, generation: int, track: Track) -> None:
        try:
            url = await self._stream_url(track)
        except DomainError as exc:
            message = exc.message
        except Exception as exc:
            logger.exception(LogTemplates.CATALOG_RESOLVE_FAILED, track.display_title, exc)
            message = str(exc) or type(exc).__name__
        else:
            await self._inbox.put(
                _StreamResolved(generation=generation, position=track.position, url=url)
            )
            return
        await self._inbox.put(
            _StreamFailed(generation=generation, position=track.position, message=message)
        )

    def _spawn_read(self, action: actions.Action) -> None:
        async def read() -> None:
            try:
                await self._queries.prefetch(action)
            except DomainError as exc:
                await self._inbox.put(
                    _ReadFailed(
                        message=ErrorMessages.QUERY_FAILED.format(
                            operation=action.kind, reason=exc.message
                        )
                    )
                )
            except Exception as exc:
                logger.exception(LogTemplates.CATALOG_RESOLVE_FAILED, action.kind, exc)
                await self._inbox.put(
                    _ReadFailed(
                        message=ErrorMessages.QUERY_FAILED.format(
                            operation=action.kind, reason=str(exc)
                        )
                    )
                )

        task = asyncio.create_task(read())
        self._reads.add(task)
        task.add_done_callback(self._reads.discard)

    async def _start_track(self, position: int, url: str) -> None:
        """Make ``position`` current and hand its stream to the backend."""
        self._loading_position = position
        self._stopped_position = None
        self._deferred_playing = None
        track = self._tracklist.mark_current(position)
        self._elapsed = 0.0
        self._emit_tracklist()
        try:
            await self._backend.load(url)
        except BackendOpenError as exc:
            await self._handle_unplayable(position, exc.message)
            return
        # The backend now holds this stream; a later failed load falls back to it.
        self._restore_state = PlaybackState.LOADING
        await self._backend.play()
        logger.info(LogTemplates.PLAYBACK_STARTED, track.title, position, self._tracklist.total())

    async def _handle_unplayable(self, position: int, reason: str) -> None:
        logger.warning(LogTemplates.TRACK_MARKED_UNAVAILABLE, position, reason)
        if position in self._tracklist:
            self._tracklist.mark_unavailable(position)
        next_position = QueueDomainService.next_position(self._tracklist, position)
        if next_position is None:
            await self._exhaust(ErrorMessages.LIST_EXHAUSTED)
            return
        self._load_position(next_position)

    async def _exhaust(self, error: str | None = None) -> None:
        """The list has nothing further to play: stop at the end."""
        stopped_at = self._cursor()
        self._cancel_pending()
        if error:
            self._emit(ErrorNotification(message=error))
        if self._loading:
            self._loading = False
            self._loading_position = None
            self._emit(LoadingNotification(is_loading=False, target_state=PlaybackState.STOPPED))
        await self._backend.stop()
        self._elapsed = 0.0
        if self._tracklist.finish_current() is not None:
            self._emit_tracklist()
        self._stopped_position = stopped_at
        self._set_status(PlaybackState.STOPPED)

    # === Inbox handling ===

    async def _handle_internal(self, message: _InternalMessage) -> None:
        match message:
            case _ListResolved():
                if not self._accept(message.generation):
                    return
                self._tracklist.finish_current()
                self._tracklist = message.tracklist
                logger.info(
                    LogTemplates.TRACKLIST_REPLACED,
                    message.tracklist.list_type.value,
                    message.tracklist.total(),
                )
                await self._start_track(message.position, message.url)
            case _StreamResolved():
                if not self._accept(message.generation):
                    return
                await self._start_track(message.position, message.url)
            case _StreamFailed():
                if not self._accept(message.generation):
                    return
                await self._handle_unplayable(message.position, message.message)
            case _ResolveFailed():
                if not self._accept(message.generation):
                    return
                await self._restore_after_failure(message.message)
            case _ReadFailed():
                self._emit(ErrorNotification(message=message.message))

    async def _restore_after_failure(self, error: str) -> None:
        """Return to the state the failed command found.

        If an earlier load in the same episode already handed a stream to the
        backend, that load is still in progress: stay in Loading on its entry
        and let its backend events finish it.
        """
        previous = self._restore_state
        resuming = previous == PlaybackState.LOADING
        if resuming:
            self._loading_position = self._tracklist.current_position()
        else:
            self._loading = False
            self._loading_position = None
        self._set_state(previous)
        self._emit(ErrorNotification(message=error))
        if not resuming:
            self._emit(LoadingNotification(is_loading=False, target_state=previous))

        deferred, self._deferred_playing = self._deferred_playing, None
        if self._ended_while_pending:
            self._ended_while_pending = False
            cursor = self._tracklist.current_position()
            if cursor is not None:
                await self._advance(cursor)
        elif resuming and deferred is not None:
            await self._on_backend_playing(deferred)

    async def _handle_backend_event(self, event: BackendEvent) -> None:
        logger.debug(LogTemplates.CONTROLLER_BACKEND_EVENT, event.event_type, self._state.value)

        match event:
            case BufferingChanged(percent=percent):
                if self._pending is not None:
                    return
                if self._loading or self._state == PlaybackState.PLAYING:
                    self._set_state(PlaybackState.BUFFERING)
                elif not self._state.is_active:
                    return
                self._emit(
                    BufferingNotification(
                        is_buffering=percent < 100,
                        target_state=PlaybackState.PLAYING,
                        percent=percent,
                    )
                )
            case StateChanged(state=PlaybackState.PLAYING):
                await self._on_backend_playing(event)
            case StateChanged():
                logger.debug(LogTemplates.CONTROLLER_BACKEND_STATE, event.state.value)
            case PositionChanged(elapsed=elapsed):
                if self._tracklist.current_track() is None:
                    return
                self._elapsed = elapsed
                self._emit(PositionNotification(elapsed=elapsed))
            case EndOfStream():
                if self._pending is not None:
                    self._ended_while_pending = True
                    return
                cursor = self._tracklist.current_position()
                if cursor is not None:
                    await self._advance(cursor)
            case BackendFailure(message=message):
                if self._pending is not None:
                    self._ended_while_pending = True
                    return
                cursor = self._tracklist.current_position()
                if cursor is not None:
                    await self._handle_unplayable(cursor, message)

    async def _on_backend_playing(self, event: StateChanged) -> None:
        if self._pending is not None:
            self._deferred_playing = event
            return
        track = self._tracklist.current_track()
        if track is None:
            return

        if self._loading:
            self._loading = False
            self._loading_position = None
            self._emit(LoadingNotification(is_loading=False, target_state=PlaybackState.PLAYING))
            self._check_quality(track, event)
        elif self._state == PlaybackState.PLAYING:
            return

        self._set_status(PlaybackState.PLAYING)

    def _check_quality(self, track: Track, event: StateChanged) -> None:
        bit_depth = event.bit_depth if event.bit_depth is not None else track.bit_depth
        sample_rate = event.sample_rate if event.sample_rate is not None else track.sample_rate
        if bit_depth == track.bit_depth and sample_rate == track.sample_rate:
            return
        logger.info(
            LogTemplates.PLAYBACK_QUALITY_MISMATCH,
            bit_depth,
            sample_rate,
            track.bit_depth,
            track.sample_rate,
        )
        self._emit(AudioQualityNotification(bit_depth=bit_depth, sample_rate=sample_rate))
