"""Bounded multi-producer/single-consumer channel carrying player actions."""

from __future__ import annotations

import asyncio
import logging
from typing import Final

from ...domain.music import actions
from ...domain.music.actions import Action
from ...domain.shared.exceptions import ChannelClosedError, CommandBusFullError
from ...domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY: Final[int] = 10
_CHANNEL_NAME: Final[str] = "Command bus"


class _Closed:
    """Wake-up marker placed in the queue when the bus closes."""


_CLOSED: Final = _Closed()


class CommandBus:
    """Bounded FIFO of actions with backpressure.

    ``send`` suspends while the bus is full and never drops an action.
    Exactly one task may call ``receive``; once the bus is closed the
    receiver drains what is left and then gets ``ChannelClosedError``.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._capacity = capacity
        # One extra slot so close() can always enqueue the wake-up marker.
        self._queue: asyncio.Queue[Action | _Closed] = asyncio.Queue(maxsize=capacity + 1)
        self._space = asyncio.Condition()
        self._closed = False
        self._pending = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_closed(self) -> bool:
        return self._closed

    def pending(self) -> int:
        return self._pending

    def _is_full(self) -> bool:
        return self.pending() >= self._capacity

    async def send(self, action: Action) -> None:
        """Queue an action, waiting for room if the bus is at capacity.

        Raises:
            ChannelClosedError: If the bus is (or becomes) closed before the
                action could be queued.
        """
        async with self._space:
            if self._is_full() and not self._closed:
                logger.debug(LogTemplates.BUS_FULL_WAITING, action.kind)
            await self._space.wait_for(lambda: self._closed or not self._is_full())
            if self._closed:
                raise ChannelClosedError(_CHANNEL_NAME)
            self._queue.put_nowait(action)
            self._pending += 1
        logger.debug(LogTemplates.BUS_SEND, action.kind, self.pending())

    def send_nowait(self, action: Action) -> None:
        """Queue an action without waiting, for synchronous callers.

        Raises:
            CommandBusFullError: If the bus is at capacity.
            ChannelClosedError: If the bus is closed.
        """
        if self._closed:
            raise ChannelClosedError(_CHANNEL_NAME)
        if self._is_full():
            raise CommandBusFullError(self._capacity)
        self._queue.put_nowait(action)
        self._pending += 1
        logger.debug(LogTemplates.BUS_SEND, action.kind, self.pending())

    async def receive(self) -> Action:
        """Return the next action in FIFO order.

        Raises:
            ChannelClosedError: Once the bus is closed and drained.
        """
        if self._closed and self.pending() == 0:
            raise ChannelClosedError(_CHANNEL_NAME)

        item = await self._queue.get()
        if isinstance(item, _Closed):
            raise ChannelClosedError(_CHANNEL_NAME)
        self._pending -= 1

        async with self._space:
            self._space.notify()
        return item

    async def close(self) -> None:
        """Close the bus, waking the receiver and every suspended sender."""
        if self._closed:
            return
        self._closed = True
        if self._queue.empty():
            self._queue.put_nowait(_CLOSED)
        async with self._space:
            self._space.notify_all()
        logger.debug(LogTemplates.BUS_CLOSED)


class Controls:
    """Producer-side handle for issuing player actions.

    Constructed once and handed to every component that needs to command the
    player; any number of tasks may share it.
    """

    def __init__(self, bus: CommandBus) -> None:
        self._bus = bus

    @property
    def bus(self) -> CommandBus:
        return self._bus

    async def send(self, action: Action) -> None:
        await self._bus.send(action)

    async def play(self) -> None:
        await self._bus.send(actions.Play())

    async def pause(self) -> None:
        await self._bus.send(actions.Pause())

    async def play_pause(self) -> None:
        await self._bus.send(actions.PlayPause())

    async def stop(self) -> None:
        await self._bus.send(actions.Stop())

    async def quit(self) -> None:
        await self._bus.send(actions.Quit())

    async def next(self) -> None:
        await self._bus.send(actions.Next())

    async def previous(self) -> None:
        await self._bus.send(actions.Previous())

    async def skip_to(self, position: int) -> None:
        await self._bus.send(actions.SkipTo(position=position))

    async def jump_forward(self) -> None:
        await self._bus.send(actions.JumpForward())

    async def jump_backward(self) -> None:
        await self._bus.send(actions.JumpBackward())

    async def play_album(self, album_id: str) -> None:
        await self._bus.send(actions.PlayAlbum(album_id=album_id))

    async def play_track(self, track_id: int) -> None:
        await self._bus.send(actions.PlayTrack(track_id=track_id))

    async def play_uri(self, uri: str) -> None:
        await self._bus.send(actions.PlayUri(uri=uri))

    async def play_playlist(self, playlist_id: int) -> None:
        await self._bus.send(actions.PlayPlaylist(playlist_id=playlist_id))

    async def search(self, query: str) -> None:
        await self._bus.send(actions.Search(query=query))

    async def fetch_artist_albums(self, artist_id: int) -> None:
        await self._bus.send(actions.FetchArtistAlbums(artist_id=artist_id))

    async def fetch_playlist_tracks(self, playlist_id: int) -> None:
        await self._bus.send(actions.FetchPlaylistTracks(playlist_id=playlist_id))

    async def fetch_user_playlists(self) -> None:
        await self._bus.send(actions.FetchUserPlaylists())
