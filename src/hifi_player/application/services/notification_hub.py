"""Fan-out of player notifications to any number of observers."""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections import deque
from collections.abc import Awaitable, Callable
from typing import Final

from ...domain.music.notifications import Notification, QuitNotification
from ...domain.shared.exceptions import ChannelClosedError
from ...domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

DEFAULT_SUBSCRIBER_BUFFER: Final[int] = 256

NotificationHandler = Callable[[Notification], Awaitable[None]]


class Subscription:
    """One observer's view of the notification stream.

    Notifications arrive in emission order. When the buffer is full the
    oldest pending notification is discarded and ``dropped`` is incremented.
    """

    def __init__(self, hub: NotificationHub, subscriber_id: int, buffer_size: int) -> None:
        self._hub = hub
        self._id = subscriber_id
        self._buffer: deque[Notification] = deque()
        self._buffer_size = buffer_size
        self._ready = asyncio.Event()
        self._ended = False
        self.dropped = 0

    @property
    def id(self) -> int:
        return self._id

    @property
    def is_closed(self) -> bool:
        return self._ended

    def pending(self) -> int:
        return len(self._buffer)

    def _deliver(self, notification: Notification) -> None:
        if self._ended:
            raise ChannelClosedError(f"Subscription {self._id}")
        if len(self._buffer) >= self._buffer_size:
            self._buffer.popleft()
            self.dropped += 1
            logger.warning(LogTemplates.HUB_DROPPED, self._id)
        self._buffer.append(notification)
        self._ready.set()

    def _end(self) -> None:
        """Stop accepting notifications; buffered ones can still be received."""
        self._ended = True
        self._ready.set()

    async def receive(self) -> Notification:
        """Wait for the next notification.

        Raises:
            ChannelClosedError: Once the subscription has ended and is drained.
        """
        while not self._buffer:
            if self._ended:
                raise ChannelClosedError(f"Subscription {self._id}")
            self._ready.clear()
            await self._ready.wait()
        return self._buffer.popleft()

    def close(self) -> None:
        """Detach from the hub and discard anything still buffered."""
        if self._ended and not self._buffer:
            return
        self._hub._detach(self)
        self._buffer.clear()
        self._end()

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> Notification:
        try:
            return await self.receive()
        except ChannelClosedError:
            raise StopAsyncIteration from None

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class NotificationHub:
    """Broadcasts every emitted notification to every live subscription.

    ``emit`` is synchronous and never waits on a subscriber. Emitting a
    ``QuitNotification`` delivers it and then closes the hub.
    """

    def __init__(self, *, buffer_size: int = DEFAULT_SUBSCRIBER_BUFFER) -> None:
        if buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")
        self._buffer_size = buffer_size
        self._subscriptions: dict[int, Subscription] = {}
        self._ids = itertools.count(1)
        self._handler_tasks: set[asyncio.Task[None]] = set()
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self) -> Subscription:
        """Create a subscription that receives every later notification.

        Subscribing to a closed hub returns an already-ended subscription.
        """
        subscription = Subscription(self, next(self._ids), self._buffer_size)
        if self._closed:
            subscription._end()
            return subscription

        self._subscriptions[subscription.id] = subscription
        logger.debug(LogTemplates.HUB_SUBSCRIBED, subscription.id, len(self._subscriptions))
        return subscription

    def _detach(self, subscription: Subscription) -> None:
        if self._subscriptions.pop(subscription.id, None) is not None:
            logger.debug(
                LogTemplates.HUB_UNSUBSCRIBED, subscription.id, len(self._subscriptions)
            )

    def attach(self, handler: NotificationHandler) -> Subscription:
        """Feed every notification to ``handler`` from a dedicated task.

        Handler exceptions are logged and the task keeps draining. Closing the
        returned subscription stops the task.
        """
        subscription = self.subscribe()

        async def drain() -> None:
            async for notification in subscription:
                try:
                    await handler(notification)
                except Exception:
                    logger.exception(LogTemplates.HUB_HANDLER_ERROR, notification.kind)

        task = asyncio.create_task(drain())
        self._handler_tasks.add(task)
        task.add_done_callback(self._handler_tasks.discard)
        return subscription

    def emit(self, notification: Notification) -> None:
        if self._closed:
            logger.debug(LogTemplates.HUB_EMIT_AFTER_CLOSE, notification.kind)
            return

        for subscription in list(self._subscriptions.values()):
            try:
                subscription._deliver(notification)
            except Exception as exc:
                logger.warning(LogTemplates.HUB_DELIVERY_FAILED, subscription.id, exc)
                self._detach(subscription)

        if isinstance(notification, QuitNotification):
            self.close()

    def close(self) -> None:
        """End every subscription once it has drained; later emits are ignored."""
        if self._closed:
            return
        self._closed = True
        for subscription in self._subscriptions.values():
            subscription._end()
        self._subscriptions.clear()
        logger.debug(LogTemplates.HUB_CLOSED)

    async def join(self) -> None:
        """Wait for every ``attach`` handler task to finish draining."""
        if self._handler_tasks:
            await asyncio.gather(*self._handler_tasks, return_exceptions=True)
