"""
Simulated Audio Backend

Reference ``AudioBackend`` that plays nothing but produces the event stream a
real decode/output engine would: buffering progress, the negotiated stream
format, position ticks and end-of-stream.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from enum import Enum
from typing import Final
from urllib.parse import parse_qs, urlsplit

from hifi_player.application.interfaces.audio_backend import (
    AudioBackend,
    BackendEvent,
    BufferingChanged,
    EndOfStream,
    PositionChanged,
    StateChanged,
)
from hifi_player.domain.music.value_objects import PlaybackState
from hifi_player.domain.shared.exceptions import BackendOpenError
from hifi_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

PLAYABLE_SCHEMES: Final[frozenset[str]] = frozenset({"sim", "http", "https", "file"})


class BackendState(Enum):
    """States for the simulated engine."""

    IDLE = "idle"
    LOADED = "loaded"
    PLAYING = "playing"
    PAUSED = "paused"
    CLOSED = "closed"


@dataclass
class SimulatedBackendConfig:
    """Timing of the simulated engine."""

    # Interval between buffering steps and between position ticks
    tick_seconds: float = 1.0
    buffer_steps: int = 4

    # Playback speed: stream seconds advanced per wall-clock second
    time_scale: float = 1.0

    # Length assumed for streams that don't state one; 0 plays until stopped
    default_duration: float = 0.0


@dataclass
class StreamInfo:
    uri: str
    duration: float
    bit_depth: int | None = None
    sample_rate: float | None = None

    @classmethod
    def parse(cls, uri: str, default_duration: float) -> StreamInfo:
        """Read stream properties from a URI.

        Raises:
            BackendOpenError: If the scheme is not one the engine can open.
        """
        parts = urlsplit(uri)
        if parts.scheme not in PLAYABLE_SCHEMES:
            raise BackendOpenError(uri)

        query = parse_qs(parts.query)

        def first(name: str) -> str | None:
            values = query.get(name)
            return values[0] if values else None

        try:
            duration = float(first("duration") or default_duration)
            bit_depth = int(first("bit_depth")) if first("bit_depth") else None
            sample_rate = float(first("sample_rate")) if first("sample_rate") else None
        except ValueError as exc:
            raise BackendOpenError(uri, f"Malformed stream parameters in '{uri}': {exc}") from exc
        return cls(uri=uri, duration=duration, bit_depth=bit_depth, sample_rate=sample_rate)


class SimulatedAudioBackend(AudioBackend):
    """Timer-driven audio engine for development and tests."""

    def __init__(self, config: SimulatedBackendConfig | None = None) -> None:
        self._config = config or SimulatedBackendConfig()
        self._events: asyncio.Queue[BackendEvent | None] = asyncio.Queue()
        self._state = BackendState.IDLE
        self._stream: StreamInfo | None = None
        self._elapsed = 0.0
        self._resumed = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> BackendState:
        return self._state

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def stream(self) -> StreamInfo | None:
        return self._stream

    def _publish(self, event: BackendEvent) -> None:
        self._events.put_nowait(event)

    def _ensure_open(self) -> None:
        if self._state == BackendState.CLOSED:
            raise RuntimeError("Audio backend is closed")

    async def _cancel_stream(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def load(self, uri: str) -> None:
        self._ensure_open()
        await self._cancel_stream()
        self._stream = StreamInfo.parse(uri, self._config.default_duration)
        self._elapsed = 0.0
        self._resumed.clear()
        self._state = BackendState.LOADED
        logger.debug(LogTemplates.BACKEND_LOADED, uri)

    async def play(self) -> None:
        self._ensure_open()
        match self._state:
            case BackendState.PAUSED:
                self._state = BackendState.PLAYING
                self._resumed.set()
                self._publish(StateChanged(state=PlaybackState.PLAYING))
            case BackendState.LOADED:
                self._state = BackendState.PLAYING
                self._resumed.set()
                self._task = asyncio.create_task(self._run_stream())
            case _:
                return

    async def pause(self) -> None:
        self._ensure_open()
        if self._state != BackendState.PLAYING:
            return
        self._state = BackendState.PAUSED
        self._resumed.clear()
        self._publish(StateChanged(state=PlaybackState.PAUSED))

    async def stop(self) -> None:
        if self._state in (BackendState.IDLE, BackendState.CLOSED):
            return
        await self._cancel_stream()
        self._state = BackendState.IDLE
        self._stream = None
        self._elapsed = 0.0
        self._publish(StateChanged(state=PlaybackState.STOPPED))

    async def seek(self, seconds: float) -> None:
        self._ensure_open()
        if self._stream is None:
            return
        target = max(0.0, seconds)
        if self._stream.duration > 0:
            target = min(target, self._stream.duration)
        self._elapsed = target
        self._publish(PositionChanged(elapsed=target))

    async def close(self) -> None:
        if self._state == BackendState.CLOSED:
            return
        await self._cancel_stream()
        self._state = BackendState.CLOSED
        self._events.put_nowait(None)
        logger.debug(LogTemplates.BACKEND_CLOSED)

    async def events(self) -> AsyncIterator[BackendEvent]:
        while True:
            event = await self._events.get()
            if event is None:
                return
            yield event

    async def _run_stream(self) -> None:
        stream = self._stream
        if stream is None:
            return
        tick = self._config.tick_seconds

        steps = max(1, self._config.buffer_steps)
        for step in range(1, steps + 1):
            await asyncio.sleep(tick)
            self._publish(BufferingChanged(percent=step * 100 // steps))

        self._publish(
            StateChanged(
                state=PlaybackState.PLAYING,
                bit_depth=stream.bit_depth,
                sample_rate=stream.sample_rate,
            )
        )

        while stream.duration <= 0 or self._elapsed < stream.duration:
            await self._resumed.wait()
            await asyncio.sleep(tick)
            if not self._resumed.is_set():
                continue
            self._elapsed += tick * self._config.time_scale
            if stream.duration > 0:
                self._elapsed = min(self._elapsed, stream.duration)
            self._publish(PositionChanged(elapsed=self._elapsed))

        self._state = BackendState.IDLE
        self._publish(EndOfStream())
