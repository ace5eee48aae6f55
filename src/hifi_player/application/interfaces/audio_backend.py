"""Port interface and event payloads for the audio decode/output engine.

The playback controller is the only consumer of ``AudioBackend.events()``;
concrete engines translate their own bus messages into these models.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Literal

from pydantic import BaseModel, ConfigDict

from hifi_player.domain.music.value_objects import PlaybackState
from hifi_player.domain.shared.types import (
    BitDepth,
    NonEmptyStr,
    NonNegativeFloat,
    Percent,
    SampleRateKhz,
)


class BackendEvent(BaseModel):
    """Base class for backend-originated events."""

    model_config = ConfigDict(frozen=True)


class StateChanged(BackendEvent):
    """Backend state transition.

    When the new state is ``PLAYING`` the backend may report the quality it
    actually negotiated for the stream.
    """

    event_type: Literal["state_changed"] = "state_changed"
    state: PlaybackState
    bit_depth: BitDepth | None = None
    sample_rate: SampleRateKhz | None = None


class PositionChanged(BackendEvent):
    event_type: Literal["position"] = "position"
    elapsed: NonNegativeFloat


class BufferingChanged(BackendEvent):
    event_type: Literal["buffering"] = "buffering"
    percent: Percent


class EndOfStream(BackendEvent):
    event_type: Literal["end_of_stream"] = "end_of_stream"


class BackendFailure(BackendEvent):
    event_type: Literal["error"] = "error"
    message: NonEmptyStr


class AudioBackend(ABC):
    """Interface for the engine that decodes and outputs a stream URI."""

    @abstractmethod
    async def load(self, uri: str) -> None:
        """Prepare ``uri`` for playback, replacing whatever was loaded.

        Raises:
            BackendOpenError: If the stream cannot be opened.
        """
        ...

    @abstractmethod
    async def play(self) -> None:
        ...

    @abstractmethod
    async def pause(self) -> None:
        ...

    @abstractmethod
    async def stop(self) -> None:
        ...

    @abstractmethod
    async def seek(self, seconds: float) -> None:
        """Move the playback position to ``seconds`` from the start."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release resources and end the event stream."""
        ...

    @abstractmethod
    def events(self) -> AsyncIterator[BackendEvent]:
        """Stream of backend events; ends when the backend is closed."""
        ...
