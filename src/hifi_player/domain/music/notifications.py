"""Events broadcast by the playback controller to every observer.

Each notification carries enough data for a subscriber to rebuild the
observable player state without querying the controller.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from hifi_player.domain.music.entities import TrackList
from hifi_player.domain.music.value_objects import PlaybackState
from hifi_player.domain.shared.types import (
    BitDepth,
    NonEmptyStr,
    NonNegativeFloat,
    Percent,
    SampleRateKhz,
)


class PlayerNotification(BaseModel):
    """Base class for all player notifications."""

    model_config = ConfigDict(frozen=True)


class QuitNotification(PlayerNotification):
    kind: Literal["quit"] = "quit"


class LoadingNotification(PlayerNotification):
    kind: Literal["loading"] = "loading"
    is_loading: bool
    target_state: PlaybackState


class StatusNotification(PlayerNotification):
    kind: Literal["status"] = "status"
    state: PlaybackState


class PositionNotification(PlayerNotification):
    kind: Literal["position"] = "position"
    elapsed: NonNegativeFloat


class CurrentTrackListNotification(PlayerNotification):
    """Snapshot of the current track list; never mutated after emission."""

    kind: Literal["currentTrackList"] = "currentTrackList"
    list: TrackList

    @classmethod
    def snapshot(cls, tracklist: TrackList) -> CurrentTrackListNotification:
        return cls(list=tracklist.model_copy(deep=True))


class BufferingNotification(PlayerNotification):
    kind: Literal["buffering"] = "buffering"
    is_buffering: bool
    target_state: PlaybackState
    percent: Percent


class AudioQualityNotification(PlayerNotification):
    kind: Literal["audioQuality"] = "audioQuality"
    bit_depth: BitDepth
    sample_rate: SampleRateKhz


class ErrorNotification(PlayerNotification):
    kind: Literal["error"] = "error"
    message: NonEmptyStr


Notification = Annotated[
    QuitNotification
    | LoadingNotification
    | StatusNotification
    | PositionNotification
    | CurrentTrackListNotification
    | BufferingNotification
    | AudioQualityNotification
    | ErrorNotification,
    Field(discriminator="kind"),
]
