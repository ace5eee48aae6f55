"""
Music Domain Services

Navigation rules over a track list that don't belong to a single entity.
"""

from __future__ import annotations

from hifi_player.domain.music.entities import Track, TrackList


class QueueDomainService:
    """Domain service for moving through a track list.

    Only available (streamable) entries are ever selected. Navigation never
    wraps around: stepping past either end returns ``None``.
    """

    @classmethod
    def first_position(cls, tracklist: TrackList) -> int | None:
        """Return the first available position, or None if nothing is streamable."""
        positions = tracklist.available_positions()
        return positions[0] if positions else None

    @classmethod
    def next_position(cls, tracklist: TrackList, after: int | None) -> int | None:
        """Return the first available position strictly after ``after``.

        Args:
            tracklist: The list to navigate.
            after: Reference position; ``None`` means "before the start".

        Returns:
            The next available position, or None when the list is exhausted.
        """
        if after is None:
            return cls.first_position(tracklist)
        for position in tracklist.available_positions():
            if position > after:
                return position
        return None

    @classmethod
    def previous_position(cls, tracklist: TrackList, before: int) -> int | None:
        """Return the last available position strictly before ``before``."""
        candidates = [p for p in tracklist.available_positions() if p < before]
        return candidates[-1] if candidates else None

    @classmethod
    def resume_position(cls, tracklist: TrackList) -> int | None:
        """Position to restart from after a stop: first unplayed entry, else the first."""
        for track in tracklist.unplayed_tracks():
            if track.available:
                return track.position
        return cls.first_position(tracklist)

    @classmethod
    def clamp_seek(cls, track: Track, target_seconds: float) -> float:
        """Clamp a seek target to ``[0, duration]`` of the given track.

        A duration of 0 means unknown (ad-hoc URIs); only the lower bound applies.
        """
        target = max(0.0, target_seconds)
        if track.duration_seconds == 0:
            return target
        return min(target, float(track.duration_seconds))
