"""Reusable Pydantic ``Annotated`` types for domain-wide field constraints."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""

NonNegativeFloat = Annotated[float, Field(ge=0.0)]
"""Float >= 0.0."""

Percent = Annotated[int, Field(ge=0, le=100)]
"""Integer percentage: 0 … 100."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Track title: 1-500 characters."""

HttpUrlStr = Annotated[str, Field(pattern=r"^https?://")]
"""String that starts with http:// or https://."""


# ── Domain-specific numeric constraints ─────────────────────────────

CatalogId = Annotated[int, Field(ge=0)]
"""Numeric catalog identifier (tracks, artists, playlists)."""

ListPosition = Annotated[int, Field(gt=0)]
"""One-based position inside a track list."""

DurationSeconds = Annotated[int, Field(ge=0, le=86_400)]
"""Track duration in seconds: 0 … 86 400 (24 hours)."""

BitDepth = Annotated[int, Field(ge=0, le=64)]
"""Sample bit depth reported by the catalog or the stream."""

SampleRateKhz = Annotated[float, Field(ge=0.0, le=768.0)]
"""Sample rate in kHz (e.g. 44.1, 96.0, 192.0)."""

ReleaseYear = Annotated[int, Field(ge=0, le=9999)]
"""Four-digit release year; 0 when unknown."""


# ── Settings-specific constraints ──────────────────────────────────

BusCapacity = Annotated[int, Field(ge=1, le=1000)]
"""Command bus capacity: 1 … 1 000 pending actions."""

JumpSeconds = Annotated[int, Field(ge=1, le=600)]
"""Seek offset for jump forward/backward: 1 … 600 seconds."""

SubscriberBuffer = Annotated[int, Field(ge=1, le=10_000)]
"""Per-subscriber notification buffer: 1 … 10 000 entries."""
