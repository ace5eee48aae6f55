"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the player engine
and its external collaborators. These are the "ports" in
hexagonal architecture.
"""

from hifi_player.application.interfaces.audio_backend import (
    AudioBackend,
    BackendEvent,
    BackendFailure,
    BufferingChanged,
    EndOfStream,
    PositionChanged,
    StateChanged,
)
from hifi_player.application.interfaces.catalog import CatalogClient

__all__ = [
    "AudioBackend",
    "BackendEvent",
    "BackendFailure",
    "BufferingChanged",
    "CatalogClient",
    "EndOfStream",
    "PositionChanged",
    "StateChanged",
]
