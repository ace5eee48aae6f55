"""Infrastructure layer - reference implementations of the external collaborators.

This layer contains implementations for:
- Catalog (in-memory library loaded from JSON)
- Audio (timer-driven simulated backend)
"""

from hifi_player.infrastructure.audio.simulated_backend import SimulatedAudioBackend
from hifi_player.infrastructure.catalog.memory_catalog import InMemoryCatalog

__all__ = [
    "InMemoryCatalog",
    "SimulatedAudioBackend",
]
