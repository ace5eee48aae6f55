"""Audio infrastructure - simulated decode/output engine."""

from hifi_player.infrastructure.audio.simulated_backend import (
    BackendState,
    SimulatedAudioBackend,
    SimulatedBackendConfig,
    StreamInfo,
)

__all__ = [
    "BackendState",
    "SimulatedAudioBackend",
    "SimulatedBackendConfig",
    "StreamInfo",
]
