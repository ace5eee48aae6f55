"""
Shared Domain Kernel

Contains constrained types, messages and exceptions shared across the domain.
"""

from hifi_player.domain.shared.exceptions import (
    BackendOpenError,
    CatalogError,
    ChannelClosedError,
    CommandBusFullError,
    DomainError,
    EntityNotFoundError,
    InvalidOperationError,
    InvalidReferenceError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "EntityNotFoundError",
    "InvalidReferenceError",
    "InvalidOperationError",
    "CatalogError",
    "BackendOpenError",
    "ChannelClosedError",
    "CommandBusFullError",
]
