"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class EntityNotFoundError(DomainError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, identifier: str | int, message: str | None = None) -> None:
        msg = message or f"{entity_type} with id '{identifier}' not found"
        super().__init__(msg, code="ENTITY_NOT_FOUND")
        self.entity_type = entity_type
        self.identifier = identifier


class InvalidReferenceError(EntityNotFoundError):
    """Raised when a referenced entity exists but has nothing streamable."""

    def __init__(self, entity_type: str, identifier: str | int, message: str | None = None) -> None:
        msg = message or f"{entity_type} '{identifier}' has no streamable tracks"
        super().__init__(entity_type, identifier, msg)
        self.code = "INVALID_REFERENCE"


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class CatalogError(DomainError):
    """Raised by catalog collaborators on transport or authentication failures."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message, code="CATALOG_ERROR")
        self.status = status


class BackendOpenError(DomainError):
    """Raised when the audio backend cannot open a stream."""

    def __init__(self, uri: str, message: str | None = None) -> None:
        msg = message or f"Audio backend could not open '{uri}'"
        super().__init__(msg, code="BACKEND_OPEN_FAILURE")
        self.uri = uri


class ChannelClosedError(DomainError):
    """Raised when sending to or receiving from a closed channel."""

    def __init__(self, channel: str, message: str | None = None) -> None:
        msg = message or f"{channel} is closed"
        super().__init__(msg, code="CHANNEL_CLOSED")
        self.channel = channel


class CommandBusFullError(DomainError):
    """Raised by non-blocking sends when the command bus is at capacity."""

    def __init__(self, capacity: int) -> None:
        super().__init__(f"Command bus is full (capacity {capacity})", code="COMMAND_BUS_FULL")
        self.capacity = capacity
