"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class PlaybackPrimitiveError(DomainError):
    """Raised by a playback primitive when a command cannot be carried out."""

    def __init__(self, command: str, message: str | None = None) -> None:
        msg = message or f"Playback primitive failed to {command}"
        super().__init__(msg, code="PLAYBACK_PRIMITIVE_ERROR")
        self.command = command


class CatalogUnavailableError(DomainError):
    """Raised when the beat catalog cannot be fetched."""

    def __init__(self, url: str, attempts: int, message: str | None = None) -> None:
        msg = message or f"Catalog at {url} unavailable after {attempts} attempt(s)"
        super().__init__(msg, code="CATALOG_UNAVAILABLE")
        self.url = url
        self.attempts = attempts
