"""Typed exceptions for packdir."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import PackResult


class PackdirError(Exception):
    """Base exception for packdir failures."""


class StartupValidationError(PackdirError):
    """Raised when command-line arguments are invalid."""


class DestinationCreateError(PackdirError):
    """Raised when the archive file cannot be created.

    This is the only failure that stops ``pack()``. ``result`` holds the
    counters gathered by the scan phase.
    """

    def __init__(self, message: str, result: PackResult) -> None:
        super().__init__(message)
        self.result = result


class PartialPackError(PackdirError):
    """Raised on request when individual entries failed to scan or archive."""


class IncompleteArchiveError(PartialPackError):
    """Raised on request when the archive could not be finalized.

    The archive file may be truncated or unreadable.
    """


class ArchiveIntegrityError(PackdirError):
    """Raised when zip integrity checks fail."""
