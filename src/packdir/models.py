"""Dataclasses shared across packdir layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .errors import IncompleteArchiveError, PartialPackError


@dataclass(frozen=True)
class PackOptions:
    """Diagnostic switches. None of them change what ends up in the archive."""

    print_info: bool = False
    print_errors: bool = False
    show_progress: bool = False
    verbose: bool = False


@dataclass(frozen=True)
class ScanResult:
    entries: list[Path]
    total_size: int
    error_count: int
    skipped_symlinks: list[Path] = field(default_factory=list)

    @property
    def entry_count(self) -> int:
        return len(self.entries)


@dataclass
class PackResult:
    """Counters for one pack operation.

    A result without ``finalize_error`` and with zero counters means every
    regular file made it into a complete archive. ``pack()`` returning
    normally does not imply that on its own.
    """

    entry_count: int = 0
    total_size: int = 0
    scan_error_count: int = 0
    archive_error_count: int = 0
    finalize_error: str | None = None

    @property
    def error_count(self) -> int:
        return self.scan_error_count + self.archive_error_count

    @property
    def ok(self) -> bool:
        return self.error_count == 0 and self.finalize_error is None

    def raise_for_errors(self) -> None:
        if self.finalize_error is not None:
            raise IncompleteArchiveError(
                f"Archive could not be finalized: {self.finalize_error}"
            )
        if self.error_count:
            raise PartialPackError(
                f"{self.scan_error_count} scan errors, "
                f"{self.archive_error_count} archive errors."
            )
