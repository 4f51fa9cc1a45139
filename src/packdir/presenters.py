"""User-facing text rendering."""

from __future__ import annotations

from .constants import ERROR_PREFIX, WARNING_PREFIX
from .models import PackResult

_DECIMAL_UNITS = ("B", "kB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")


def render_error(message: str) -> str:
    return f"{ERROR_PREFIX} {message}"


def render_warning(message: str) -> str:
    return f"{WARNING_PREFIX} {message}"


def format_human_size(size_bytes: int) -> str:
    """Render a byte count with decimal units and four significant digits."""
    value = float(size_bytes)
    unit_index = 0
    while value >= 1000 and unit_index < len(_DECIMAL_UNITS) - 1:
        value /= 1000
        unit_index += 1
    return f"{value:.4g}{_DECIMAL_UNITS[unit_index]}"


def render_scan_summary(*, entry_count: int, total_size: int, scan_error_count: int) -> str:
    return (
        f"Archiving {entry_count:,} files with total size "
        f"{format_human_size(total_size)}, {scan_error_count:,} errors during scan."
    )


def render_done(result: PackResult) -> str:
    if result.archive_error_count > 0:
        return f"Done, {result.archive_error_count:,} errors during archiving."
    return "Done."


def render_invalid_level(level: int, fallback: int) -> str:
    return f"Unsupported compression level {level}, using level {fallback} instead."


def render_result_lines(result: PackResult) -> list[str]:
    lines = [
        f"Entries scanned: {result.entry_count:,}",
        f"Total size: {format_human_size(result.total_size)}",
        f"Scan errors: {result.scan_error_count:,}",
        f"Archive errors: {result.archive_error_count:,}",
    ]
    if result.finalize_error is not None:
        lines.append(render_warning(f"Archive may be incomplete: {result.finalize_error}"))
    return lines
