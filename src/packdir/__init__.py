"""Snapshot a directory tree into a zip archive under one base directory."""

from .constants import (
    BEST_COMPRESSION,
    DEFAULT_COMPRESSION,
    FAIR_COMPRESSION,
    GOOD_COMPRESSION,
    HUFFMAN_ONLY,
    NO_COMPRESSION,
)
from .errors import (
    ArchiveIntegrityError,
    DestinationCreateError,
    IncompleteArchiveError,
    PackdirError,
    PartialPackError,
)
from .models import PackOptions, PackResult
from .pack_service import pack
from .progress import ConsoleProgressReporter, ProgressReporter

__all__ = [
    "BEST_COMPRESSION",
    "DEFAULT_COMPRESSION",
    "FAIR_COMPRESSION",
    "GOOD_COMPRESSION",
    "HUFFMAN_ONLY",
    "NO_COMPRESSION",
    "ArchiveIntegrityError",
    "ConsoleProgressReporter",
    "DestinationCreateError",
    "IncompleteArchiveError",
    "PackOptions",
    "PackResult",
    "PackdirError",
    "PartialPackError",
    "ProgressReporter",
    "pack",
]
