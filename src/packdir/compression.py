"""Compression level validation and zipfile codec settings."""

from __future__ import annotations

import zipfile
from dataclasses import dataclass

from .constants import (
    DEFAULT_COMPRESSION,
    FALLBACK_COMPRESSION_LEVEL,
    HUFFMAN_ONLY,
    LEVEL1,
    MAX_COMPRESSION_LEVEL,
    MIN_COMPRESSION_LEVEL,
    NO_COMPRESSION,
)


@dataclass(frozen=True)
class ZipCodecSettings:
    compression: int
    compresslevel: int | None


def is_valid_compression_level(level: int) -> bool:
    return MIN_COMPRESSION_LEVEL <= level <= MAX_COMPRESSION_LEVEL


def normalize_compression_level(level: int) -> int:
    if is_valid_compression_level(level):
        return level
    return FALLBACK_COMPRESSION_LEVEL


def codec_settings_for_level(level: int) -> ZipCodecSettings:
    """Map a normalized level onto the arguments ``zipfile.ZipFile`` takes.

    zlib's Huffman-only strategy is not reachable through zipfile, so
    ``HUFFMAN_ONLY`` entries are ordinary deflate streams written at level 1,
    the fastest setting available, not Huffman-only streams.
    """
    if not is_valid_compression_level(level):
        raise ValueError(f"Compression level out of range: {level}")
    if level == NO_COMPRESSION:
        return ZipCodecSettings(compression=zipfile.ZIP_STORED, compresslevel=None)
    if level == DEFAULT_COMPRESSION:
        return ZipCodecSettings(compression=zipfile.ZIP_DEFLATED, compresslevel=None)
    if level == HUFFMAN_ONLY:
        return ZipCodecSettings(compression=zipfile.ZIP_DEFLATED, compresslevel=LEVEL1)
    return ZipCodecSettings(compression=zipfile.ZIP_DEFLATED, compresslevel=level)
