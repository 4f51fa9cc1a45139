"""Literal constants used by packdir."""

HUFFMAN_ONLY = -2
DEFAULT_COMPRESSION = -1
NO_COMPRESSION = 0
LEVEL1 = 1
FAIR_COMPRESSION = 2
GOOD_COMPRESSION = 5
BEST_COMPRESSION = 9

MIN_COMPRESSION_LEVEL = HUFFMAN_ONLY
MAX_COMPRESSION_LEVEL = BEST_COMPRESSION
FALLBACK_COMPRESSION_LEVEL = FAIR_COMPRESSION

FALLBACK_TARGET_BASE = "snapshot"

COPY_BUFFER_SIZE = 64 * 1024

# Entries at or above this size need ZIP64 headers up front when streamed.
ZIP64_STREAM_THRESHOLD = (1 << 31) - 1

WARNING_PREFIX = "WARNING:"
ERROR_PREFIX = "ERROR:"
