"""Directory traversal that collects entries for archiving."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from .diagnostics import Diagnostics
from .models import PackOptions, ScanResult
from .path_mapping import display_path

logger = logging.getLogger(__name__)


def scan_tree(
    source_dir: str | os.PathLike[str],
    *,
    diagnostics: Diagnostics | None = None,
) -> ScanResult:
    """Walk ``source_dir`` depth-first, directories before their contents.

    Children are visited in name order. Symlinks below the root are recorded
    as skipped and never followed. A failed stat or directory listing is
    counted and the walk moves on.
    """
    diag = (
        diagnostics.with_logger(logger)
        if diagnostics is not None
        else Diagnostics(PackOptions(), logger=logger)
    )
    root = Path(source_dir)
    entries: list[Path] = []
    skipped_symlinks: list[Path] = []
    total_size = 0
    error_count = 0

    # Children are pushed in reverse so they pop in name order.
    pending: list[tuple[Path, bool]] = [(root, True)]
    diag.trace("Scanning directory... ", end="")
    while pending:
        path, is_root = pending.pop()

        try:
            st = path.stat() if is_root else path.lstat()
        except OSError as exc:
            error_count += 1
            diag.error(f"Failed to stat {display_path(path)}: {exc}")
            continue

        if stat.S_ISLNK(st.st_mode):
            skipped_symlinks.append(path)
            continue

        entries.append(path)
        if not stat.S_ISDIR(st.st_mode):
            if stat.S_ISREG(st.st_mode):
                total_size += st.st_size
            continue

        try:
            children = sorted(path.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            error_count += 1
            diag.error(f"Failed to read directory {display_path(path)}: {exc}")
            continue

        pending.extend((child, False) for child in reversed(children))
    diag.trace("done.")

    if skipped_symlinks:
        logger.info("Skipped %d symlinks under %s", len(skipped_symlinks), root)

    return ScanResult(
        entries=entries,
        total_size=total_size,
        error_count=error_count,
        skipped_symlinks=skipped_symlinks,
    )
