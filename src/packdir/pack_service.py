"""Pack workflow orchestration."""

from __future__ import annotations

import logging
import os
from typing import TextIO

from .compression import normalize_compression_level
from .constants import FAIR_COMPRESSION
from .diagnostics import Diagnostics
from .models import PackOptions, PackResult
from .path_mapping import normalize_source_dir, resolve_target_base
from .presenters import render_done, render_invalid_level, render_scan_summary
from .progress import ConsoleProgressReporter, ProgressReporter
from .scanner import scan_tree
from .zip_gateway import write_archive

logger = logging.getLogger(__name__)


def pack(
    source_dir: str | os.PathLike[str],
    out_file: str | os.PathLike[str],
    target_base_dir: str = "",
    compression_level: int = FAIR_COMPRESSION,
    options: PackOptions | None = None,
    *,
    progress: ProgressReporter | None = None,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> PackResult:
    """Pack ``source_dir`` into the zip file ``out_file``. Symlinks are not followed.

    Every regular file is stored as ``<target base>/<path relative to
    source_dir>``. The target base defaults to the source directory's name,
    or ``snapshot`` when packing ``.``. Levels outside -2..9 are replaced by 2.

    Raises ``DestinationCreateError`` if ``out_file`` cannot be created; its
    ``result`` holds the scan counters. Every other failure is only counted,
    so a normal return does not mean the archive is complete. Check
    ``result.ok`` or call ``result.raise_for_errors()``.
    """
    effective_options = options if options is not None else PackOptions()
    diagnostics = Diagnostics(effective_options, logger=logger, out=out, err=err)

    level = normalize_compression_level(compression_level)
    if level != compression_level:
        diagnostics.warning(render_invalid_level(compression_level, level))

    result = PackResult()
    source_root = normalize_source_dir(source_dir)
    target_base = resolve_target_base(source_root, target_base_dir)

    scan_result = scan_tree(source_root, diagnostics=diagnostics)
    result.entry_count = scan_result.entry_count
    result.total_size = scan_result.total_size
    result.scan_error_count = scan_result.error_count

    diagnostics.info(
        render_scan_summary(
            entry_count=scan_result.entry_count,
            total_size=scan_result.total_size,
            scan_error_count=scan_result.error_count,
        )
    )

    reporter = progress
    if reporter is None and effective_options.show_progress:
        reporter = ConsoleProgressReporter(stream=out)

    write_archive(
        entries=scan_result.entries,
        source_root=source_root,
        target_base=target_base,
        out_file=out_file,
        compression_level=level,
        result=result,
        diagnostics=diagnostics,
        progress=reporter,
    )

    diagnostics.info(render_done(result))
    return result
