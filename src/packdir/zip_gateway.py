"""Zip write/verify helpers."""

from __future__ import annotations

import logging
import os
import stat
import zipfile
from pathlib import Path
from typing import BinaryIO, Iterable

from .compression import codec_settings_for_level
from .constants import COPY_BUFFER_SIZE, ZIP64_STREAM_THRESHOLD
from .diagnostics import Diagnostics
from .errors import ArchiveIntegrityError, DestinationCreateError
from .models import PackOptions, PackResult
from .path_mapping import display_path, map_archive_name
from .progress import NullProgressReporter, ProgressReporter

logger = logging.getLogger(__name__)

_ENTRY_ERRORS = (OSError, RuntimeError, ValueError, zipfile.LargeZipFile)
_FINALIZE_ERRORS = (OSError, zipfile.LargeZipFile)


def write_archive(
    *,
    entries: Iterable[Path],
    source_root: Path,
    target_base: str,
    out_file: str | os.PathLike[str],
    compression_level: int,
    result: PackResult,
    diagnostics: Diagnostics | None = None,
    progress: ProgressReporter | None = None,
) -> None:
    """Stream every regular file in ``entries`` into a new zip at ``out_file``.

    Per-entry failures and a failed finalization are added to
    ``result.archive_error_count``; only failing to create ``out_file``
    raises.
    """
    diag = (
        diagnostics.with_logger(logger)
        if diagnostics is not None
        else Diagnostics(PackOptions(), logger=logger)
    )
    reporter = progress if progress is not None else NullProgressReporter()
    settings = codec_settings_for_level(compression_level)
    entry_list = list(entries)

    try:
        out_fh = open(out_file, "wb")
    except OSError as exc:
        diag.error(f"Failed to create archive file {out_file}: {exc}")
        raise DestinationCreateError(
            f"Failed to create archive file: {out_file}", result
        ) from exc

    try:
        out_identity = _file_identity(os.fstat(out_fh.fileno()))
        zf = zipfile.ZipFile(
            out_fh,
            mode="w",
            compression=settings.compression,
            compresslevel=settings.compresslevel,
        )
    except BaseException:
        out_fh.close()
        raise
    buffer = bytearray(COPY_BUFFER_SIZE)
    reporter.start(len(entry_list))
    try:
        for entry_path in entry_list:
            arcname = map_archive_name(
                source_root=source_root,
                target_base=target_base,
                entry_path=entry_path,
            )
            try:
                _add_entry(
                    zf,
                    entry_path=entry_path,
                    arcname=arcname,
                    buffer=buffer,
                    diag=diag,
                    skip_identity=out_identity,
                )
            except _ENTRY_ERRORS as exc:
                result.archive_error_count += 1
                diag.error(f"Failed to archive {display_path(entry_path)}: {exc}")
            reporter.advance()
    finally:
        finalize_error = _finalize(zf, out_fh)
        reporter.finish()
        if finalize_error is not None:
            result.archive_error_count += 1
            result.finalize_error = finalize_error
            diag.error(f"Failed to finalize archive {out_file}: {finalize_error}")


def verify_archive(zip_path: str | os.PathLike[str]) -> int:
    """Check every member's CRC and return the member count."""
    try:
        with zipfile.ZipFile(zip_path, mode="r") as zf:
            corrupt_member = zf.testzip()
            if corrupt_member is not None:
                raise ArchiveIntegrityError(
                    f"Zip integrity check failed for member: {corrupt_member}"
                )
            return len(zf.infolist())
    except zipfile.BadZipFile as exc:
        raise ArchiveIntegrityError(f"Invalid zip archive: {zip_path}") from exc
    except OSError as exc:
        raise ArchiveIntegrityError(f"Failed to read zip archive: {zip_path}") from exc


def _add_entry(
    zf: zipfile.ZipFile,
    *,
    entry_path: Path,
    arcname: str,
    buffer: bytearray,
    diag: Diagnostics,
    skip_identity: tuple[int, int] | None = None,
) -> None:
    st = os.stat(entry_path)
    if stat.S_ISDIR(st.st_mode):
        return
    if not stat.S_ISREG(st.st_mode):
        diag.trace(f"Skipping {display_path(entry_path)}: not a regular file")
        return
    if _file_identity(st) == skip_identity:
        diag.trace(f"Skipping {display_path(entry_path)}: archive being written")
        return

    diag.trace(f"Compressing {display_path(entry_path)}")
    with _open_entry(entry_path) as source:
        force_zip64 = st.st_size >= ZIP64_STREAM_THRESHOLD
        with zf.open(arcname, mode="w", force_zip64=force_zip64) as target:
            _copy_stream(source, target, buffer)


def _file_identity(st: os.stat_result) -> tuple[int, int]:
    return (st.st_dev, st.st_ino)


def _open_entry(entry_path: Path) -> BinaryIO:
    return open(entry_path, "rb")


def _copy_stream(source: BinaryIO, target: BinaryIO, buffer: bytearray) -> int:
    view = memoryview(buffer)
    copied = 0
    while True:
        count = source.readinto(view)
        if not count:
            break
        target.write(view[:count])
        copied += count
    return copied


def _finalize(zf: zipfile.ZipFile, out_fh: BinaryIO) -> str | None:
    try:
        try:
            zf.close()
        finally:
            out_fh.close()
    except _FINALIZE_ERRORS as exc:
        return str(exc) or type(exc).__name__
    return None
