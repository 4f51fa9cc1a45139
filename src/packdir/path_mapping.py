"""Target base resolution and archive entry naming."""

from __future__ import annotations

import os
import re
from pathlib import Path

from .constants import FALLBACK_TARGET_BASE
from .errors import StartupValidationError

_SEPARATOR_RUN_RE = re.compile(r"[\\/]+")
_UNUSABLE_BASE_NAMES = frozenset({"", ".", ".."})


def normalize_source_dir(source_dir: str | os.PathLike[str]) -> Path:
    return Path(os.path.normpath(os.fspath(source_dir)))


def resolve_target_base(source_dir: str | os.PathLike[str], target_base_dir: str) -> str:
    """Pick the directory name every archive entry is rooted under.

    An empty ``target_base_dir`` falls back to the source directory's last
    component, and to ``FALLBACK_TARGET_BASE`` when that is ``.``. Empty,
    ``.`` and ``..`` segments are dropped, so the base is always relative
    and never climbs out of the archive root.
    """
    candidate = target_base_dir
    if candidate == "":
        candidate = normalize_source_dir(source_dir).name
    segments = [
        segment
        for segment in _SEPARATOR_RUN_RE.split(candidate)
        if segment not in _UNUSABLE_BASE_NAMES
    ]
    if not segments:
        return FALLBACK_TARGET_BASE
    return make_encodable_name("/".join(segments))


def make_encodable_name(name: str) -> str:
    """Return ``name`` unchanged if it encodes as UTF-8.

    Names carrying undecodable filesystem bytes (surrogate escapes) get those
    bytes spelled as ``\\xNN`` instead.
    """
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        try:
            raw = os.fsencode(name)
        except UnicodeEncodeError:
            return name.encode("utf-8", "backslashreplace").decode("utf-8")
        return raw.decode("utf-8", "backslashreplace")
    return name


def display_path(path: str | os.PathLike[str]) -> str:
    return make_encodable_name(os.fspath(path))


def map_archive_name(
    *,
    source_root: str | os.PathLike[str],
    target_base: str,
    entry_path: str | os.PathLike[str],
) -> str:
    root_posix = normalize_source_dir(source_root).as_posix()
    entry_posix = Path(entry_path).as_posix()

    # Exact prefix removal only; a sibling like "src2" must keep its name.
    if root_posix == ".":
        relative = entry_posix
    elif entry_posix == root_posix:
        relative = ""
    elif root_posix.endswith("/") and entry_posix.startswith(root_posix):
        relative = entry_posix[len(root_posix):]
    elif entry_posix.startswith(root_posix + "/"):
        relative = entry_posix[len(root_posix) + 1:]
    else:
        relative = entry_posix

    relative = relative.lstrip("/")
    if relative == "":
        return target_base
    return make_encodable_name(f"{target_base}/{relative}")


def resolve_startup_paths(*, source_arg_raw: str, out_arg_raw: str) -> tuple[Path, Path]:
    """Validate CLI path arguments and return ``(source_dir, out_file)``.

    The source keeps its relative spelling so the default target base is
    derived from what the user typed.
    """
    if "\0" in source_arg_raw or "\0" in out_arg_raw:
        raise StartupValidationError("Path arguments must not contain NUL (\\0).")

    try:
        source_dir = Path(source_arg_raw).expanduser()
        out_file = Path(out_arg_raw).expanduser()
    except RuntimeError as exc:
        raise StartupValidationError(f"Failed to expand user home in path: {exc}") from exc

    if not source_dir.exists():
        raise StartupValidationError(f"SOURCE does not exist: {source_dir}")
    if not source_dir.is_dir():
        raise StartupValidationError(f"SOURCE must be a directory: {source_dir}")
    if out_file.is_dir():
        raise StartupValidationError(f"OUTFILE must not be a directory: {out_file}")
    if _is_ancestor(source_dir.resolve(strict=False), out_file.resolve(strict=False)):
        raise StartupValidationError("OUTFILE must not be inside SOURCE.")

    return source_dir, out_file


def _is_ancestor(ancestor: Path, descendant: Path) -> bool:
    try:
        descendant.relative_to(ancestor)
    except ValueError:
        return False
    return True
