from __future__ import annotations

import io
import os
import zipfile
from pathlib import Path

import pytest

from packdir import PackOptions, pack
from packdir.errors import DestinationCreateError, IncompleteArchiveError, PartialPackError
import packdir.zip_gateway as zip_gateway


def _make_source(tmp_path: Path) -> Path:
    source_dir = tmp_path / "source"
    (source_dir / "sub").mkdir(parents=True)
    (source_dir / "a.txt").write_bytes(b"0123456789")
    (source_dir / "sub" / "b.txt").write_bytes(b"abcdefghijklmnopqrst")
    return source_dir


def _read_archive(zip_path: Path) -> dict[str, bytes]:
    with zipfile.ZipFile(zip_path) as zf:
        return {name: zf.read(name) for name in zf.namelist()}


def test_pack_end_to_end_with_target_base(tmp_path: Path) -> None:
    source_dir = _make_source(tmp_path)
    zip_path = tmp_path / "out.zip"

    result = pack(source_dir, zip_path, target_base_dir="snap")

    assert _read_archive(zip_path) == {
        "snap/a.txt": b"0123456789",
        "snap/sub/b.txt": b"abcdefghijklmnopqrst",
    }
    assert result.total_size == 30
    assert result.entry_count == 4
    assert result.scan_error_count == 0
    assert result.archive_error_count == 0
    assert result.ok
    result.raise_for_errors()


def test_pack_defaults_target_base_to_source_name(tmp_path: Path) -> None:
    source_dir = _make_source(tmp_path)
    zip_path = tmp_path / "out.zip"

    pack(str(source_dir) + "/", zip_path)

    assert sorted(_read_archive(zip_path)) == ["source/a.txt", "source/sub/b.txt"]


def test_pack_current_directory_uses_snapshot_base(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source_dir = _make_source(tmp_path)
    zip_path = tmp_path / "out.zip"
    monkeypatch.chdir(source_dir)

    pack(".", zip_path)

    assert sorted(_read_archive(zip_path)) == ["snapshot/a.txt", "snapshot/sub/b.txt"]


def test_pack_entry_names_never_contain_source_prefix(tmp_path: Path) -> None:
    source_dir = tmp_path / "src"
    source_dir.mkdir()
    (source_dir / "src_notes.txt").write_text("notes", encoding="utf-8")
    (source_dir / "rs.txt").write_text("rs", encoding="utf-8")
    zip_path = tmp_path / "out.zip"

    pack(source_dir, zip_path, target_base_dir="base")

    names = sorted(_read_archive(zip_path))
    assert names == ["base/rs.txt", "base/src_notes.txt"]
    assert all(str(tmp_path) not in name for name in names)


def test_pack_clamps_invalid_level_with_diagnostic(tmp_path: Path) -> None:
    source_dir = _make_source(tmp_path)
    zip_path = tmp_path / "out.zip"
    err = io.StringIO()

    result = pack(
        source_dir,
        zip_path,
        compression_level=42,
        options=PackOptions(print_errors=True),
        err=err,
    )

    assert result.ok
    assert err.getvalue() == (
        "WARNING: Unsupported compression level 42, using level 2 instead.\n"
    )
    with zipfile.ZipFile(zip_path) as zf:
        assert all(info.compress_type == zipfile.ZIP_DEFLATED for info in zf.infolist())


def test_pack_single_unreadable_file_counts_one_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source_dir = _make_source(tmp_path)
    (source_dir / "c.txt").write_text("charlie", encoding="utf-8")
    zip_path = tmp_path / "out.zip"
    original_open_entry = zip_gateway._open_entry

    def _open_entry(entry_path: Path):
        if entry_path.name == "a.txt":
            raise PermissionError(13, "Permission denied", str(entry_path))
        return original_open_entry(entry_path)

    monkeypatch.setattr(zip_gateway, "_open_entry", _open_entry)

    result = pack(source_dir, zip_path, target_base_dir="snap")

    assert result.archive_error_count == 1
    assert result.scan_error_count == 0
    assert _read_archive(zip_path) == {
        "snap/c.txt": b"charlie",
        "snap/sub/b.txt": b"abcdefghijklmnopqrst",
    }
    with pytest.raises(PartialPackError):
        result.raise_for_errors()


def test_pack_destination_failure_returns_scan_only_result(tmp_path: Path) -> None:
    source_dir = _make_source(tmp_path)

    with pytest.raises(DestinationCreateError) as exc_info:
        pack(source_dir, tmp_path / "no-such-dir" / "out.zip")

    result = exc_info.value.result
    assert result.entry_count == 4
    assert result.total_size == 30
    assert result.archive_error_count == 0


def test_pack_finalize_failure_is_reported_through_result(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source_dir = _make_source(tmp_path)
    original_close = zipfile.ZipFile.close
    failed: list[bool] = []

    def _close(self: zipfile.ZipFile) -> None:
        if not failed:
            failed.append(True)
            raise OSError("disk full")
        original_close(self)

    monkeypatch.setattr(zipfile.ZipFile, "close", _close)

    result = pack(source_dir, tmp_path / "out.zip")

    assert result.archive_error_count == 1
    with pytest.raises(IncompleteArchiveError, match="disk full"):
        result.raise_for_errors()


def test_pack_twice_produces_same_names_and_content(tmp_path: Path) -> None:
    source_dir = _make_source(tmp_path)
    first = tmp_path / "first.zip"
    second = tmp_path / "second.zip"

    pack(source_dir, first, target_base_dir="snap")
    pack(source_dir, second, target_base_dir="snap")

    assert _read_archive(first) == _read_archive(second)


def test_pack_info_and_verbose_output(tmp_path: Path) -> None:
    source_dir = _make_source(tmp_path)
    out = io.StringIO()

    pack(
        source_dir,
        tmp_path / "out.zip",
        options=PackOptions(print_info=True, verbose=True),
        out=out,
    )

    lines = out.getvalue().splitlines()
    assert lines[0] == "Scanning directory... done."
    assert lines[1] == "Archiving 4 files with total size 30B, 0 errors during scan."
    assert lines[2] == f"Compressing {source_dir / 'a.txt'}"
    assert lines[3] == f"Compressing {source_dir / 'sub' / 'b.txt'}"
    assert lines[4] == "Done."


def test_pack_show_progress_renders_console_line(tmp_path: Path) -> None:
    source_dir = _make_source(tmp_path)
    out = io.StringIO()

    pack(
        source_dir,
        tmp_path / "out.zip",
        options=PackOptions(show_progress=True),
        out=out,
    )

    assert out.getvalue().endswith("\rArchived: 4 / 4 entries\n")


def test_pack_without_options_is_silent(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source_dir = _make_source(tmp_path)

    pack(source_dir, tmp_path / "out.zip", compression_level=-7)

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_pack_escapes_undecodable_file_names(tmp_path: Path) -> None:
    source_dir = tmp_path / "source"
    source_dir.mkdir()
    (source_dir / "good.txt").write_bytes(b"good")
    try:
        (source_dir / os.fsdecode(b"bad\xff.txt")).write_bytes(b"bad")
    except (OSError, UnicodeEncodeError):
        pytest.skip("filesystem rejects non-UTF-8 names")
    zip_path = tmp_path / "out.zip"

    result = pack(source_dir, zip_path, target_base_dir="snap")

    assert result.ok
    assert _read_archive(zip_path) == {
        "snap/bad\\xff.txt": b"bad",
        "snap/good.txt": b"good",
    }


def test_pack_deep_tree(tmp_path: Path) -> None:
    source_dir = tmp_path / "source"
    source_dir.mkdir()
    current = source_dir
    for _ in range(1100):
        current = current / "d"
        current.mkdir()
    (current / "leaf.txt").write_bytes(b"leaf")
    zip_path = tmp_path / "out.zip"

    result = pack(source_dir, zip_path, target_base_dir="snap")

    assert result.ok
    assert _read_archive(zip_path) == {"snap/" + "d/" * 1100 + "leaf.txt": b"leaf"}


def test_pack_rerun_with_archive_inside_source_skips_the_archive(tmp_path: Path) -> None:
    source_dir = _make_source(tmp_path)
    zip_path = source_dir / "out.zip"

    pack(source_dir, zip_path, target_base_dir="snap", compression_level=0)
    out = io.StringIO()
    result = pack(
        source_dir,
        zip_path,
        target_base_dir="snap",
        compression_level=0,
        options=PackOptions(verbose=True),
        out=out,
    )

    assert result.ok
    assert result.entry_count == 5
    assert _read_archive(zip_path) == {
        "snap/a.txt": b"0123456789",
        "snap/sub/b.txt": b"abcdefghijklmnopqrst",
    }
    assert f"Skipping {zip_path}: archive being written" in out.getvalue()


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_pack_archives_only_regular_files(tmp_path: Path) -> None:
    source_dir = _make_source(tmp_path)
    outside_dir = tmp_path / "outside"
    outside_dir.mkdir()
    (outside_dir / "secret.txt").write_text("secret", encoding="utf-8")
    try:
        (source_dir / "file_link.txt").symlink_to(source_dir / "a.txt")
        (source_dir / "dir_link").symlink_to(outside_dir, target_is_directory=True)
    except OSError:
        pytest.skip("symlink creation not permitted")
    if hasattr(os, "mkfifo"):
        os.mkfifo(source_dir / "pipe")
    zip_path = tmp_path / "out.zip"

    result = pack(source_dir, zip_path, target_base_dir="snap")

    with zipfile.ZipFile(zip_path) as zf:
        names = zf.namelist()
    assert names == ["snap/a.txt", "snap/sub/b.txt"]
    assert result.ok
    assert result.total_size == 30
