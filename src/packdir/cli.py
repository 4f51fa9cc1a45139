"""CLI entry and startup wiring."""

from __future__ import annotations

import argparse

from .constants import FAIR_COMPRESSION
from .errors import DestinationCreateError, PackdirError
from .logging_setup import setup_logging
from .models import PackOptions, PackResult
from .pack_service import pack
from .path_mapping import resolve_startup_paths
from .presenters import render_error, render_result_lines, render_warning
from .zip_gateway import verify_archive

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_PARTIAL = 2


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_file)
    options = PackOptions(
        print_info=args.info,
        print_errors=args.errors,
        show_progress=args.progress,
        verbose=args.verbose,
    )

    try:
        source_dir, out_file = resolve_startup_paths(
            source_arg_raw=args.source,
            out_arg_raw=args.outfile,
        )
        result = pack(
            source_dir,
            out_file,
            target_base_dir=args.base,
            compression_level=args.level,
            options=options,
        )
        if args.verify and result.finalize_error is None:
            member_count = verify_archive(out_file)
            if options.print_info:
                print(f"Verified {member_count:,} archive members.")
    except DestinationCreateError as exc:
        _print_result(exc.result, options)
        print(render_error(str(exc)))
        return EXIT_FAILED
    except PackdirError as exc:
        print(render_error(str(exc)))
        return EXIT_FAILED

    _print_result(result, options)
    if result.finalize_error is not None:
        print(render_error(f"Archive may be incomplete: {out_file}"))
        return EXIT_FAILED
    if not result.ok:
        print(render_warning(f"Finished with {result.error_count:,} errors."))
        return EXIT_PARTIAL
    return EXIT_OK


def _print_result(result: PackResult, options: PackOptions) -> None:
    if not options.print_info:
        return
    for line in render_result_lines(result):
        print(line)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="packdir",
        description="Snapshot a directory tree into a zip archive.",
    )
    parser.add_argument("source", help="Directory to pack.")
    parser.add_argument("outfile", help="Path of the zip file to create.")
    parser.add_argument(
        "--base",
        default="",
        help=(
            "Directory name all entries are stored under "
            "(default: source directory name, or 'snapshot' for '.')."
        ),
    )
    parser.add_argument(
        "--level",
        type=int,
        default=FAIR_COMPRESSION,
        help=(
            "Compression level: -2 fastest, -1 codec default, 0 store, 1-9 effort. "
            "Out-of-range values use 2."
        ),
    )
    parser.add_argument("--info", action="store_true", help="Print summary info.")
    parser.add_argument("--errors", action="store_true", help="Print per-entry errors.")
    parser.add_argument("--progress", action="store_true", help="Show a progress line.")
    parser.add_argument("--verbose", action="store_true", help="Print every file packed.")
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Check member CRCs after writing the archive.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Write a log to this file (logging is off otherwise).",
    )
    return parser
