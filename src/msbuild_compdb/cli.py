from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

from msbuild_compdb import __version__
from msbuild_compdb.core.compdb_service import generate_compile_database
from msbuild_compdb.core.config import (
    DEFAULT_COMPILER,
    DEFAULT_EXTENSION,
    DEFAULT_OUTPUT,
    CompdbConfig,
    configure_logging,
)


def _positive_int(s: str) -> int:
    try:
        value = int(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected an integer, got {s!r}") from e
    if value < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return value


def _non_negative_int(s: str) -> int:
    try:
        value = int(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected an integer, got {s!r}") from e
    if value < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return value


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="msbuild-compdb",
        description="Generate a compile_commands.json file from msbuild.log.",
    )
    p.add_argument("-i", "--input-file", required=True, type=Path, help="Path to msbuild.log (.gz allowed)")
    p.add_argument(
        "-d",
        "--source-directory",
        required=True,
        type=Path,
        help="Path to source code; bare file names in the log are looked up here",
    )
    p.add_argument(
        "-o",
        "--output-file",
        type=Path,
        default=Path(DEFAULT_OUTPUT),
        help=f"Output JSON file (default: {DEFAULT_OUTPUT})",
    )
    p.add_argument(
        "-c",
        "--compiler-executable",
        metavar="EXE",
        default=DEFAULT_COMPILER,
        help=f"Name of compiler executable (default: {DEFAULT_COMPILER})",
    )
    p.add_argument(
        "-e",
        "--extension",
        default=DEFAULT_EXTENSION,
        help=f"Source file extension (default: {DEFAULT_EXTENSION})",
    )
    p.add_argument("-j", "--jobs", type=_positive_int, default=None, help="Worker threads (default: CPU count)")
    p.add_argument("--indent", type=_non_negative_int, default=2, help="JSON indentation, 0 for compact (default: 2)")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging()

    try:
        cfg = CompdbConfig(
            compiler=args.compiler_executable,
            extension=args.extension,
            output_path=args.output_file,
            max_workers=args.jobs,
            indent=args.indent,
        )
        result = asyncio.run(
            generate_compile_database(args.input_file, args.source_directory, config=cfg)
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)
    except OSError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(1)

    print(
        f"Wrote {len(result.database)} entries to {result.output_path}"
        f" ({result.indexed_files} source files indexed)."
    )
    if result.skipped:
        print(f"Skipped {len(result.skipped)} of {result.invocations} invocations (see warnings above).")


if __name__ == "__main__":
    main()
