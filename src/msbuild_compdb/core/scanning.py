"""Find compiler invocations in build log text."""

from __future__ import annotations

import gzip
import ntpath
import re
from collections.abc import AsyncIterator, Iterable, Iterator
from pathlib import Path

import aiofiles
from aiofiles.threadpool import wrap

from .config import normalize_extension
from .models import RawInvocation
from .tokenizer import tokenize

# Parallel MSBuild output prefixes each line with the node number ("12>").
_NODE_PREFIX_RE = re.compile(r"^\s*\d+>")

OPTION_PREFIXES = ("/", "-")

# Flags whose value is the following token. The value may look like a file
# name, so it is never taken as the source.
FLAGS_WITH_SEPARATE_VALUE = frozenset(
    {
        "/I",
        "-I",
        "/D",
        "-D",
        "/U",
        "-U",
        "/FI",
        "-FI",
        "/FU",
        "-FU",
        "/AI",
        "-AI",
        "-include",
        "/external:I",
        "-external:I",
    }
)


def executable_name(token: str) -> str:
    """Final path component of a token, splitting on both separators."""
    return ntpath.basename(token)


def is_compiler(token: str, compiler: str) -> bool:
    return executable_name(token).lower() == compiler.lower()


def find_source_token(arguments: Iterable[str], suffix: str) -> int | None:
    """Index of the last non-option argument ending with ``suffix``.

    ``suffix`` must already be normalized (lowercase with a leading dot).
    """
    args = list(arguments)
    for i in range(len(args) - 1, -1, -1):
        token = args[i]
        if token.startswith(OPTION_PREFIXES):
            continue
        if i > 0 and args[i - 1] in FLAGS_WITH_SEPARATE_VALUE:
            continue
        if token.lower().endswith(suffix):
            return i
    return None


def parse_invocation(
    line_no: int,
    line: str,
    *,
    compiler: str,
    extension: str,
) -> RawInvocation | None:
    """Return a RawInvocation if the line invokes ``compiler``, else None."""
    # A matching first token implies the substring, so this only skips work.
    if compiler.lower() not in line.lower():
        return None

    line = _NODE_PREFIX_RE.sub("", line, count=1)
    tokens = tokenize(line)
    if not tokens or not is_compiler(tokens[0], compiler):
        return None

    arguments = tuple(tokens[1:])
    pos = find_source_token(arguments, normalize_extension(extension))
    return RawInvocation(
        line_no=line_no,
        compiler_token=tokens[0],
        arguments=arguments,
        source_token=arguments[pos] if pos is not None else None,
        source_position=pos,
    )


def iter_invocations(
    lines: Iterable[str],
    *,
    compiler: str,
    extension: str,
    start: int = 1,
) -> Iterator[RawInvocation]:
    """Yield invocations from in-memory lines, numbering from ``start``."""
    for line_no, line in enumerate(lines, start=start):
        inv = parse_invocation(line_no, line, compiler=compiler, extension=extension)
        if inv is not None:
            yield inv


async def iter_log_lines(
    log_path: str | Path,
    *,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> AsyncIterator[tuple[int, str]]:
    """Yield ``(line_no, line)`` pairs with line endings stripped.

    Logs ending in ``.gz`` are decompressed on the fly.
    """
    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")

    if path.suffix.lower() == ".gz":
        log = wrap(gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors))
    else:
        log = await aiofiles.open(path, encoding=encoding, errors=decode_errors)
    try:
        line_no = 0
        async for line in log:
            line_no += 1
            yield line_no, line.rstrip("\r\n")
    finally:
        await log.close()


async def scan_log(
    log_path: str | Path,
    *,
    compiler: str,
    extension: str,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> tuple[list[RawInvocation], int]:
    """Read the whole log and return its invocations plus the line count."""
    invocations: list[RawInvocation] = []
    lines_scanned = 0
    async for line_no, line in iter_log_lines(
        log_path, encoding=encoding, decode_errors=decode_errors
    ):
        lines_scanned = line_no
        inv = parse_invocation(line_no, line, compiler=compiler, extension=extension)
        if inv is not None:
            invocations.append(inv)
    return invocations, lines_scanned
