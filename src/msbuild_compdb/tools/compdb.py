"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from msbuild_compdb.core.compdb_service import generate_compile_database
from msbuild_compdb.core.config import (
    DEFAULT_COMPILER,
    DEFAULT_EXTENSION,
    DEFAULT_OUTPUT,
    CompdbConfig,
)
from msbuild_compdb.core.models import SkippedInvocation

MAX_REPORTED_SKIPS = 500


def _skip_to_dict(skip: SkippedInvocation) -> dict[str, Any]:
    """Convert a SkippedInvocation into a JSON-serializable dict."""
    d: dict[str, Any] = {
        "line_no": skip.line_no,
        "reason": skip.reason.value,
        "message": skip.message,
    }
    if skip.basename:
        d["basename"] = skip.basename
    if skip.candidates:
        d["candidates"] = list(skip.candidates)
    return d


async def generate_compile_commands_impl(
    *,
    log_path: str,
    source_directory: str,
    output_path: str | None = None,
    compiler: str | None = None,
    extension: str | None = None,
    write: bool = True,
    include_entries: bool = False,
    max_workers: int | None = None,
) -> dict[str, Any]:
    """Implementation for the `generate_compile_commands` MCP tool.

    Notes
    -----
    - A relative output_path is taken relative to source_directory, so the
      default lands next to the sources where tools look for it.
    - write=False is a dry run; include_entries returns the records inline.
    """
    if not log_path or not log_path.strip():
        raise ValueError("log_path is required.")
    if not source_directory or not source_directory.strip():
        raise ValueError("source_directory is required.")

    out = Path(output_path or DEFAULT_OUTPUT).expanduser()
    if not out.is_absolute():
        out = Path(source_directory).expanduser() / out

    cfg = CompdbConfig(
        compiler=compiler or DEFAULT_COMPILER,
        extension=extension or DEFAULT_EXTENSION,
        output_path=out,
        max_workers=max_workers,
    )
    result = await generate_compile_database(
        Path(log_path).expanduser(),
        Path(source_directory).expanduser(),
        config=cfg,
        write=write,
    )

    d: dict[str, Any] = {
        "count": len(result.database),
        "output": str(result.output_path) if result.output_path is not None else None,
        "lines_scanned": result.lines_scanned,
        "invocations": result.invocations,
        "indexed_files": result.indexed_files,
        "skipped_count": len(result.skipped),
        "skipped": [_skip_to_dict(s) for s in result.skipped[:MAX_REPORTED_SKIPS]],
    }
    if include_entries:
        d["entries"] = result.database.to_records()
    return d
