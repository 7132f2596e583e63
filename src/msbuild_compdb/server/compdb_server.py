"""MCP server entrypoint (stdio transport).

Exposes compile database generation as a tool so editor agents can
rebuild compile_commands.json after a build.

Run locally (stdio):
    python -m msbuild_compdb.server.compdb_server
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from msbuild_compdb.core.config import configure_logging
from msbuild_compdb.tools.compdb import generate_compile_commands_impl

LOGGER = logging.getLogger(__name__)

mcp = FastMCP("msbuild-compdb", json_response=True)


@mcp.tool()
async def generate_compile_commands(
    log_path: str,
    source_directory: str,
    output_path: str | None = None,
    compiler: str | None = None,
    extension: str | None = None,
    write: bool = True,
    include_entries: bool = False,
) -> dict[str, Any]:
    """Generate compile_commands.json from an MSBuild log.

    Parameters
    ----------
    log_path:
        Path to the build log (plain text or .gz).
    source_directory:
        Root of the source tree. Bare file names in the log are looked up here.
    output_path:
        Where to write the database. Relative paths are taken relative to
        source_directory. Default: compile_commands.json.
    compiler:
        Compiler executable to look for (default: cl.exe). Case-insensitive.
    extension:
        Source file extension (default: cpp).
    write:
        When false, nothing is written (dry run).
    include_entries:
        Whether to return the generated entries in the response.

    Returns
    -------
    dict:
        {"count": int, "output": str | None, "skipped": list[dict], ...}
        Files whose name appears in several directories are skipped and
        listed with their candidate directories.
    """
    return await generate_compile_commands_impl(
        log_path=log_path,
        source_directory=source_directory,
        output_path=output_path,
        compiler=compiler,
        extension=extension,
        write=write,
        include_entries=include_entries,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
