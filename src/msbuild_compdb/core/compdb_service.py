"""Log-to-database pipeline.

This module is the main integration point: it indexes the source tree,
scans the log, resolves every invocation and collects the database.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from .config import CompdbConfig, resolve_config
from .database import CompileDatabase, ensure_writable, write_database
from .entries import process_invocation
from .models import CompileEntry, RawInvocation, SkippedInvocation
from .scanning import scan_log
from .source_index import SourceIndex

logger = logging.getLogger(__name__)

Outcome = CompileEntry | SkippedInvocation


@dataclass(slots=True)
class CompdbResult:
    """Database plus the invocations that were dropped, in log order."""

    database: CompileDatabase
    skipped: list[SkippedInvocation] = field(default_factory=list)
    lines_scanned: int = 0
    invocations: int = 0
    indexed_files: int = 0
    output_path: Path | None = None


async def resolve_invocations(
    invocations: Iterable[RawInvocation],
    index: SourceIndex,
    *,
    max_workers: int = 1,
) -> list[Outcome]:
    """Resolve invocations against the index; results keep the input order."""
    if max_workers <= 1:
        return [process_invocation(inv, index) for inv in invocations]

    loop = asyncio.get_running_loop()
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            loop.run_in_executor(executor, process_invocation, inv, index)
            for inv in invocations
        ]
        return list(await asyncio.gather(*futures))


async def collect_database(
    invocations: Iterable[RawInvocation],
    index: SourceIndex,
    *,
    max_workers: int = 1,
) -> tuple[CompileDatabase, list[SkippedInvocation]]:
    """Build the database; every skip is logged once as a warning."""
    database = CompileDatabase()
    skipped: list[SkippedInvocation] = []
    for outcome in await resolve_invocations(invocations, index, max_workers=max_workers):
        if isinstance(outcome, SkippedInvocation):
            logger.warning("Skipping %s", outcome.message)
            skipped.append(outcome)
        else:
            database.add(outcome)
    return database, skipped


async def generate_compile_database(
    log_path: str | Path,
    source_dir: str | Path,
    *,
    config: CompdbConfig | None = None,
    write: bool = True,
) -> CompdbResult:
    """Run the full pipeline and, when ``write`` is set, save the output.

    Fatal problems (missing log, unreadable source directory, unwritable
    output) raise before anything is written. Invocations that cannot be
    resolved are skipped and reported in the result.
    """
    cfg = resolve_config(config)
    log = Path(log_path)
    if not log.is_file():
        raise FileNotFoundError(f"Log file not found: {log}")
    if write:
        ensure_writable(cfg.output_path)

    # The walk and the log scan are independent; only resolution needs both.
    logger.info("Indexing %s (this may take some time)", source_dir)
    index_task = asyncio.create_task(
        asyncio.to_thread(SourceIndex.build, source_dir, cfg.extension)
    )
    try:
        logger.info("Scanning %s for %s invocations", log, cfg.compiler)
        invocations, lines_scanned = await scan_log(
            log,
            compiler=cfg.compiler,
            extension=cfg.extension,
            encoding=cfg.encoding,
            decode_errors=cfg.decode_errors,
        )
    except BaseException:
        # The walk thread cannot be interrupted; wait for it before re-raising.
        await asyncio.gather(index_task, return_exceptions=True)
        raise
    index = await index_task
    logger.info("Found %d invocations in %d lines", len(invocations), lines_scanned)

    database, skipped = await collect_database(
        invocations,
        index,
        max_workers=cfg.max_workers or 1,
    )

    result = CompdbResult(
        database=database,
        skipped=skipped,
        lines_scanned=lines_scanned,
        invocations=len(invocations),
        indexed_files=index.file_count,
    )
    if write:
        result.output_path = await write_database(database, cfg.output_path, indent=cfg.indent)
        logger.info("Wrote %d entries to %s", len(database), result.output_path)
    return result
