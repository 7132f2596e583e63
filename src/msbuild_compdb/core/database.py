"""Compilation database container and JSON persistence."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

import aiofiles
from pydantic import TypeAdapter

from .models import CompileEntry

_DATABASE_ADAPTER = TypeAdapter(list[CompileEntry])


class CompileDatabase:
    """Entries in log order. Duplicates (rebuilt files) are kept."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[CompileEntry] = ()) -> None:
        self._entries: list[CompileEntry] = list(entries)

    def add(self, entry: CompileEntry) -> None:
        self._entries.append(entry)

    def __iter__(self) -> Iterator[CompileEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, i: int) -> CompileEntry:
        return self._entries[i]

    def to_records(self) -> list[dict[str, Any]]:
        return _DATABASE_ADAPTER.dump_python(self._entries, mode="json")

    def to_json(self, *, indent: int | None = 2) -> str:
        # 0 and None both mean compact output.
        return _DATABASE_ADAPTER.dump_json(self._entries, indent=indent or None).decode("utf-8")


def ensure_writable(path: str | Path) -> Path:
    """Check the output location before any work is done."""
    out = Path(path)
    parent = out.parent
    if not parent.is_dir():
        raise FileNotFoundError(f"Output directory not found: {parent}")
    if out.is_dir():
        raise IsADirectoryError(f"Output path is a directory: {out}")
    if not os.access(parent, os.W_OK):
        raise PermissionError(f"Output directory is not writable: {parent}")
    return out


async def write_database(
    database: CompileDatabase,
    path: str | Path,
    *,
    indent: int | None = 2,
) -> Path:
    """Write the database atomically; the target is untouched on failure."""
    out = ensure_writable(path)
    text = database.to_json(indent=indent) + "\n"

    fd, tmp_name = tempfile.mkstemp(prefix=f".{out.name}.", suffix=".tmp", dir=out.parent)
    os.close(fd)
    try:
        async with aiofiles.open(tmp_name, "w", encoding="utf-8") as f:
            await f.write(text)
        os.chmod(tmp_name, _target_mode(out))
        os.replace(tmp_name, out)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return out


def _target_mode(out: Path) -> int:
    """Mode for the finished file: keep an existing file's, else honour the umask."""
    try:
        return stat.S_IMODE(out.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def read_database(path: str | Path) -> CompileDatabase:
    """Load and validate an existing compile_commands.json."""
    data = Path(path).read_bytes()
    return CompileDatabase(_DATABASE_ADAPTER.validate_json(data))
