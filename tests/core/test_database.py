from __future__ import annotations

import json
import os
import stat
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

from msbuild_compdb.core.database import (
    CompileDatabase,
    ensure_writable,
    read_database,
    write_database,
)
from msbuild_compdb.core.models import CompileEntry


def _entry(name: str) -> CompileEntry:
    return CompileEntry(
        file=f"/src/{name}",
        directory="/src",
        arguments=["cl.exe", "/c", f"/src/{name}"],
    )


def test_to_json_field_order_and_shape() -> None:
    db = CompileDatabase([_entry("a.cpp")])

    records = json.loads(db.to_json())

    assert records == [
        {"file": "/src/a.cpp", "directory": "/src", "arguments": ["cl.exe", "/c", "/src/a.cpp"]}
    ]
    assert list(records[0]) == ["file", "directory", "arguments"]


def test_to_json_compact() -> None:
    db = CompileDatabase([_entry("a.cpp")])
    assert "\n" not in db.to_json(indent=None)
    assert "\n" not in db.to_json(indent=0)
    assert "\n" in db.to_json(indent=2)


def test_empty_database_is_empty_array() -> None:
    assert json.loads(CompileDatabase().to_json()) == []


def test_add_keeps_order_and_duplicates() -> None:
    db = CompileDatabase()
    for name in ["b.cpp", "a.cpp", "b.cpp"]:
        db.add(_entry(name))

    assert [e.file for e in db] == ["/src/b.cpp", "/src/a.cpp", "/src/b.cpp"]
    assert len(db) == 3
    assert db[1].file == "/src/a.cpp"


def test_entries_are_frozen() -> None:
    entry = _entry("a.cpp")
    with pytest.raises(ValidationError):
        entry.file = "/elsewhere.cpp"  # type: ignore[misc]


@pytest.mark.asyncio
async def test_write_database_replaces_file(tmp_path: Path) -> None:
    out = tmp_path / "compile_commands.json"
    out.write_text("stale", encoding="utf-8")

    written = await write_database(CompileDatabase([_entry("a.cpp")]), out)

    assert written == out
    assert json.loads(out.read_text(encoding="utf-8"))[0]["file"] == "/src/a.cpp"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["compile_commands.json"]
    assert [e.file for e in read_database(out)] == ["/src/a.cpp"]


@pytest.mark.asyncio
async def test_write_database_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        await write_database(CompileDatabase(), tmp_path / "missing" / "out.json")


def test_ensure_writable_rejects_directory(tmp_path: Path) -> None:
    with pytest.raises(IsADirectoryError):
        ensure_writable(tmp_path)


def test_read_database_rejects_bad_records(tmp_path: Path) -> None:
    path = tmp_path / "compile_commands.json"
    path.write_text('[{"file": "a.cpp"}]', encoding="utf-8")
    with pytest.raises(ValueError):
        read_database(path)


@pytest.mark.asyncio
@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
async def test_new_file_mode_follows_umask(tmp_path: Path) -> None:
    out = tmp_path / "compile_commands.json"
    old = os.umask(0o022)
    try:
        await write_database(CompileDatabase([_entry("a.cpp")]), out)
    finally:
        os.umask(old)

    assert stat.S_IMODE(out.stat().st_mode) == 0o644


@pytest.mark.asyncio
@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
async def test_existing_file_mode_is_kept(tmp_path: Path) -> None:
    out = tmp_path / "compile_commands.json"
    out.write_text("[]", encoding="utf-8")
    out.chmod(0o640)

    await write_database(CompileDatabase([_entry("a.cpp")]), out)

    assert stat.S_IMODE(out.stat().st_mode) == 0o640
