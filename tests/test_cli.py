from __future__ import annotations

import json
from pathlib import Path

import pytest

from msbuild_compdb import __version__
from msbuild_compdb.cli import main


def test_cli_writes_database(tmp_path: Path, make_tree, write_log, msbuild_lines, capsys) -> None:
    src = make_tree(tmp_path / "src", ["main.cpp", "gui/widget.cpp"])
    log = write_log(tmp_path / "msbuild.log", msbuild_lines)
    out = tmp_path / "compile_commands.json"

    main(["-i", str(log), "-d", str(src), "-o", str(out), "-j", "2"])

    records = json.loads(out.read_text(encoding="utf-8"))
    assert [r["file"] for r in records] == [str(src / "main.cpp"), str(src / "gui" / "widget.cpp")]
    assert records[0]["arguments"][0] == r"C:\VS\bin\HostX64\x64\CL.exe"
    stdout = capsys.readouterr().out
    assert "Wrote 2 entries" in stdout
    assert "(2 source files indexed)" in stdout


def test_cli_reports_skips(tmp_path: Path, make_tree, write_log, capsys) -> None:
    src = make_tree(tmp_path / "src", ["main.cpp"])
    log = write_log(tmp_path / "msbuild.log", ["cl.exe /c main.cpp", "cl.exe /c other.cpp"])
    out = tmp_path / "cc.json"

    main(["-i", str(log), "-d", str(src), "-o", str(out), "--indent", "0"])

    assert "\n" not in out.read_text(encoding="utf-8").strip()
    assert "Skipped 1 of 2 invocations" in capsys.readouterr().out


def test_cli_source_directory_is_required(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["-i", str(tmp_path / "msbuild.log")])
    assert exc.value.code == 2


def test_cli_missing_log_exits_1(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["-i", str(tmp_path / "missing.log"), "-d", str(tmp_path), "-o", str(tmp_path / "o.json")])
    assert exc.value.code == 1
    assert "missing.log" in capsys.readouterr().err
    assert not (tmp_path / "o.json").exists()


def test_cli_bad_extension_exits_2(tmp_path: Path, write_log, capsys) -> None:
    log = write_log(tmp_path / "msbuild.log", ["cl.exe /c main.cpp"])
    with pytest.raises(SystemExit) as exc:
        main(["-i", str(log), "-d", str(tmp_path), "-e", "."])
    assert exc.value.code == 2
    assert "extension" in capsys.readouterr().err


def test_cli_version(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out
