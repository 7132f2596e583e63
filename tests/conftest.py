from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest


@pytest.fixture
def make_tree() -> Callable[[Path, Sequence[str]], Path]:
    """Create empty files (relative paths) under root and return root."""

    def _make(root: Path, files: Sequence[str]) -> Path:
        for rel in files:
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("// source\n", encoding="utf-8")
        return root

    return _make


@pytest.fixture
def write_log() -> Callable[[Path, list[str]], Path]:
    def _write(path: Path, lines: list[str]) -> Path:
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def msbuild_lines() -> list[str]:
    return [
        "Build started 10/19/2026 9:00:00 AM.",
        "ClCompile:",
        r'  C:\VS\bin\HostX64\x64\CL.exe /c /Zi /nologo /W3 /D "NDEBUG" /EHsc /Fo"x64\Release\\" main.cpp',
        r"  CL.exe /c /Zi /nologo /W3 /I include widget.cpp",
        "Link:",
        r"  C:\VS\bin\HostX64\x64\link.exe /OUT:app.exe x64\Release\main.obj",
        "Build succeeded.",
    ]
