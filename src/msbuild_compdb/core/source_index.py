"""Filename index over a source tree.

Logs from MSBuild usually name only the source file, so every file with
the configured extension is indexed by its basename. A basename can map to
several directories; the resolver decides what that means.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from .config import normalize_extension

logger = logging.getLogger(__name__)


def _key(name: str) -> str:
    # Case folding follows the host filesystem.
    return os.path.normcase(name)


class SourceIndex(Mapping[str, frozenset[str]]):
    """Immutable mapping of basename to the directories that contain it."""

    __slots__ = ("_entries", "_file_count", "root", "suffix")

    def __init__(
        self,
        entries: Mapping[str, frozenset[str]],
        *,
        root: str = "",
        suffix: str = "",
        file_count: int | None = None,
    ) -> None:
        self._entries = MappingProxyType(
            {_key(name): frozenset(dirs) for name, dirs in entries.items() if dirs}
        )
        self._file_count = (
            file_count if file_count is not None else sum(len(d) for d in self._entries.values())
        )
        self.root = root
        self.suffix = suffix

    def __getitem__(self, name: str) -> frozenset[str]:
        return self._entries[_key(name)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"SourceIndex(root={self.root!r}, names={len(self)}, files={self._file_count})"

    @property
    def file_count(self) -> int:
        """Number of indexed files (a name in two directories counts twice)."""
        return self._file_count

    def lookup(self, name: str) -> frozenset[str]:
        """Directories holding ``name``; empty when it is not indexed."""
        return self._entries.get(_key(name), frozenset())

    @classmethod
    def build(cls, root: str | Path, extension: str) -> SourceIndex:
        """Walk ``root`` once and index every file ending with ``extension``.

        Raises FileNotFoundError, NotADirectoryError or PermissionError when
        the root itself cannot be listed. Unreadable subdirectories are
        logged and skipped.
        """
        started = time.perf_counter()
        root_path = Path(root)
        if not root_path.exists():
            raise FileNotFoundError(f"Source directory not found: {root_path}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Provided path is not a directory: {root_path}")
        # Surface permission errors on the root; os.walk would swallow them.
        with os.scandir(root_path):
            pass

        suffix = normalize_extension(extension)
        top = os.path.abspath(root_path)
        found: dict[str, set[str]] = {}
        file_count = 0

        for dirpath, _, filenames in _walk_once(top):
            for name in filenames:
                if not name.lower().endswith(suffix):
                    continue
                if not os.path.isfile(os.path.join(dirpath, name)):
                    continue
                found.setdefault(_key(name), set()).add(dirpath)
                file_count += 1

        index = cls(
            {name: frozenset(dirs) for name, dirs in found.items()},
            root=top,
            suffix=suffix,
            file_count=file_count,
        )
        logger.info(
            "Indexed %d %s files (%d names) under %s in %.2fs",
            file_count,
            suffix,
            len(index),
            top,
            time.perf_counter() - started,
        )
        return index


def _walk_once(top: str) -> Iterator[tuple[str, list[str], list[str]]]:
    """os.walk that follows symlinks but visits each real directory once."""
    visited: set[str] = set()

    def on_error(exc: OSError) -> None:
        logger.warning("Skipping unreadable directory %s: %s", exc.filename, exc.strerror or exc)

    for dirpath, dirnames, filenames in os.walk(top, onerror=on_error, followlinks=True):
        real = os.path.realpath(dirpath)
        if real in visited:
            dirnames[:] = []
            continue
        visited.add(real)
        dirnames.sort()
        yield dirpath, dirnames, filenames
