"""Run configuration and environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path

DEFAULT_COMPILER = "cl.exe"
DEFAULT_EXTENSION = "cpp"
DEFAULT_OUTPUT = "compile_commands.json"

MAX_WORKERS_ENV = "COMPDB_MAX_WORKERS"
LOG_LEVEL_ENV = "COMPDB_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def normalize_extension(extension: str) -> str:
    """Return the extension as a lowercase suffix with a leading dot."""
    ext = extension.strip().lower()
    if ext.startswith("."):
        ext = ext[1:]
    if not ext:
        raise ValueError("extension must not be empty")
    return f".{ext}"


@dataclass(frozen=True, slots=True)
class CompdbConfig:
    compiler: str = DEFAULT_COMPILER
    extension: str = DEFAULT_EXTENSION
    output_path: Path = Path(DEFAULT_OUTPUT)
    encoding: str = "utf-8"
    decode_errors: str = "replace"
    max_workers: int | None = None
    indent: int | None = 2

    def __post_init__(self) -> None:
        if not self.compiler.strip():
            raise ValueError("compiler must not be empty")
        # Fails early on an empty extension.
        normalize_extension(self.extension)
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        if self.indent is not None and self.indent < 0:
            raise ValueError("indent must be >= 0")


def _workers_from_env() -> int | None:
    raw = os.getenv(MAX_WORKERS_ENV, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{MAX_WORKERS_ENV} must be an integer, got {raw!r}") from exc


def resolve_max_workers(max_workers: int | None) -> int:
    """Worker count from the argument, then the environment, then the CPU count."""
    source = "max_workers"
    if max_workers is None:
        max_workers = _workers_from_env()
        source = MAX_WORKERS_ENV
    if max_workers is None:
        return min(32, os.cpu_count() or 1)
    if max_workers < 1:
        raise ValueError(f"{source} must be >= 1")
    return max_workers


def resolve_config(cfg: CompdbConfig | None) -> CompdbConfig:
    """Return config with the worker count pinned (argument, env, CPU count)."""
    if cfg is None:
        cfg = CompdbConfig()
    workers = resolve_max_workers(cfg.max_workers)
    if workers == cfg.max_workers:
        return cfg
    return replace(cfg, max_workers=workers)


def configure_logging() -> None:
    """Log to stderr at the level named by COMPDB_LOG_LEVEL (default INFO)."""
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
