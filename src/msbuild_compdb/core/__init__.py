"""Log scanning, source indexing and path resolution.

Contains the pipeline that turns a build log into a compilation database.
"""

from __future__ import annotations

from .compdb_service import CompdbResult, generate_compile_database
from .config import CompdbConfig
from .database import CompileDatabase, read_database, write_database
from .entries import build_entry
from .models import (
    Ambiguous,
    CompileEntry,
    NotFound,
    RawInvocation,
    ResolvedLocation,
    SkippedInvocation,
    SkipReason,
    Unique,
)
from .resolver import resolve
from .scanning import parse_invocation, scan_log
from .source_index import SourceIndex
from .tokenizer import join_tokens, tokenize

__all__ = [
    "Ambiguous",
    "CompdbConfig",
    "CompdbResult",
    "CompileDatabase",
    "CompileEntry",
    "NotFound",
    "RawInvocation",
    "ResolvedLocation",
    "SkipReason",
    "SkippedInvocation",
    "SourceIndex",
    "Unique",
    "build_entry",
    "generate_compile_database",
    "join_tokens",
    "parse_invocation",
    "read_database",
    "resolve",
    "scan_log",
    "tokenize",
    "write_database",
]
