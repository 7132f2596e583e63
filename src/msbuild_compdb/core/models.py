"""Core data models for compilation database generation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True, slots=True)
class RawInvocation:
    """One compiler invocation found in the log, before path resolution."""

    line_no: int
    compiler_token: str
    arguments: tuple[str, ...]
    source_token: str | None = None
    source_position: int | None = None  # index into arguments


@dataclass(frozen=True, slots=True)
class Unique:
    directory: str


@dataclass(frozen=True, slots=True)
class Ambiguous:
    candidates: tuple[str, ...]  # sorted


@dataclass(frozen=True, slots=True)
class NotFound:
    pass


ResolvedLocation: TypeAlias = Unique | Ambiguous | NotFound


class SkipReason(str, Enum):
    """Why an invocation did not produce a database entry."""

    MISSING_SOURCE_TOKEN = "missing_source_token"
    AMBIGUOUS_PATH = "ambiguous_path"
    UNRESOLVED_PATH = "unresolved_path"


@dataclass(frozen=True, slots=True)
class SkippedInvocation:
    """Diagnostic for an invocation that was dropped."""

    line_no: int
    reason: SkipReason
    basename: str | None = None
    candidates: tuple[str, ...] = ()

    @property
    def message(self) -> str:
        subject = f"line {self.line_no}"
        if self.basename:
            subject += f": {self.basename}"

        if self.reason is SkipReason.MISSING_SOURCE_TOKEN:
            return f"{subject}: no source file argument found"
        if self.reason is SkipReason.AMBIGUOUS_PATH:
            dirs = ", ".join(self.candidates)
            return f"{subject}: ambiguous path, found in {len(self.candidates)} directories: {dirs}"
        return f"{subject}: not found in source directory"


class CompileEntry(BaseModel):
    """One record of compile_commands.json."""

    model_config = ConfigDict(frozen=True)

    file: str = Field(description="Absolute path of the compiled source file.")
    directory: str = Field(description="Absolute directory containing the source file.")
    arguments: list[str] = Field(description="Compiler executable followed by its arguments.")

