"""Resolve a source token to the directory that holds it.

Resolution is deliberately conservative: a name found in several
directories is reported as ambiguous instead of guessed, since a wrong
entry sends downstream indexers to the wrong file without any warning.
"""

from __future__ import annotations

import ntpath
import os

from .models import Ambiguous, NotFound, ResolvedLocation, Unique
from .source_index import SourceIndex


def source_basename(token: str) -> str:
    """File name part of a source token (``\\`` and ``/`` both separate)."""
    return ntpath.basename(token)


def resolve(source_token: str, index: SourceIndex) -> ResolvedLocation:
    # Absolute paths that exist need no lookup, even if the name is also
    # indexed elsewhere.
    if os.path.isabs(source_token) and os.path.isfile(source_token):
        return Unique(directory=os.path.dirname(os.path.abspath(source_token)))

    dirs = index.lookup(source_basename(source_token))
    if len(dirs) == 1:
        (directory,) = dirs
        return Unique(directory=directory)
    if len(dirs) > 1:
        return Ambiguous(candidates=tuple(sorted(dirs)))
    return NotFound()
