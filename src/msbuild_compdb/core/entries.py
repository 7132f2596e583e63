"""Turn resolved invocations into compile database entries."""

from __future__ import annotations

import os

from .models import (
    Ambiguous,
    CompileEntry,
    RawInvocation,
    ResolvedLocation,
    SkippedInvocation,
    SkipReason,
    Unique,
)
from .resolver import resolve, source_basename
from .source_index import SourceIndex


def build_entry(
    invocation: RawInvocation,
    location: ResolvedLocation | None,
) -> CompileEntry | SkippedInvocation:
    """Build the entry for a resolved invocation, or say why it is skipped.

    ``location`` is None only when the invocation has no source token.
    """
    if invocation.source_token is None or invocation.source_position is None:
        return SkippedInvocation(
            line_no=invocation.line_no,
            reason=SkipReason.MISSING_SOURCE_TOKEN,
        )

    basename = source_basename(invocation.source_token)

    if isinstance(location, Unique):
        file = os.path.join(location.directory, basename)
        arguments = [invocation.compiler_token, *invocation.arguments]
        arguments[invocation.source_position + 1] = file
        return CompileEntry(file=file, directory=location.directory, arguments=arguments)
    if isinstance(location, Ambiguous):
        return SkippedInvocation(
            line_no=invocation.line_no,
            reason=SkipReason.AMBIGUOUS_PATH,
            basename=basename,
            candidates=location.candidates,
        )
    # NotFound, or no location at all.
    return SkippedInvocation(
        line_no=invocation.line_no,
        reason=SkipReason.UNRESOLVED_PATH,
        basename=basename,
    )


def process_invocation(
    invocation: RawInvocation,
    index: SourceIndex,
) -> CompileEntry | SkippedInvocation:
    """Resolve and build in one step; safe to call from worker threads."""
    if invocation.source_token is None:
        return build_entry(invocation, None)
    return build_entry(invocation, resolve(invocation.source_token, index))
