"""Report variant selection."""

from __future__ import annotations

import posixpath
from typing import Iterable, Sequence, Set

from ..models import CompletenessDecision, LinkKind, ReportVariant, ValidatedLink


def evaluate(links: Sequence[ValidatedLink], changed_files: Iterable[str]) -> CompletenessDecision:
    """Pick the report variant for a whole run.

    ``ALL_UPDATED`` requires every link to be relative and to resolve to a
    file touched by the change. A single absolute or stale link anywhere
    demotes the run to ``PENDING``; absolute links can never count as updated.
    """
    if not links:
        return CompletenessDecision(variant=ReportVariant.NO_LINKS)

    changed = _normalise(changed_files)
    for item in links:
        if item.link.kind is LinkKind.ABSOLUTE:
            return CompletenessDecision(variant=ReportVariant.PENDING, cause=item)
        resolved = item.outcome.resolved_path
        if resolved is None or resolved not in changed:
            return CompletenessDecision(variant=ReportVariant.PENDING, cause=item)

    return CompletenessDecision(variant=ReportVariant.ALL_UPDATED)


def _normalise(paths: Iterable[str]) -> Set[str]:
    return {posixpath.normpath(path.replace("\\", "/")) for path in paths if path}


__all__ = ["evaluate"]
