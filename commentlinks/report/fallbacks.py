"""Built-in report text used when a variant template cannot be found."""

from __future__ import annotations

from typing import Dict

from ..models import ReportVariant

_HEADER = "## 🔗 Comment link check"

_FALLBACK_TEMPLATES: Dict[ReportVariant, str] = {
    ReportVariant.NO_LINKS: (
        f"{_HEADER}\n\n"
        "No links were found in the comments of the changed files.\n"
    ),
    ReportVariant.ALL_UPDATED: (
        f"{_HEADER}\n\n"
        "All {{LINK_COUNT}} link(s) found in comments point to files updated in this pull request.\n\n"
        "{{LINKS}}\n"
    ),
    ReportVariant.PENDING: (
        f"{_HEADER}\n\n"
        "Found {{LINK_COUNT}} link(s) in comments that may need attention.\n\n"
        "{{LINKS}}\n"
    ),
}


def fallback_template(variant: ReportVariant) -> str:
    """Return the minimal default text for ``variant``."""
    return _FALLBACK_TEMPLATES[variant]


__all__ = ["fallback_template"]
