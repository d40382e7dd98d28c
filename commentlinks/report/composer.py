"""Report rendering for the chosen variant."""

from __future__ import annotations

import re
from typing import Dict, List, Mapping, Sequence, Set

from ..errors import TemplateMissingError
from ..logging import get_logger
from ..models import LinkKind, RepoIdentity, ReportVariant, ValidatedLink
from .fallbacks import fallback_template
from .loader import TemplateLoader

LINK_COUNT = "{{LINK_COUNT}}"
LINKS = "{{LINKS}}"
BROKEN_LINKS = "{{BROKEN_LINKS}}"
VALID_LINKS = "{{VALID_LINKS}}"
NONE_SENTINEL = "_None_"

_PLACEHOLDER_PATTERN = re.compile(
    "|".join(re.escape(token) for token in (LINK_COUNT, LINKS, BROKEN_LINKS, VALID_LINKS))
)


def substitute(template: str, values: Mapping[str, str]) -> str:
    """Replace the first occurrence of each placeholder in a single pass.

    Later occurrences are left verbatim, and substituted text is never
    scanned again.
    """
    seen: Set[str] = set()

    def _replace(match: "re.Match[str]") -> str:
        token = match.group(0)
        if token in seen or token not in values:
            return token
        seen.add(token)
        return values[token]

    return _PLACEHOLDER_PATTERN.sub(_replace, template)


class ReportComposer:
    """Fills a variant template with link counts and per-link markdown blocks."""

    def __init__(self, loader: TemplateLoader, repository: RepoIdentity) -> None:
        self.loader = loader
        self.repository = repository
        self.logger = get_logger("composer")

    def compose(self, variant: ReportVariant, links: Sequence[ValidatedLink]) -> str:
        template = self._load_template(variant)
        blocks = [self.format_link(item) for item in links]
        broken = [block for item, block in zip(links, blocks) if not item.outcome.valid]
        valid = [block for item, block in zip(links, blocks) if item.outcome.valid]

        values: Dict[str, str] = {
            LINK_COUNT: str(len(links)),
            LINKS: _join_blocks(blocks),
            BROKEN_LINKS: _join_blocks(broken),
            VALID_LINKS: _join_blocks(valid),
        }
        return substitute(template, values)

    def format_link(self, item: ValidatedLink) -> str:
        link = item.link
        outcome = item.outcome
        context: Dict[str, object] = {
            "kind": link.kind.value,
            "text": link.text,
            "valid": outcome.valid,
            "status": outcome.describe(),
            "filename": item.filename,
            "file_url": self.repository.permalink(item.filename),
        }
        if link.kind is LinkKind.RELATIVE and outcome.resolved_path is not None:
            context["resolved_path"] = outcome.resolved_path
            context["resolved_url"] = self.repository.permalink(outcome.resolved_path)
        return self.loader.render_link(**context).rstrip()

    def _load_template(self, variant: ReportVariant) -> str:
        try:
            return self.loader.load(variant)
        except TemplateMissingError as exc:
            self.logger.warning("%s; using built-in %s report", exc, variant.value)
            return fallback_template(variant)


def _join_blocks(blocks: List[str]) -> str:
    if not blocks:
        return NONE_SENTINEL
    return "\n\n".join(blocks)


__all__ = [
    "BROKEN_LINKS",
    "LINKS",
    "LINK_COUNT",
    "NONE_SENTINEL",
    "ReportComposer",
    "VALID_LINKS",
    "substitute",
]
