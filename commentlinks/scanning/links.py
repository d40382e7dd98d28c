"""Link discovery and classification inside comment bodies."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Tuple

from ..logging import get_logger, log_debug_payload
from ..models import FileScanResult, LinkCandidate, LinkKind
from .comments import extract_comments

logger = get_logger("scanning")

# Characters that end a link token: whitespace plus markdown/HTML wrapping.
_TOKEN_TAIL = r"""[^\s<>"'{}|\\^`\[\]]"""

ABSOLUTE_URL_PATTERN = re.compile(rf"\bhttps?://{_TOKEN_TAIL}+")
# Characters allowed right before a relative path. `<` may open `<./path>`
# but never a root path, so closing HTML tags such as `</b>` are not links.
_PATH_OPENERS = r"""\s"'(`\[{"""

RELATIVE_PATH_PATTERN = re.compile(
    rf"""(?:(?<![^{_PATH_OPENERS}<])\.\.?/|(?<![^{_PATH_OPENERS}])/){_TOKEN_TAIL}*"""
)

_ABSOLUTE_PREFIXES: Tuple[str, ...] = ("http://", "https://")
_RELATIVE_PREFIXES: Tuple[str, ...] = ("./", "../", "/")

_LEADING_DELIMITERS: Tuple[str, ...] = ("<!--", "//", "/*", "--", "#")
_TRAILING_DELIMITERS: Tuple[str, ...] = ("-->", "*/")
_TRAILING_PUNCTUATION = ".,;:!?"
_WORD_CHAR = re.compile(r"\w")


def classify(text: str) -> Optional[LinkKind]:
    """Return the link kind implied by the leading characters of ``text``."""
    if text.startswith(_ABSOLUTE_PREFIXES):
        return LinkKind.ABSOLUTE
    if text.startswith(_RELATIVE_PREFIXES):
        return LinkKind.RELATIVE
    return None


def strip_delimiters(body: str) -> str:
    """Remove comment markers left on the edges of a comment body."""
    cleaned = body.strip()
    changed = True
    while changed and cleaned:
        changed = False
        for marker in _LEADING_DELIMITERS:
            if cleaned.startswith(marker):
                cleaned = cleaned[len(marker):].lstrip()
                changed = True
        for marker in _TRAILING_DELIMITERS:
            if cleaned.endswith(marker):
                cleaned = cleaned[: -len(marker)].rstrip()
                changed = True
    return cleaned


def extract_links(comments: Iterable[str]) -> List[LinkCandidate]:
    """Return unique links across ``comments``, first occurrence first."""
    found: Dict[str, LinkCandidate] = {}
    for comment in comments:
        for token in _tokens(strip_delimiters(comment)):
            if token in found:
                continue
            kind = classify(token)
            if kind is None:
                continue
            found[token] = LinkCandidate(text=token, kind=kind)
    return list(found.values())


def scan_file(filename: str, content: str) -> Optional[FileScanResult]:
    """Scan one file's text; files without links produce ``None``."""
    comments = extract_comments(content)
    log_debug_payload(logger, f"Comments in {filename}", comments)
    links = extract_links(comments)
    if not links:
        return None
    return FileScanResult(filename=filename, links=links)


def _tokens(text: str) -> List[str]:
    matches: List[Tuple[int, str]] = []
    for pattern in (ABSOLUTE_URL_PATTERN, RELATIVE_PATH_PATTERN):
        for match in pattern.finditer(text):
            matches.append((match.start(), match.group(0)))
    matches.sort(key=lambda item: item[0])

    tokens: List[str] = []
    for _, raw in matches:
        token = _trim_token(raw)
        if _is_link_like(token):
            tokens.append(token)
    return tokens


def _trim_token(token: str) -> str:
    trimmed = token.strip()
    while trimmed:
        if trimmed[-1] in _TRAILING_PUNCTUATION:
            trimmed = trimmed[:-1]
        elif trimmed.endswith(")") and trimmed.count(")") > trimmed.count("("):
            trimmed = trimmed[:-1]
        else:
            break
    return trimmed


def _is_link_like(token: str) -> bool:
    # Bare markers such as "/", "//", "./" or "/*" carry no path.
    for prefix in _ABSOLUTE_PREFIXES + _RELATIVE_PREFIXES:
        if token.startswith(prefix):
            return bool(_WORD_CHAR.search(token[len(prefix):]))
    return False


__all__ = [
    "ABSOLUTE_URL_PATTERN",
    "RELATIVE_PATH_PATTERN",
    "classify",
    "extract_links",
    "scan_file",
    "strip_delimiters",
]
