"""Comment extraction across the supported comment syntaxes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Pattern, Sequence


@dataclass(frozen=True)
class CommentPattern:
    """Names one comment syntax and the regex capturing its body."""

    name: str
    regex: Pattern[str]

    def bodies(self, content: str) -> List[str]:
        found: List[str] = []
        for match in self.regex.finditer(content):
            body = match.group("body").strip()
            if body:
                found.append(body)
        return found


# Markers must open a line, optionally after indentation. Block syntaxes are
# matched lazily so adjacent blocks stay separate.
COMMENT_PATTERNS: Sequence[CommentPattern] = (
    CommentPattern(
        name="C-style single",
        regex=re.compile(r"^[ \t]*//(?P<body>.*)$", re.MULTILINE),
    ),
    CommentPattern(
        name="C-style multi",
        regex=re.compile(r"^[ \t]*/\*(?P<body>.*?)\*/", re.MULTILINE | re.DOTALL),
    ),
    CommentPattern(
        name="Hash",
        regex=re.compile(r"^[ \t]*#(?P<body>.*)$", re.MULTILINE),
    ),
    CommentPattern(
        name="HTML",
        regex=re.compile(r"^[ \t]*<!--(?P<body>.*?)-->", re.MULTILINE | re.DOTALL),
    ),
    CommentPattern(
        name="SQL",
        regex=re.compile(r"^[ \t]*--(?!>)(?P<body>.*)$", re.MULTILINE),
    ),
)


def extract_comments(
    content: str, patterns: Sequence[CommentPattern] = COMMENT_PATTERNS
) -> List[str]:
    """Return comment bodies in pattern-table order, then match order.

    Every pattern scans the whole file. A line that satisfies two syntaxes
    yields two bodies; duplicates are collapsed later at link level.
    """
    bodies: List[str] = []
    for pattern in patterns:
        bodies.extend(pattern.bodies(content))
    return bodies


__all__ = ["COMMENT_PATTERNS", "CommentPattern", "extract_comments"]
