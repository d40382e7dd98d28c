"""Comment and link extraction from changed files."""

from .comments import COMMENT_PATTERNS, CommentPattern, extract_comments
from .links import classify, extract_links, scan_file

__all__ = [
    "COMMENT_PATTERNS",
    "CommentPattern",
    "classify",
    "extract_comments",
    "extract_links",
    "scan_file",
]
