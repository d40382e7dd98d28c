"""Exception types raised across commentlinks components."""

from __future__ import annotations

from pathlib import Path


class CommentLinksError(RuntimeError):
    """Base class for commentlinks failures."""


class ConfigurationError(CommentLinksError):
    """Raised when a run cannot be configured (bad config file, no PR number)."""


class FileReadError(CommentLinksError):
    """Raised by file readers when a changed file cannot be read as text."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Unable to read {path}: {reason}")
        self.path = str(path)
        self.reason = reason


class TemplateMissingError(CommentLinksError):
    """Raised when a report template cannot be located."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Template not found: {name}")
        self.name = name


__all__ = [
    "CommentLinksError",
    "ConfigurationError",
    "FileReadError",
    "TemplateMissingError",
]
