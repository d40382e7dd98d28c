"""Check links in source-code comments of a pull request's changed files."""

__version__ = "0.1.0"
