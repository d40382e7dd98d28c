"""Link validation package."""

from .fetch import FetchResult, Fetcher, UrlopenFetcher
from .validator import LinkValidator, resolve_relative

__all__ = [
    "FetchResult",
    "Fetcher",
    "LinkValidator",
    "UrlopenFetcher",
    "resolve_relative",
]
