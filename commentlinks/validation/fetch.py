"""Outbound request capability used to probe absolute links."""

from __future__ import annotations

import socket
from dataclasses import dataclass
from http.client import HTTPException
from typing import Optional, Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

DEFAULT_USER_AGENT = "commentlinks/0.1 (+https://github.com/features/actions)"


@dataclass(frozen=True)
class FetchResult:
    """Either an HTTP status code or a network error description."""

    status_code: Optional[int] = None
    error: Optional[str] = None
    timed_out: bool = False


class Fetcher(Protocol):
    """Single-method capability: issue one request and report what happened."""

    def fetch(self, url: str, timeout_ms: int) -> FetchResult:
        """Return the outcome of one request to ``url``."""


class UrlopenFetcher:
    """Probes URLs with a single ``GET`` through :mod:`urllib.request`."""

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT) -> None:
        self.user_agent = user_agent

    def fetch(self, url: str, timeout_ms: int) -> FetchResult:
        try:
            request = Request(url, headers={"User-Agent": self.user_agent}, method="GET")
        except ValueError as exc:
            return FetchResult(error=f"Malformed URL: {exc}")

        timeout = max(timeout_ms, 1) / 1000.0
        try:
            # Redirects are followed by urlopen; the body is never read.
            with urlopen(request, timeout=timeout) as response:  # noqa: S310 - http(s) only
                return FetchResult(status_code=response.status)
        except HTTPError as exc:
            return FetchResult(status_code=exc.code)
        except URLError as exc:
            if isinstance(exc.reason, (socket.timeout, TimeoutError)):
                return FetchResult(error="Timeout", timed_out=True)
            return FetchResult(error=str(exc.reason))
        except (socket.timeout, TimeoutError):
            return FetchResult(error="Timeout", timed_out=True)
        except (HTTPException, OSError, ValueError) as exc:
            return FetchResult(error=str(exc) or exc.__class__.__name__)


__all__ = ["DEFAULT_USER_AGENT", "FetchResult", "Fetcher", "UrlopenFetcher"]
