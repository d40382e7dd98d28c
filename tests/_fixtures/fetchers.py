"""Fetcher doubles for validation tests."""

from __future__ import annotations

import threading
from typing import Dict, List

from commentlinks.validation.fetch import FetchResult


class FakeFetcher:
    """Deterministic fetcher mapping URLs to canned results."""

    def __init__(self, responses: Dict[str, FetchResult] | None = None, default: int = 200) -> None:
        self.responses = responses or {}
        self.default = default
        self.calls: List[tuple[str, int]] = []

    def fetch(self, url: str, timeout_ms: int) -> FetchResult:
        self.calls.append((url, timeout_ms))
        return self.responses.get(url, FetchResult(status_code=self.default))


class HangingFetcher:
    """Never answers until released, like a server that accepts and stalls."""

    def __init__(self) -> None:
        self.release = threading.Event()

    def fetch(self, url: str, timeout_ms: int) -> FetchResult:
        self.release.wait(30)
        return FetchResult(status_code=200)


class ExplodingFetcher:
    def fetch(self, url: str, timeout_ms: int) -> FetchResult:
        raise ConnectionRefusedError("connection refused")


__all__ = ["ExplodingFetcher", "FakeFetcher", "HangingFetcher"]
