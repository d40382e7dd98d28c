"""Link validation: filesystem checks for relative links, HTTP probes for URLs."""

from __future__ import annotations

import posixpath
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import FileScanResult, LinkCandidate, LinkKind, ValidatedLink, ValidationOutcome
from .fetch import FetchResult, Fetcher, UrlopenFetcher

DEFAULT_TIMEOUT_MS = 5000
DEFAULT_MAX_WORKERS = 8
TIMEOUT_MESSAGE = "Timeout"
NOT_FOUND_MESSAGE = "File not found"
OUTSIDE_MESSAGE = "Outside repository"


def resolve_relative(text: str, filename: str) -> str:
    """Resolve a relative link against the directory of ``filename``.

    The result is repository-root relative with POSIX separators. A leading
    ``/`` anchors the link at the repository root. Fragments and query
    strings are not part of the path.
    """
    target = text.split("#", 1)[0].split("?", 1)[0]
    if target.startswith("/"):
        joined = target.lstrip("/")
    else:
        directory = posixpath.dirname(filename.replace("\\", "/"))
        joined = posixpath.join(directory, target)
    return posixpath.normpath(joined)


def is_inside_repository(resolved: str) -> bool:
    """Return whether a normalised path names something below the repository root."""
    return resolved != "." and resolved != ".." and not resolved.startswith("../")


def is_success_status(status_code: int) -> bool:
    return 200 <= status_code <= 399


class LinkValidator:
    """Checks links found in changed files.

    Relative links get a single existence check under ``root``; links that
    resolve outside it are invalid without touching the filesystem. Absolute links
    get exactly one request through ``fetcher``, bounded by ``timeout_ms``; a
    probe that overruns the budget is abandoned and reported as ``Timeout``.
    Every failure is returned as a :class:`ValidationOutcome`, never raised.
    """

    def __init__(
        self,
        root: Path | str,
        fetcher: Fetcher | None = None,
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        self.root = Path(root)
        self.fetcher = fetcher or UrlopenFetcher()
        self.timeout_ms = timeout_ms
        self.max_workers = max(1, max_workers)
        self.logger = get_logger("validation")

    def validate(self, link: LinkCandidate, filename: str) -> ValidationOutcome:
        if link.kind is LinkKind.RELATIVE:
            return self._validate_relative(link, filename)
        return self._validate_absolute(link)

    def validate_all(self, results: Sequence[FileScanResult]) -> List[ValidatedLink]:
        """Validate every link, preserving file-then-discovery order."""
        pairs: List[Tuple[str, LinkCandidate]] = [
            (result.filename, link) for result in results for link in result.links
        ]
        if not pairs:
            return []

        workers = min(self.max_workers, len(pairs))
        if workers == 1:
            outcomes = [self.validate(link, filename) for filename, link in pairs]
        else:
            # Each task is bounded by the probe timeout, so shutdown never waits on a hung socket.
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="commentlinks") as pool:
                outcomes = list(pool.map(lambda pair: self.validate(pair[1], pair[0]), pairs))

        return [
            ValidatedLink(filename=filename, link=link, outcome=outcome)
            for (filename, link), outcome in zip(pairs, outcomes)
        ]

    # ------------------------------------------------------------------
    # Internals

    def _validate_relative(self, link: LinkCandidate, filename: str) -> ValidationOutcome:
        resolved = resolve_relative(link.text, filename)
        if not is_inside_repository(resolved):
            self.logger.debug("Relative link %s in %s leaves the repository", link.text, filename)
            return ValidationOutcome(valid=False, message=OUTSIDE_MESSAGE)
        exists = (self.root / resolved).exists()
        self.logger.debug("Relative link %s in %s -> %s (exists=%s)", link.text, filename, resolved, exists)
        return ValidationOutcome(
            valid=exists,
            resolved_path=resolved,
            message=None if exists else NOT_FOUND_MESSAGE,
        )

    def _validate_absolute(self, link: LinkCandidate) -> ValidationOutcome:
        result = self._bounded_fetch(link.text)
        if result is None or result.timed_out:
            return ValidationOutcome(valid=False, message=TIMEOUT_MESSAGE)
        if result.status_code is not None:
            return ValidationOutcome(
                valid=is_success_status(result.status_code),
                status_code=result.status_code,
            )
        return ValidationOutcome(valid=False, message=result.error or "Request failed")

    def _bounded_fetch(self, url: str) -> Optional[FetchResult]:
        holder: Dict[str, FetchResult] = {}

        def _worker() -> None:
            try:
                holder["result"] = self.fetcher.fetch(url, self.timeout_ms)
            except Exception as exc:  # fetchers may be arbitrary callables
                self.logger.debug("Fetcher raised for %s", url, exc_info=True)
                holder["result"] = FetchResult(error=str(exc) or exc.__class__.__name__)

        thread = threading.Thread(target=_worker, name="commentlinks-probe", daemon=True)
        thread.start()
        thread.join(self.timeout_ms / 1000.0)
        if thread.is_alive():
            self.logger.debug("Probe for %s exceeded %d ms; abandoning", url, self.timeout_ms)
            return None
        return holder.get("result", FetchResult(error="No response"))


__all__ = [
    "DEFAULT_MAX_WORKERS",
    "DEFAULT_TIMEOUT_MS",
    "LinkValidator",
    "NOT_FOUND_MESSAGE",
    "OUTSIDE_MESSAGE",
    "TIMEOUT_MESSAGE",
    "is_inside_repository",
    "is_success_status",
    "resolve_relative",
]
