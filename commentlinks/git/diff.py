"""Changed-file discovery through ``git diff``."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path
from typing import Callable, Iterable, List, Sequence

from ..logging import get_logger

DEFAULT_EXCLUDES: Sequence[str] = (".github/",)


@dataclass(frozen=True)
class DiffResult:
    """Files changed relative to ``target`` that are worth scanning."""

    target: str
    changed_files: Sequence[str]


def diff_target(base: str, override: str | None = None) -> str:
    """Return the revision range passed to ``git diff``.

    ``override`` replaces the whole range (used to debug against a local
    branch); otherwise the range is ``<base>...HEAD``.
    """
    if override:
        return override
    return f"{base}...HEAD"


class DiffCollector:
    """Lists changed files, keeping only existing paths outside excluded prefixes."""

    def __init__(
        self,
        runner: Callable[..., str] | None = None,
        *,
        exclude_paths: Sequence[str] = DEFAULT_EXCLUDES,
    ) -> None:
        self._runner = runner or self._default_runner
        self.exclude_paths = tuple(exclude_paths)
        self.logger = get_logger("git.diff")

    def compute(self, repo_path: str, target: str) -> DiffResult:
        """Return changed files, or an empty result when git cannot answer."""
        repo = Path(repo_path)
        try:
            output = self._run(["git", "diff", "--name-only", target], cwd=repo)
        except (OSError, subprocess.CalledProcessError) as exc:
            self.logger.error("Error getting changed files: %s", exc)
            return DiffResult(target=target, changed_files=[])

        files: List[str] = []
        for line in output.splitlines():
            path = line.strip()
            if not path or path in files:
                continue
            if self.is_excluded(path):
                self.logger.debug("Skipping excluded path %s", path)
                continue
            if not (repo / path).exists():
                self.logger.debug("Skipping removed path %s", path)
                continue
            files.append(path)
        return DiffResult(target=target, changed_files=files)

    def is_excluded(self, path: str) -> bool:
        return any(pattern_matches(path, pattern) for pattern in self.exclude_paths)

    # ------------------------------------------------------------------
    # Internals

    def _run(self, args: Iterable[str], *, cwd: Path) -> str:
        return self._runner(args, cwd=cwd, capture_output=True)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


def pattern_matches(path: str, pattern: str) -> bool:
    """Match a repo-relative path against a prefix (``dir/``), glob, or file name."""
    normalized = path.replace("\\", "/")
    if pattern.endswith("/**"):
        prefix = pattern[:-3]
        return normalized == prefix or normalized.startswith(f"{prefix}/")
    if pattern.endswith("/"):
        return normalized.startswith(pattern)
    if pattern.startswith("**/"):
        return normalized.endswith(pattern[3:]) or fnmatch(normalized, pattern)
    if "/" in pattern or any(ch in pattern for ch in "*?["):
        return fnmatch(normalized, pattern)
    if normalized == pattern:
        return True
    return normalized.endswith(f"/{pattern}")


__all__ = ["DEFAULT_EXCLUDES", "DiffCollector", "DiffResult", "diff_target", "pattern_matches"]
