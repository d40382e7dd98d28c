"""Posting reports back to the pull request."""

from __future__ import annotations

import os
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, Iterable

from ..logging import get_logger


class CommentPublisher:
    """Posts a markdown body as a pull-request comment via the GitHub CLI."""

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner
        self.logger = get_logger("git.publisher")

    def post(self, repo_path: str, pr_number: str, body: str) -> bool:
        """Write ``body`` to a temp file and hand it to ``gh pr comment``."""
        repo = Path(repo_path)
        handle, temp_name = tempfile.mkstemp(prefix="pr-comment-", suffix=".md")
        try:
            with os.fdopen(handle, "w", encoding="utf-8") as stream:
                stream.write(body)
            self._run(
                ["gh", "pr", "comment", str(pr_number), "--body-file", temp_name],
                cwd=repo,
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            self.logger.error("Failed to post comment to PR #%s: %s", pr_number, exc)
            return False
        finally:
            Path(temp_name).unlink(missing_ok=True)

        self.logger.info("Comment posted to PR #%s", pr_number)
        return True

    # ------------------------------------------------------------------
    # Helpers

    def _run(self, args: Iterable[str], *, cwd: Path) -> str:
        return self._runner(args, cwd=cwd)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        env: dict[str, str] | None = None,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            env=env,
            check=True,
            text=True,
            capture_output=capture_output,
        )
        if capture_output:
            return completed.stdout
        return ""


__all__ = ["CommentPublisher"]
