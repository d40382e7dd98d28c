"""Pipeline orchestration: scan, validate, evaluate, compose, publish."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .config import ActionEnvironment, load_config, load_environment
from .errors import FileReadError
from .git.diff import DiffCollector, diff_target
from .git.publisher import CommentPublisher
from .logging import get_logger, log_debug_payload
from .models import CheckReport, FileScanResult, RepoIdentity
from .report.completeness import evaluate
from .report.composer import ReportComposer
from .report.loader import TemplateLoader
from .scanning.links import scan_file
from .validation.fetch import Fetcher, UrlopenFetcher
from .validation.validator import DEFAULT_MAX_WORKERS, DEFAULT_TIMEOUT_MS, LinkValidator

Reader = Callable[[str], str]

DEFAULT_DIFF_BASE = "origin/main"


class LocalFileReader:
    """Reads repository files as UTF-8 text (BOM dropped), rejecting binary content."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def __call__(self, path: str) -> str:
        try:
            data = (self.root / path).read_bytes()
        except OSError as exc:
            raise FileReadError(path, exc.strerror or str(exc)) from exc
        if b"\x00" in data:
            raise FileReadError(path, "binary content")
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise FileReadError(path, "not valid UTF-8") from exc


@dataclass
class CheckRequest:
    """Explicit inputs for one run; every capability can be swapped in tests."""

    root: Path
    changed_files: Sequence[str]
    repository: RepoIdentity
    reader: Optional[Reader] = None
    fetcher: Optional[Fetcher] = None
    templates: Optional[TemplateLoader] = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    max_workers: int = DEFAULT_MAX_WORKERS


@dataclass
class CheckOutcome:
    """Result of the full workflow run, including delivery."""

    report: CheckReport
    changed_files: List[str] = field(default_factory=list)
    pr_number: Optional[str] = None
    posted: bool = False
    dry_run: bool = False


class Orchestrator:
    """Coordinates the link check for a pull request."""

    def __init__(
        self,
        diff_collector: DiffCollector | None = None,
        publisher: CommentPublisher | None = None,
        environment: ActionEnvironment | None = None,
        fetcher: Fetcher | None = None,
    ) -> None:
        self.diff_collector = diff_collector
        self.publisher = publisher
        self.environment = environment
        self.fetcher = fetcher
        self.logger = get_logger("orchestrator")

    def scan(self, request: CheckRequest) -> List[FileScanResult]:
        """Extract links per changed file; unreadable files are skipped."""
        reader = request.reader or LocalFileReader(request.root)
        results: List[FileScanResult] = []
        for filename in request.changed_files:
            self.logger.info("Processing: %s", filename)
            try:
                content = reader(filename)
            except FileReadError as exc:
                self.logger.warning("%s; skipping", exc)
                continue

            result = scan_file(filename, content)
            if result is None:
                self.logger.debug("No links in %s", filename)
                continue
            log_debug_payload(self.logger, f"Links in {filename}", result.links)
            results.append(result)
        return results

    def run(self, request: CheckRequest) -> CheckReport:
        """Run the core pipeline and return the rendered report."""
        results = self.scan(request)
        log_debug_payload(self.logger, "Results", results)

        validator = LinkValidator(
            request.root,
            request.fetcher or self.fetcher,
            timeout_ms=request.timeout_ms,
            max_workers=request.max_workers,
        )
        links = validator.validate_all(results)

        decision = evaluate(links, request.changed_files)
        if decision.cause is not None:
            self.logger.debug(
                "Report is pending because of %s in %s",
                decision.cause.link.text,
                decision.cause.filename,
            )
        self.logger.info("Found %d link(s); report variant: %s", len(links), decision.variant.value)

        composer = ReportComposer(request.templates or TemplateLoader(), request.repository)
        markdown = composer.compose(decision.variant, links)
        return CheckReport(
            variant=decision.variant,
            markdown=markdown,
            links=links,
            cause=decision.cause,
        )

    def run_check(
        self,
        path: str,
        *,
        diff_base: str | None = None,
        pr_number: str | None = None,
        repository: str | None = None,
        commit_sha: str | None = None,
        dry_run: bool = False,
    ) -> CheckOutcome:
        """Run the workflow end to end: diff, check, and post the report.

        Raises :class:`ConfigurationError` before any work when the pull
        request cannot be identified (unless ``dry_run``) or the repository
        coordinates are missing.
        """
        repo_path = Path(path).expanduser().resolve()
        env = self.environment or load_environment()
        config = load_config(repo_path)

        resolved_pr = None if dry_run else env.resolve_pr_number(pr_number)
        identity = env.repo_identity(repository=repository, commit_sha=commit_sha)
        if resolved_pr:
            self.logger.info("Checking PR #%s in %s/%s", resolved_pr, identity.owner, identity.name)

        collector = self.diff_collector or DiffCollector(exclude_paths=config.exclude_paths)
        target = diff_target(diff_base or env.diff_base or DEFAULT_DIFF_BASE, env.debug_branch)
        diff = collector.compute(str(repo_path), target)
        changed_files = list(diff.changed_files)
        self.logger.info("Found %d changed files", len(changed_files))
        log_debug_payload(self.logger, "Files", changed_files)

        request = CheckRequest(
            root=repo_path,
            changed_files=changed_files,
            repository=identity,
            fetcher=self.fetcher or UrlopenFetcher(user_agent=config.network.user_agent),
            templates=TemplateLoader(config.templates_dir or env.templates_dir),
            timeout_ms=config.network.timeout_ms,
            max_workers=config.network.max_workers,
        )
        report = self.run(request)
        self.logger.debug("Rendered report:\n%s", report.markdown)

        posted = False
        if dry_run:
            self.logger.info("Dry-run completed; report not posted")
        elif not config.publish.enabled:
            self.logger.info("Publishing disabled in configuration; report not posted")
        else:
            publisher = self.publisher or CommentPublisher()
            posted = publisher.post(str(repo_path), resolved_pr or "", report.markdown)

        return CheckOutcome(
            report=report,
            changed_files=changed_files,
            pr_number=resolved_pr,
            posted=posted,
            dry_run=dry_run,
        )


__all__ = ["CheckOutcome", "CheckRequest", "LocalFileReader", "Orchestrator", "Reader"]
