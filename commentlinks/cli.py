"""CLI entrypoints for commentlinks commands."""

from __future__ import annotations

import argparse
import sys

from .config import load_environment
from .errors import ConfigurationError
from .logging import configure_logging
from .orchestrator import Orchestrator

# Failures never fail the workflow job; the report is advisory.
_EXIT_STATUS = 0


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Enable debug output (same as DEBUG=true).",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="commentlinks",
        description="Check links in source comments of a pull request's changed files.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Scan changed files, validate comment links, and report on the pull request.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    check_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )
    check_parser.add_argument(
        "--diff-base",
        default=None,
        help="Ref to compare against (defaults to origin/$GITHUB_BASE_REF, then origin/main).",
    )
    check_parser.add_argument(
        "--pr-number",
        default=None,
        help="Pull request number (defaults to PR_NUMBER or the event payload).",
    )
    check_parser.add_argument(
        "--repository",
        default=None,
        help="owner/name slug used for permalinks (defaults to GITHUB_REPOSITORY).",
    )
    check_parser.add_argument(
        "--sha",
        default=None,
        help="Commit used for permalinks (defaults to GITHUB_SHA).",
    )
    check_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the report instead of posting it to the pull request.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for commentlinks commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    environment = load_environment()
    configure_logging(verbose=bool(args.verbose) or environment.debug)

    orchestrator = Orchestrator(environment=environment)

    if args.command == "check":
        dry_run = bool(getattr(args, "dry_run", False))
        try:
            outcome = orchestrator.run_check(
                args.path,
                diff_base=args.diff_base,
                pr_number=args.pr_number,
                repository=args.repository,
                commit_sha=args.sha,
                dry_run=dry_run,
            )
        except ConfigurationError as exc:
            parser.exit(_EXIT_STATUS, f"commentlinks check aborted: {exc}\n")
        except Exception as exc:  # pragma: no cover - unexpected failure
            parser.exit(
                _EXIT_STATUS,
                f"commentlinks check failed: {exc}\nRun with --verbose for more details.\n",
            )
        if dry_run:
            print(outcome.report.markdown)
        else:
            status = "posted" if outcome.posted else "not posted"
            print(f"{outcome.report.variant.value} report {status} ({outcome.report.link_count} link(s))")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
