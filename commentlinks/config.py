"""Configuration loading (.commentlinks.yml) and GitHub Actions environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .errors import ConfigurationError
from .git.diff import DEFAULT_EXCLUDES
from .git.event import pr_number_from_event
from .models import RepoIdentity
from .validation.fetch import DEFAULT_USER_AGENT
from .validation.validator import DEFAULT_MAX_WORKERS, DEFAULT_TIMEOUT_MS

CONFIG_FILENAME = ".commentlinks.yml"


@dataclass
class NetworkConfig:
    """Settings for probing absolute links."""

    timeout_ms: int = DEFAULT_TIMEOUT_MS
    max_workers: int = DEFAULT_MAX_WORKERS
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class PublishConfig:
    """Whether reports are posted to the pull request."""

    enabled: bool = True


@dataclass
class CommentLinksConfig:
    """Represents the settings defined in .commentlinks.yml."""

    root: Path
    exclude_paths: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDES))
    templates_dir: Optional[Path] = None
    network: NetworkConfig = field(default_factory=NetworkConfig)
    publish: PublishConfig = field(default_factory=PublishConfig)


def load_config(config_path: Path) -> CommentLinksConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return CommentLinksConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigurationError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = CommentLinksConfig(root=root)

    if "exclude_paths" in data:
        config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    templates_dir = _as_str(data.get("templates_dir"))
    if templates_dir:
        config.templates_dir = root / templates_dir

    network_data = _as_dict(data.get("network"))
    if network_data:
        timeout_ms = _as_int(network_data.get("timeout_ms"))
        max_workers = _as_int(network_data.get("max_workers"))
        user_agent = _as_str(network_data.get("user_agent"))
        if timeout_ms is not None:
            if timeout_ms <= 0:
                raise ConfigurationError("network.timeout_ms must be a positive integer")
            config.network.timeout_ms = timeout_ms
        if max_workers is not None:
            config.network.max_workers = max(1, max_workers)
        if user_agent:
            config.network.user_agent = user_agent

    publish_data = _as_dict(data.get("publish"))
    if publish_data:
        enabled = _as_bool(publish_data.get("enabled"))
        if enabled is not None:
            config.publish.enabled = enabled

    return config


@dataclass
class ActionEnvironment:
    """Values a GitHub Actions run exposes through environment variables."""

    repository: Optional[str] = None
    commit_sha: Optional[str] = None
    pr_number: Optional[str] = None
    event_path: Optional[Path] = None
    base_ref: Optional[str] = None
    debug_branch: Optional[str] = None
    debug: bool = False
    action_path: Optional[Path] = None

    @property
    def diff_base(self) -> Optional[str]:
        return f"origin/{self.base_ref}" if self.base_ref else None

    @property
    def templates_dir(self) -> Optional[Path]:
        if self.action_path is None:
            return None
        return self.action_path / "templates"

    def resolve_pr_number(self, override: str | None = None) -> str:
        """Return the pull request number from the CLI, env, or event payload."""
        for candidate in (override, self.pr_number, pr_number_from_event(self.event_path)):
            if candidate and str(candidate).strip():
                return str(candidate).strip()
        raise ConfigurationError("PR number not found")

    def repo_identity(
        self, *, repository: str | None = None, commit_sha: str | None = None
    ) -> RepoIdentity:
        slug = repository or self.repository
        sha = commit_sha or self.commit_sha
        if not slug or not sha:
            raise ConfigurationError(
                "Repository and commit are required (set GITHUB_REPOSITORY and GITHUB_SHA)"
            )
        try:
            return RepoIdentity.parse(slug, sha)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc


def load_environment(environ: Mapping[str, str] | None = None) -> ActionEnvironment:
    """Read the workflow environment; blank values count as unset."""
    env = os.environ if environ is None else environ

    def _get(key: str) -> Optional[str]:
        value = env.get(key)
        if value is None:
            return None
        value = value.strip()
        return value or None

    event_path = _get("GITHUB_EVENT_PATH")
    action_path = _get("ACTION_PATH")
    return ActionEnvironment(
        repository=_get("GITHUB_REPOSITORY"),
        commit_sha=_get("GITHUB_SHA"),
        pr_number=_get("PR_NUMBER"),
        event_path=Path(event_path) if event_path else None,
        base_ref=_get("GITHUB_BASE_REF"),
        debug_branch=_get("DEBUG_BRANCH"),
        debug=_as_bool(_get("DEBUG")) or False,
        action_path=Path(action_path) if action_path else None,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "ActionEnvironment",
    "CONFIG_FILENAME",
    "CommentLinksConfig",
    "NetworkConfig",
    "PublishConfig",
    "load_config",
    "load_environment",
]
