"""Pull request number discovery from GitHub event payloads."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from ..logging import get_logger

logger = get_logger("git.event")


def pr_number_from_event(event_path: Path | str | None) -> Optional[str]:
    """Return ``pull_request.number`` (or top-level ``number``) from an event file."""
    if not event_path:
        return None
    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.debug("Unable to read event payload %s: %s", event_path, exc)
        return None
    if not isinstance(payload, dict):
        return None

    pull_request = payload.get("pull_request")
    if isinstance(pull_request, dict):
        number = _as_number(pull_request.get("number"))
        if number:
            return number
    return _as_number(payload.get("number"))


def _as_number(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip().isdigit():
        return value.strip()
    return None


__all__ = ["pr_number_from_event"]
