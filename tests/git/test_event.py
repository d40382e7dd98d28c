"""Tests for pull request number discovery."""

from __future__ import annotations

import json
from pathlib import Path

from commentlinks.git.event import pr_number_from_event


def _event(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "event.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_reads_pull_request_number(tmp_path: Path) -> None:
    path = _event(tmp_path, {"pull_request": {"number": 17}, "number": 3})

    assert pr_number_from_event(path) == "17"


def test_falls_back_to_top_level_number(tmp_path: Path) -> None:
    path = _event(tmp_path, {"action": "opened", "number": 3})

    assert pr_number_from_event(path) == "3"


def test_missing_or_unreadable_event_yields_none(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    assert pr_number_from_event(None) is None
    assert pr_number_from_event(tmp_path / "absent.json") is None
    assert pr_number_from_event(broken) is None
    assert pr_number_from_event(_event(tmp_path, {"ref": "refs/heads/main"})) is None
