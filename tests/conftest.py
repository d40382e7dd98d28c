from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.fetchers import FakeFetcher
from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable repo builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    """Fetcher that answers 200 unless a URL is given a canned result."""
    return FakeFetcher()
