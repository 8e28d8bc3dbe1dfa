"""
Pytest configuration and shared fixtures for changelog-digest tests.

Path setup is handled by pyproject.toml [tool.pytest.ini_options] pythonpath.
"""

import logging
import pytest

from core.config import reset_config
from digest.models import CommitRecord


ENV_VARS = [
    "CHANGELOG_DIGEST_MODEL",
    "CHANGELOG_DIGEST_OLLAMA_ENDPOINT",
    "CHANGELOG_DIGEST_API_KEY",
    "CHANGELOG_DIGEST_AUDIENCE",
    "CHANGELOG_DIGEST_SINCE",
    "OLLAMA_API_KEY",
]


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Run every test from an empty directory with a private HOME and no overrides."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield work
    logging.disable(logging.NOTSET)
    reset_config()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_commits():
    return [
        CommitRecord("c3c3c3c", "2024-01-20T09:15:00+00:00", "Dana", "Add CSV export to reports"),
        CommitRecord("b2b2b2b", "2024-01-12T17:40:00+00:00", "Lee", "Fix login timeout", "Closes #42"),
        CommitRecord("a1a1a1a", "2024-01-05T08:00:00+00:00", "Dana", "Bump version to 1.4.0"),
    ]
