"""Pytest configuration and fixtures for bundle-update-pr tests."""

import pytest
from datetime import datetime, timezone
from unittest.mock import Mock

# Add the project root to the Python path
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from bundle_update_pr.config import Config
from bundle_update_pr.run_context import (
    PublicHost,
    RepositoryCoordinates,
    RunContext,
    UpdateOptions,
)
from bundle_update_pr.utils.gh_api import PullRequest

ENV_KEYS = [
    "CIRCLE_PROJECT_USERNAME",
    "CIRCLE_PROJECT_REPONAME",
    "CIRCLE_BRANCH",
    "CIRCLE_REPOSITORY_URL",
    "GITHUB_ACCESS_TOKEN",
    "ENTERPRISE_OCTOKIT_ACCESS_TOKEN",
    "ENTERPRISE_OCTOKIT_API_ENDPOINT",
    "GITHUB_API_TIMEOUT",
    "LOCK_FILE",
    "REFRESH_COMMAND",
    "NOTE_PATH",
    "LOG_LEVEL",
    "LOG_FORMAT",
]

FIXED_NOW = datetime(2018, 9, 29, 15, 44, 55, tzinfo=timezone.utc)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable the configuration reads."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield monkeypatch


@pytest.fixture
def make_config(clean_env, tmp_path):
    """Build a Config isolated from the real environment and .env file."""
    def _make(**overrides):
        values = {
            "circle_project_username": "masutaka",
            "circle_project_reponame": "sample-app",
            "circle_branch": "master",
            "circle_repository_url": "https://github.com/masutaka/sample-app.git",
            "github_access_token": "test-github-token",
            "note_path": str(tmp_path / "BUNDLE_UPDATE_NOTE.md"),
        }
        values.update(overrides)
        return Config(_env_file=None, **values)
    return _make


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def make_context(tmp_path):
    """Build a RunContext without going through configuration."""
    def _make(**overrides):
        values = {
            "repo": RepositoryCoordinates("masutaka", "sample-app"),
            "host_config": PublicHost(access_token="test-github-token"),
            "github_host": "github.com",
            "current_branch": "master",
            "now": FIXED_NOW,
            "options": UpdateOptions(),
            "note_path": str(tmp_path / "BUNDLE_UPDATE_NOTE.md"),
        }
        values.update(overrides)
        return RunContext(**values)
    return _make


@pytest.fixture
def mock_hosting():
    """Hosting client double with no open pull requests."""
    hosting = Mock()
    hosting.list_pull_requests.return_value = []
    hosting.current_user_login.return_value = "bundle-bot"
    hosting.create_pull_request.return_value = PullRequest(
        number=42,
        title="bundle update at 2018-09-29 15:44:55 UTC",
        head_ref="bundle-update-20180929154455",
        html_url="https://github.com/masutaka/sample-app/pull/42",
    )
    return hosting


@pytest.fixture
def mock_git():
    git = Mock()
    git.status.return_value = "## master...origin/master\n M Gemfile.lock\n"
    return git


@pytest.fixture
def mock_refresher():
    refresher = Mock()
    refresher.refresh.return_value = True
    return refresher


@pytest.fixture
def mock_linker():
    linker = Mock()
    linker.make_compare_links.return_value = [
        "* [rails](https://github.com/rails/rails): [`7.1.2...7.1.3`](https://github.com/rails/rails/compare/v7.1.2...v7.1.3)",
    ]
    return linker
