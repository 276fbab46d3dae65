"""Pytest configuration and shared fixtures."""

import logging
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from px.errors import GitError
from px.models import CommitInfo, Project, ProjectGitStatus


class FakeGitProvider:
    """In-memory stand-in for GitStatusProvider.

    Queries listed in ``failing`` raise GitError; paths in ``not_repos`` are
    rejected by is_repository.
    """

    def __init__(self, branch="main", commit_time=1_700_000_000):
        self.branch = branch
        self.branches = {}
        self.commit_time = commit_time
        self.uncommitted = set()
        self.not_repos = set()
        self.failing = set()

    def _check(self, query):
        if query in self.failing:
            raise GitError(f"{query} failed")

    def is_repository(self, repo_path):
        return str(repo_path) not in self.not_repos

    def current_branch(self, repo_path):
        self._check("current_branch")
        return self.branches.get(str(repo_path), self.branch)

    def has_uncommitted(self, repo_path):
        self._check("has_uncommitted")
        return str(repo_path) in self.uncommitted

    def ahead_behind(self, repo_path):
        self._check("ahead_behind")
        return (1, 2)

    def last_commit(self, repo_path):
        self._check("last_commit")
        if self.commit_time is None:
            raise GitError("no commits")
        return CommitInfo(
            hash="abc1234",
            message="Initial commit",
            author="Test Author",
            timestamp=datetime.fromtimestamp(self.commit_time, tz=timezone.utc),
        )


def make_repo(*parts) -> Path:
    """Create a directory that looks like a repository root."""
    path = Path(*parts)
    (path / ".git").mkdir(parents=True)
    return path


def make_project(name, frecency=0.0, path=None, **kwargs) -> Project:
    """Build a Project without touching the filesystem."""
    return Project(
        path=Path(path or f"/test/{name}"),
        name=name,
        last_modified=datetime(2024, 1, 1, tzinfo=timezone.utc),
        git_status=kwargs.pop("git_status", ProjectGitStatus(current_branch="main")),
        frecency_score=frecency,
        **kwargs,
    )


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    temp = tempfile.mkdtemp()
    yield Path(temp)
    shutil.rmtree(temp, ignore_errors=True)


@pytest.fixture
def fake_provider():
    return FakeGitProvider()


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep tests away from the user's real config and cache."""
    monkeypatch.setenv("PX_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("PX_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.delenv("PX_EDITOR", raising=False)
    monkeypatch.delenv("PX_SCAN_DIRS", raising=False)
    yield
    # The CLI installs a handler on the px logger; reset it between tests
    px_logger = logging.getLogger("px")
    px_logger.handlers.clear()
    px_logger.setLevel(logging.NOTSET)
