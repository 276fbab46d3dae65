"""Tests for the git status provider."""

import os
import shutil
import subprocess

import pytest

from px.core.git import GitStatusProvider
from px.core.probe import probe_repository
from px.errors import GitError
from px.managers.index_store import IndexStore


def completed(stdout="", returncode=0, stderr=""):
    return subprocess.CompletedProcess(
        args=["git"], returncode=returncode, stdout=stdout, stderr=stderr
    )


@pytest.fixture
def provider():
    return GitStatusProvider()


class TestGitStatusProviderParsing:
    """Test output parsing with subprocess mocked out."""

    def test_last_commit(self, provider, monkeypatch, temp_dir):
        monkeypatch.setattr(
            subprocess, "run", lambda *a, **k: completed("abc1234|Fix | pipes|Jane Doe|1700000000\n")
        )

        commit = provider.last_commit(temp_dir)

        assert commit.hash == "abc1234"
        assert commit.message == "Fix | pipes"
        assert commit.author == "Jane Doe"
        assert int(commit.timestamp.timestamp()) == 1_700_000_000

    def test_last_commit_bad_format(self, provider, monkeypatch, temp_dir):
        monkeypatch.setattr(subprocess, "run", lambda *a, **k: completed("garbage\n"))
        with pytest.raises(GitError):
            provider.last_commit(temp_dir)

    def test_last_commit_bad_timestamp(self, provider, monkeypatch, temp_dir):
        monkeypatch.setattr(subprocess, "run", lambda *a, **k: completed("a|b|c|soon\n"))
        with pytest.raises(GitError, match="timestamp"):
            provider.last_commit(temp_dir)

    def test_ahead_behind(self, provider, monkeypatch, temp_dir):
        monkeypatch.setattr(subprocess, "run", lambda *a, **k: completed("3\t7\n"))
        assert provider.ahead_behind(temp_dir) == (3, 7)

    def test_ahead_behind_unexpected_output(self, provider, monkeypatch, temp_dir):
        monkeypatch.setattr(subprocess, "run", lambda *a, **k: completed("3\n"))
        with pytest.raises(GitError):
            provider.ahead_behind(temp_dir)

    def test_nonzero_exit_raises(self, provider, monkeypatch, temp_dir):
        monkeypatch.setattr(
            subprocess, "run", lambda *a, **k: completed(returncode=128, stderr="fatal: no upstream")
        )
        with pytest.raises(GitError, match="no upstream"):
            provider.ahead_behind(temp_dir)
        assert provider.is_repository(temp_dir) is False

    def test_missing_git_binary(self, temp_dir):
        provider = GitStatusProvider(git="definitely-not-a-real-git-binary")
        with pytest.raises(GitError, match="not found"):
            provider.current_branch(temp_dir)

    def test_timeout_raises(self, provider, monkeypatch, temp_dir):
        def hang(*args, **kwargs):
            raise subprocess.TimeoutExpired(cmd=args[0], timeout=kwargs["timeout"])

        monkeypatch.setattr(subprocess, "run", hang)
        with pytest.raises(GitError, match="timed out"):
            provider.has_uncommitted(temp_dir)

    def test_status_and_branch(self, provider, monkeypatch, temp_dir):
        monkeypatch.setattr(subprocess, "run", lambda *a, **k: completed(" M file.py\n"))
        assert provider.has_uncommitted(temp_dir) is True

        monkeypatch.setattr(subprocess, "run", lambda *a, **k: completed("\n"))
        assert provider.has_uncommitted(temp_dir) is False
        assert provider.current_branch(temp_dir) == ""


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
class TestGitStatusProviderRealRepo:
    """Run the provider against a real repository."""

    def git(self, repo, *args):
        subprocess.run(
            [
                "git",
                "-c", "user.name=Test User",
                "-c", "user.email=test@example.com",
                "-c", "commit.gpgsign=false",
                *args,
            ],
            cwd=repo,
            check=True,
            capture_output=True,
        )

    @pytest.fixture
    def cache_path(self, temp_dir):
        return temp_dir / "cache" / "projects.json"

    @pytest.fixture
    def repo(self, temp_dir):
        repo = temp_dir / "demo"
        repo.mkdir()
        self.git(repo, "init", "-q")
        self.git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
        return repo

    def test_empty_repository(self, provider, repo):
        assert provider.is_repository(repo)
        assert provider.current_branch(repo) == "main"
        with pytest.raises(GitError):
            provider.last_commit(repo)

    def test_committed_repository(self, provider, repo):
        (repo / "README.md").write_text("# Demo\n")
        self.git(repo, "add", "README.md")
        self.git(repo, "commit", "-q", "-m", "Initial commit")

        commit = provider.last_commit(repo)
        assert commit.message == "Initial commit"
        assert commit.author == "Test User"
        assert provider.has_uncommitted(repo) is False

        (repo / "new.txt").write_text("untracked")
        assert provider.has_uncommitted(repo) is True

        # No upstream configured
        with pytest.raises(GitError):
            provider.ahead_behind(repo)

        project = probe_repository(repo, provider)
        assert project.git_status.current_branch == "main"
        assert (project.git_status.ahead, project.git_status.behind) == (0, 0)
        assert project.last_modified == commit.timestamp
        assert project.readme_excerpt == "Demo"

    def test_branch_name_with_invalid_utf8(self, provider, repo, temp_dir, cache_path):
        # Ref names are raw bytes to git; 0xe9 alone is not valid UTF-8
        self.git(repo, "checkout", "-q", "-b", os.fsdecode(b"caf\xe9"))

        assert provider.current_branch(repo) == "caf\ufffd"

        other = temp_dir / "other"
        other.mkdir()
        self.git(other, "init", "-q")

        store = IndexStore(cache_path, provider=provider)
        assert store.sync([temp_dir]) == 2
        assert store.get(repo).git_status.current_branch == "caf\ufffd"

    def test_plain_directory_is_not_repository(self, provider, temp_dir):
        plain = temp_dir / "plain"
        plain.mkdir()
        # temp dirs normally live outside any repository
        if provider.is_repository(plain):
            pytest.skip("temporary directory is inside a git repository")
        assert provider.is_repository(plain) is False
