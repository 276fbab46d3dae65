"""Git status provider that shells out to the git binary."""

import subprocess
from pathlib import Path
from typing import List, Tuple

from px.errors import GitError
from px.models.base import from_epoch
from px.models.project import CommitInfo

DEFAULT_GIT_TIMEOUT = 10.0

LOG_FORMAT = "%h|%s|%an|%at"


class GitStatusProvider:
    """Runs one git query per method against a repository root.

    Every query raises GitError when git cannot be spawned, exits non-zero,
    times out, or prints something unparseable. Callers decide which
    failures are tolerable.
    """

    def __init__(self, git: str = "git", timeout: float = DEFAULT_GIT_TIMEOUT):
        self.git = git
        self.timeout = timeout

    def _run(self, repo_path: Path, args: List[str]) -> str:
        cmd = [self.git, *args]
        try:
            result = subprocess.run(
                cmd,
                cwd=repo_path,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise GitError(f"git executable not found: {self.git}") from e
        except subprocess.TimeoutExpired as e:
            raise GitError(
                f"'{' '.join(cmd)}' timed out after {self.timeout}s in {repo_path}"
            ) from e
        except OSError as e:
            raise GitError(f"Failed to run '{' '.join(cmd)}' in {repo_path}: {e}") from e

        if result.returncode != 0:
            raise GitError(
                f"'{' '.join(cmd)}' failed in {repo_path}: {result.stderr.strip()}"
            )
        return result.stdout

    def is_repository(self, repo_path: Path) -> bool:
        """Check whether git recognises repo_path as (inside) a repository."""
        try:
            self._run(repo_path, ["rev-parse", "--git-dir"])
        except GitError:
            return False
        return True

    def current_branch(self, repo_path: Path) -> str:
        """Name of the checked out branch; empty string when HEAD is detached."""
        return self._run(repo_path, ["branch", "--show-current"]).strip()

    def has_uncommitted(self, repo_path: Path) -> bool:
        """Whether there are modified, staged or untracked files."""
        return bool(self._run(repo_path, ["status", "--porcelain"]).strip())

    def ahead_behind(self, repo_path: Path) -> Tuple[int, int]:
        """Commits ahead of and behind the upstream branch."""
        output = self._run(
            repo_path, ["rev-list", "--left-right", "--count", "HEAD...@{u}"]
        )
        parts = output.split()
        if len(parts) != 2:
            raise GitError(f"Unexpected rev-list output: {output!r}")
        try:
            return int(parts[0]), int(parts[1])
        except ValueError as e:
            raise GitError(f"Unexpected rev-list output: {output!r}") from e

    def last_commit(self, repo_path: Path) -> CommitInfo:
        """Hash, subject, author and time of HEAD."""
        output = self._run(repo_path, ["log", "-1", f"--format={LOG_FORMAT}"]).strip()
        # Subjects may contain the separator, so peel fields off both ends
        short_hash, sep1, rest = output.partition("|")
        rest, sep2, timestamp = rest.rpartition("|")
        message, sep3, author = rest.rpartition("|")
        if not (sep1 and sep2 and sep3):
            raise GitError(f"Invalid git log format: {output!r}")

        try:
            seconds = int(timestamp)
        except ValueError as e:
            raise GitError(f"Invalid commit timestamp: {timestamp!r}") from e

        return CommitInfo(
            hash=short_hash,
            message=message,
            author=author,
            timestamp=from_epoch(seconds),
        )
