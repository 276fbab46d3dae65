"""Build Project records from repository roots."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from px.core.git import GitStatusProvider
from px.errors import GitError, NotARepositoryError
from px.models import DETACHED_BRANCH, Project, ProjectGitStatus

logger = logging.getLogger(__name__)

README_NAMES = ("README.md", "README.MD", "readme.md", "README", "Readme.md")


def extract_readme_excerpt(repo_path: Path) -> Optional[str]:
    """First meaningful line of the project's README.

    Only the first readable README candidate is inspected. Leading markdown
    heading markers are stripped before a line counts as non-empty.
    """
    for name in README_NAMES:
        readme_path = Path(repo_path) / name
        try:
            content = readme_path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            continue

        for line in content.splitlines():
            text = line.strip().lstrip("#").strip()
            if text:
                return text
        return None

    return None


def probe_git_status(repo_path: Path, provider: GitStatusProvider) -> ProjectGitStatus:
    """Query each piece of git state, degrading per query on failure."""
    try:
        branch = provider.current_branch(repo_path) or DETACHED_BRANCH
    except GitError as e:
        logger.debug(f"Branch lookup failed for {repo_path}: {e}")
        branch = DETACHED_BRANCH

    try:
        has_uncommitted = provider.has_uncommitted(repo_path)
    except GitError as e:
        logger.debug(f"Status lookup failed for {repo_path}: {e}")
        has_uncommitted = False

    try:
        ahead, behind = provider.ahead_behind(repo_path)
    except GitError:
        # No upstream configured is the common case here
        ahead, behind = 0, 0

    try:
        last_commit = provider.last_commit(repo_path)
    except GitError as e:
        logger.debug(f"No last commit for {repo_path}: {e}")
        last_commit = None

    return ProjectGitStatus(
        current_branch=branch,
        has_uncommitted=has_uncommitted,
        ahead=max(ahead, 0),
        behind=max(behind, 0),
        last_commit=last_commit,
    )


def probe_repository(
    repo_path: Path, provider: Optional[GitStatusProvider] = None
) -> Project:
    """Build a fresh Project for a repository root.

    Frecency fields start at zero; IndexStore.sync carries them forward for
    projects it has seen before.

    Args:
        repo_path: Repository root directory
        provider: Git status provider (default: GitStatusProvider())

    Returns:
        New Project

    Raises:
        NotARepositoryError: If the path is not a directory or not a repository
    """
    provider = provider or GitStatusProvider()
    repo_path = Path(repo_path)

    if not repo_path.is_dir():
        raise NotARepositoryError(f"{repo_path} is not a directory")

    if not provider.is_repository(repo_path):
        raise NotARepositoryError(f"{repo_path} is not a git repository")

    git_status = probe_git_status(repo_path, provider)

    if git_status.last_commit is not None:
        last_modified = git_status.last_commit.timestamp
    else:
        mtime = repo_path.stat().st_mtime
        last_modified = datetime.fromtimestamp(int(mtime), tz=timezone.utc)

    return Project(
        path=repo_path,
        name=repo_path.name or "unknown",
        last_modified=last_modified,
        git_status=git_status,
        readme_excerpt=extract_readme_excerpt(repo_path),
    )
