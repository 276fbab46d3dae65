"""Project model for px."""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional
from pydantic import Field, field_serializer

from .base import PxBaseModel, to_epoch

DETACHED_BRANCH = "(detached)"


class CommitInfo(PxBaseModel):
    """Information about a git commit."""

    hash: str = Field(description="Short commit hash")
    message: str = Field(description="Commit subject line")
    author: str = Field(description="Commit author name")
    timestamp: datetime = Field(description="Commit time")

    @field_serializer("timestamp")
    def serialize_timestamp(self, dt: datetime, _info: Any) -> int:
        """Serialize datetime to epoch seconds."""
        return to_epoch(dt)


class ProjectGitStatus(PxBaseModel):
    """Snapshot of a repository's git state at probe time."""

    current_branch: str = Field(
        default=DETACHED_BRANCH, description="Checked out branch name"
    )
    has_uncommitted: bool = Field(
        default=False, description="Modified, staged or untracked files present"
    )
    ahead: int = Field(default=0, ge=0, description="Commits ahead of upstream")
    behind: int = Field(default=0, ge=0, description="Commits behind upstream")
    last_commit: Optional[CommitInfo] = Field(
        default=None, description="Most recent commit"
    )

    @property
    def summary(self) -> str:
        """One-word status used in listings."""
        if self.has_uncommitted:
            return "changes"
        if self.ahead > 0:
            return "ahead"
        if self.behind > 0:
            return "behind"
        return "clean"


class Project(PxBaseModel):
    """An indexed repository and its cached metadata."""

    path: Path = Field(description="Absolute path to the repository root")
    name: str = Field(description="Display name (final path component)")
    last_modified: datetime = Field(
        description="Last commit time, or directory mtime when there are no commits"
    )
    git_status: ProjectGitStatus = Field(default_factory=ProjectGitStatus)
    frecency_score: float = Field(default=0.0, ge=0.0, description="Ranking score")
    last_accessed: Optional[datetime] = Field(
        default=None, description="Last time the project was opened"
    )
    access_count: int = Field(default=0, ge=0, description="Times opened")
    readme_excerpt: Optional[str] = Field(
        default=None, description="First meaningful README line"
    )

    @field_serializer("last_modified", "last_accessed")
    def serialize_datetime(self, dt: Optional[datetime], _info: Any) -> Optional[int]:
        """Serialize datetime to epoch seconds."""
        return to_epoch(dt)

    @property
    def key(self) -> str:
        """Index map key for this project."""
        return str(self.path)

    def refresh_frecency(self, now: Optional[datetime] = None) -> float:
        """Recompute frecency_score from the access fields."""
        from px.core.frecency import calculate_frecency

        self.frecency_score = calculate_frecency(
            self.access_count, self.last_accessed, now=now
        )
        return self.frecency_score

    def carry_forward(self, previous: "Project") -> None:
        """Copy access history from the previous index generation."""
        self.access_count = previous.access_count
        self.last_accessed = previous.last_accessed
        self.frecency_score = previous.frecency_score
