"""Core data models for px."""

from .base import PxBaseModel, utc_now
from .project import CommitInfo, Project, ProjectGitStatus, DETACHED_BRANCH
from .index import ProjectIndex, INDEX_VERSION

__all__ = [
    "PxBaseModel",
    "utc_now",
    "CommitInfo",
    "Project",
    "ProjectGitStatus",
    "DETACHED_BRANCH",
    "ProjectIndex",
    "INDEX_VERSION",
]
