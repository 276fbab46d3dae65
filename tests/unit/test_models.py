"""Tests for px data models."""

import json
import math
from datetime import datetime, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from px.errors import IndexFormatError
from px.models import (
    CommitInfo,
    Project,
    ProjectGitStatus,
    ProjectIndex,
    DETACHED_BRANCH,
)
from conftest import make_project

COMMIT_TIME = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


def build_index() -> ProjectIndex:
    index = ProjectIndex()
    with_history = make_project(
        "api",
        path="/work/api",
        access_count=5,
        last_accessed=datetime(2024, 5, 1, tzinfo=timezone.utc),
        readme_excerpt="REST API",
        git_status=ProjectGitStatus(
            current_branch="feature",
            has_uncommitted=True,
            ahead=2,
            behind=1,
            last_commit=CommitInfo(
                hash="abc1234",
                message="Add endpoint",
                author="Dev",
                timestamp=COMMIT_TIME,
            ),
        ),
    )
    with_history.refresh_frecency(now=datetime(2024, 5, 3, tzinfo=timezone.utc))
    fresh = make_project("web", path="/work/web")
    index.projects[with_history.key] = with_history
    index.projects[fresh.key] = fresh
    return index


class TestModels:
    """Test data models."""

    def test_project_defaults(self):
        project = Project(
            path="/tmp/demo",
            name="demo",
            last_modified=COMMIT_TIME,
        )

        assert project.path == Path("/tmp/demo")
        assert project.key == "/tmp/demo"
        assert project.frecency_score == 0.0
        assert project.access_count == 0
        assert project.last_accessed is None
        assert project.readme_excerpt is None
        assert project.git_status.current_branch == DETACHED_BRANCH
        assert project.git_status.ahead == 0
        assert project.git_status.last_commit is None

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            make_project("bad", access_count=-1)
        with pytest.raises(ValidationError):
            ProjectGitStatus(ahead=-1)
        with pytest.raises(ValidationError):
            make_project("bad", frecency=-0.5)

    def test_refresh_frecency(self):
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)
        project = make_project("demo", access_count=1, last_accessed=now)

        score = project.refresh_frecency(now=now)

        assert score == project.frecency_score
        assert score == pytest.approx(math.log(2) * 10.0 + 100.0)

    def test_carry_forward_copies_access_fields_only(self):
        old = make_project(
            "demo",
            frecency=42.0,
            access_count=7,
            last_accessed=COMMIT_TIME,
            git_status=ProjectGitStatus(current_branch="old"),
        )
        new = make_project("demo", git_status=ProjectGitStatus(current_branch="new"))

        new.carry_forward(old)

        assert new.access_count == 7
        assert new.last_accessed == COMMIT_TIME
        assert new.frecency_score == 42.0
        assert new.git_status.current_branch == "new"

    @pytest.mark.parametrize(
        "status,expected",
        [
            (ProjectGitStatus(has_uncommitted=True, ahead=1), "changes"),
            (ProjectGitStatus(ahead=1, behind=1), "ahead"),
            (ProjectGitStatus(behind=3), "behind"),
            (ProjectGitStatus(), "clean"),
        ],
    )
    def test_status_summary(self, status, expected):
        assert status.summary == expected


class TestIndexSerialization:
    """Test the persisted JSON shape."""

    def test_new_index(self):
        index = ProjectIndex()
        assert index.version == 1
        assert index.projects == {}
        assert index.last_sync.tzinfo is not None

    def test_timestamps_are_epoch_seconds(self):
        data = json.loads(build_index().to_json())
        api = data["projects"]["/work/api"]

        assert isinstance(data["last_sync"], int)
        assert api["last_modified"] == int(datetime(2024, 1, 1, tzinfo=timezone.utc).timestamp())
        assert api["last_accessed"] == int(datetime(2024, 5, 1, tzinfo=timezone.utc).timestamp())
        assert api["git_status"]["last_commit"]["timestamp"] == int(COMMIT_TIME.timestamp())
        assert api["path"] == "/work/api"

    def test_absent_optionals_are_omitted(self):
        data = json.loads(build_index().to_json())
        web = data["projects"]["/work/web"]

        assert "last_accessed" not in web
        assert "readme_excerpt" not in web
        assert "last_commit" not in web["git_status"]
        assert None not in web.values()

    def test_round_trip_preserves_keys_and_access_fields(self):
        original = build_index()

        loaded = ProjectIndex.from_json(original.to_json())

        assert loaded.projects.keys() == original.projects.keys()
        for key, project in original.projects.items():
            other = loaded.projects[key]
            assert other.access_count == project.access_count
            assert other.last_accessed == project.last_accessed
            assert other.frecency_score == project.frecency_score
            assert other.git_status == project.git_status
        assert loaded.version == 1

    def test_invalid_json_raises_format_error(self):
        with pytest.raises(IndexFormatError):
            ProjectIndex.from_json("{not json")

    def test_non_object_raises_format_error(self):
        with pytest.raises(IndexFormatError):
            ProjectIndex.from_json("[]")

    def test_unsupported_version_raises_format_error(self):
        data = json.loads(build_index().to_json())
        data["version"] = 2
        with pytest.raises(IndexFormatError, match="version"):
            ProjectIndex.from_json(json.dumps(data))

    def test_schema_violation_raises_format_error(self):
        data = json.loads(build_index().to_json())
        data["projects"]["/work/api"]["access_count"] = -3
        with pytest.raises(IndexFormatError):
            ProjectIndex.from_json(json.dumps(data))
