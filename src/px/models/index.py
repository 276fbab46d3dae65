"""Project index model for px."""

import json
from datetime import datetime
from typing import Any, Dict
from pydantic import Field, ValidationError, field_serializer

from px.errors import IndexFormatError
from .base import PxBaseModel, to_epoch, utc_now
from .project import Project

INDEX_VERSION = 1


class ProjectIndex(PxBaseModel):
    """All discovered projects, keyed by absolute path."""

    projects: Dict[str, Project] = Field(default_factory=dict)
    last_sync: datetime = Field(default_factory=utc_now)
    version: int = Field(default=INDEX_VERSION)

    @field_serializer("last_sync")
    def serialize_last_sync(self, dt: datetime, _info: Any) -> int:
        """Serialize datetime to epoch seconds."""
        return to_epoch(dt)

    def to_json(self) -> str:
        """Serialize to pretty JSON, omitting absent optional fields."""
        return json.dumps(
            self.model_dump(mode="json", exclude_none=True), indent=2
        )

    @classmethod
    def from_json(cls, data: str) -> "ProjectIndex":
        """Parse an index from JSON text.

        Raises:
            IndexFormatError: If the text is not valid JSON, does not match the
                schema, or has an unsupported version
        """
        try:
            raw = json.loads(data)
        except json.JSONDecodeError as e:
            raise IndexFormatError(f"Invalid cache JSON: {e}") from e

        if not isinstance(raw, dict):
            raise IndexFormatError("Invalid cache JSON: expected an object")

        version = raw.get("version")
        if version != INDEX_VERSION:
            raise IndexFormatError(f"Unsupported index version: {version!r}")

        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise IndexFormatError(f"Invalid cache schema: {e}") from e
