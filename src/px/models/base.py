"""Base models for px."""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict


def utc_now() -> datetime:
    """Current UTC time truncated to whole seconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def to_epoch(dt: Optional[datetime]) -> Optional[int]:
    """Convert a datetime to whole epoch seconds, treating naive values as UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def from_epoch(seconds: int) -> datetime:
    """Convert epoch seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


class PxBaseModel(BaseModel):
    """Base model for everything persisted in the project index."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        extra="forbid",  # Strict validation for cached data
    )
