"""Frecency calculation for project ranking.

Combines frequency (how often a project was opened) and recency (how long ago
it was last opened) into a single score:

- frequency component: ``ln(access_count + 1) * 10``
- recency component: coarse day buckets, 100 points for the last few days
  down to 10 points for anything older than a quarter
"""

import math
from datetime import datetime, timezone
from typing import Iterable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from px.models import Project

FREQUENCY_WEIGHT = 10.0

# (last day inclusive, points); anything beyond the last bucket scores OLD_POINTS
RECENCY_BUCKETS = (
    (4, 100.0),
    (14, 70.0),
    (31, 50.0),
    (90, 30.0),
)
OLD_POINTS = 10.0


def recency_weight(days: int) -> float:
    """Map an age in whole days to recency points.

    Negative ages (clock skew) count as zero days.
    """
    days = max(days, 0)
    for last_day, points in RECENCY_BUCKETS:
        if days <= last_day:
            return points
    return OLD_POINTS


def calculate_frecency(
    access_count: int,
    last_accessed: Optional[datetime],
    now: Optional[datetime] = None,
) -> float:
    """Calculate the frecency score for a project.

    Args:
        access_count: Number of times the project has been opened
        last_accessed: When it was last opened, None if never
        now: Reference time (default: current UTC time)

    Returns:
        Non-negative score, higher is more relevant
    """
    if access_count < 0:
        raise ValueError(f"access_count must be non-negative, got {access_count}")

    frequency = math.log(access_count + 1) * FREQUENCY_WEIGHT

    if last_accessed is None:
        return frequency

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    if last_accessed.tzinfo is None:
        last_accessed = last_accessed.replace(tzinfo=timezone.utc)

    age_days = (now - last_accessed).days
    return frequency + recency_weight(age_days)


def sort_by_frecency(projects: Iterable["Project"]) -> List["Project"]:
    """Order projects by frecency, highest first; ties keep input order."""
    return sorted(projects, key=lambda p: p.frecency_score, reverse=True)
