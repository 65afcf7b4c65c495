"""Generated sample catalog used by the demo CLI and tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from .activity_types import ActivityType
from .models import ExploredRoute, GeoPoint, Road


def interpolate_points(
    start: GeoPoint, end: GeoPoint, steps: int = 10
) -> Tuple[GeoPoint, ...]:
    """Return ``steps + 1`` evenly spaced points from ``start`` to ``end``."""

    if steps < 1:
        raise ValueError("steps must be at least 1")
    return tuple(
        GeoPoint(
            start.latitude + (end.latitude - start.latitude) * (i / steps),
            start.longitude + (end.longitude - start.longitude) * (i / steps),
        )
        for i in range(steps + 1)
    )


# Baltimore sample roads: (name, start, end).
SAMPLE_ROADS = (
    ("Main Street", GeoPoint(39.2904, -76.6122), GeoPoint(39.2954, -76.6172)),
    ("Baltimore Street", GeoPoint(39.2854, -76.6122), GeoPoint(39.2854, -76.6222)),
    ("Charles Street", GeoPoint(39.2904, -76.6122), GeoPoint(39.2904, -76.6022)),
)


def sample_catalog() -> List[Road]:
    """Return the sample roads, all unexplored."""

    return [
        Road(name=name, coordinates=interpolate_points(start, end))
        for name, start, end in SAMPLE_ROADS
    ]


def sample_routes(now: Optional[datetime] = None) -> List[ExploredRoute]:
    """Return a morning run along Baltimore Street one hour before ``now``."""

    now = now or datetime.now(timezone.utc)
    _, start, end = SAMPLE_ROADS[1]
    return [
        ExploredRoute(
            coordinates=interpolate_points(start, end),
            activity_type=ActivityType.RUN,
            timestamp=now - timedelta(hours=1),
            name="Morning Run",
        )
    ]


__all__ = ["interpolate_points", "SAMPLE_ROADS", "sample_catalog", "sample_routes"]
