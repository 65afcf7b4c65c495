"""Derived views over the route history and road list.

Pure transformations for presentation code: nothing here changes engine
state. Tables are returned as pandas DataFrames with display column names.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

import pandas as pd

from .activity_types import ActivityType
from .config import RECENT_ROUTES_LIMIT
from .geo import polyline_length
from .models import ExploredRoute, RoadView

BREAKDOWN_COLUMNS = ["Activity", "Count", "Distance (km)"]
ROAD_COLUMNS = ["Road", "Status", "Explored (%)", "Length (km)"]


def route_distance(route: ExploredRoute, *, method: Optional[str] = None) -> float:
    """Length in metres of the recorded track."""

    return polyline_length(route.coordinates, method=method)


def recent_routes(
    routes: Iterable[ExploredRoute], limit: int = RECENT_ROUTES_LIMIT
) -> List[ExploredRoute]:
    """Return up to ``limit`` routes, newest first.

    Routes with equal timestamps keep their history order.
    """

    if limit <= 0:
        return []
    ordered = sorted(
        enumerate(routes), key=lambda item: (item[1].timestamp, -item[0]), reverse=True
    )
    return [route for _, route in ordered[:limit]]


def activity_breakdown(
    routes: Sequence[ExploredRoute], *, method: Optional[str] = None
) -> pd.DataFrame:
    """Count and total distance per activity type present in ``routes``."""

    totals: dict[ActivityType, tuple[int, float]] = {}
    for route in routes:
        count, distance = totals.get(route.activity_type, (0, 0.0))
        totals[route.activity_type] = (
            count + 1,
            distance + route_distance(route, method=method),
        )
    rows = [
        {
            "Activity": activity.value,
            "Count": totals[activity][0],
            "Distance (km)": round(totals[activity][1] / 1000.0, 2),
        }
        for activity in ActivityType
        if activity in totals
    ]
    return pd.DataFrame(rows, columns=BREAKDOWN_COLUMNS)


def road_table(roads: Iterable[RoadView]) -> pd.DataFrame:
    """Road progress table sorted by explored share (descending) then name."""

    rows = [
        {
            "Road": road.name,
            "Status": road.exploration_status.label,
            "Explored (%)": round(road.explored_percentage * 100, 1),
            "Length (km)": round(road.length_m / 1000.0, 3),
        }
        for road in roads
    ]
    df = pd.DataFrame(rows, columns=ROAD_COLUMNS)
    if df.empty:
        return df
    return df.sort_values(
        by=["Explored (%)", "Road"], ascending=[False, True], kind="mergesort"
    ).reset_index(drop=True)


__all__ = [
    "BREAKDOWN_COLUMNS",
    "ROAD_COLUMNS",
    "route_distance",
    "recent_routes",
    "activity_breakdown",
    "road_table",
]
