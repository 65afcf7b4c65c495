"""Aggregate exploration statistics.

Pure transformation: given the current road set (and the polyline length of
each road) it produces an :class:`~stroll.models.ExplorationStats` snapshot.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from ..geo import polyline_length
from ..models import ExplorationStats, ExplorationStatus, Road


def road_length(road: Road, *, method: Optional[str] = None) -> float:
    return polyline_length(road.coordinates, method=method)


def compute_stats(
    roads: Iterable[Road],
    lengths: Optional[Mapping[str, float]] = None,
    *,
    method: Optional[str] = None,
) -> ExplorationStats:
    """Return totals for ``roads``.

    ``lengths`` maps road id to precomputed polyline length; missing entries
    are measured on the fly.
    """

    total_roads = 0
    explored_roads = 0
    total_distance = 0.0
    explored_distance = 0.0
    for road in roads:
        total_roads += 1
        if road.exploration_status is not ExplorationStatus.UNEXPLORED:
            explored_roads += 1
        length = None if lengths is None else lengths.get(road.id)
        if length is None:
            length = road_length(road, method=method)
        total_distance += length
        explored_distance += length * road.explored_percentage
    return ExplorationStats(
        total_roads=total_roads,
        explored_roads=explored_roads,
        total_distance=total_distance,
        explored_distance=explored_distance,
    )


__all__ = ["road_length", "compute_stats"]
