"""Point-sampling coverage of road centrelines by a recorded route."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from ..geo import LatLonArray, as_latlon_array, pairwise_distances
from ..models import ExploredRoute
from .grid_index import RouteGridIndex

# Upper bound on distance-matrix cells evaluated in one dense block.
_MAX_MATRIX_ELEMENTS = 1_000_000


@dataclass(slots=True)
class PreparedRoute:
    """Container holding reusable array representations of a route."""

    route: ExploredRoute
    latlon_points: LatLonArray
    index: Optional[RouteGridIndex]

    @property
    def is_empty(self) -> bool:
        return self.latlon_points.shape[0] == 0


@dataclass(slots=True)
class CoverageResult:
    """Per-point coverage of one road by one route."""

    covered: NDArray[np.bool_]

    @property
    def covered_count(self) -> int:
        return int(np.count_nonzero(self.covered))

    @property
    def total_points(self) -> int:
        return int(self.covered.shape[0])

    @property
    def fraction(self) -> float:
        if self.total_points == 0:
            return 0.0
        return min(self.covered_count / self.total_points, 1.0)


def prepare_route(
    route: ExploredRoute,
    *,
    threshold_m: float,
    use_grid: bool = True,
    cell_m: float = 0.0,
    min_grid_points: int = 0,
) -> PreparedRoute:
    """Return array artefacts for ``route``, building a grid index when useful."""

    points = as_latlon_array(route.coordinates)
    index = None
    if use_grid and points.shape[0] >= max(min_grid_points, 1):
        index = RouteGridIndex.build(points, threshold_m=threshold_m, cell_m=cell_m)
    return PreparedRoute(route=route, latlon_points=points, index=index)


def dense_covered_mask(
    road_points: LatLonArray,
    route_points: LatLonArray,
    threshold_m: float,
    *,
    method: Optional[str] = None,
) -> NDArray[np.bool_]:
    """Mark road points that have a route point within ``threshold_m``.

    Compares every road point with every route point, in row blocks so the
    distance matrix stays bounded.
    """

    road_count = road_points.shape[0]
    covered = np.zeros(road_count, dtype=bool)
    if road_count == 0 or route_points.shape[0] == 0:
        return covered
    block = max(1, _MAX_MATRIX_ELEMENTS // route_points.shape[0])
    for start in range(0, road_count, block):
        stop = min(start + block, road_count)
        matrix = pairwise_distances(road_points[start:stop], route_points, method=method)
        covered[start:stop] = np.any(matrix <= threshold_m, axis=1)
    return covered


def indexed_covered_mask(
    road_points: LatLonArray,
    index: RouteGridIndex,
    threshold_m: float,
    *,
    method: Optional[str] = None,
) -> NDArray[np.bool_]:
    """Grid-accelerated equivalent of :func:`dense_covered_mask`."""

    covered = np.zeros(road_points.shape[0], dtype=bool)
    if road_points.shape[0] == 0 or len(index) == 0:
        return covered
    for key, road_indices in index.group_by_cell(road_points).items():
        candidate_indices = index.candidates(key)
        if candidate_indices.size == 0:
            continue
        matrix = pairwise_distances(
            road_points[road_indices],
            index.points[candidate_indices],
            method=method,
        )
        covered[road_indices] = np.any(matrix <= threshold_m, axis=1)
    return covered


def compute_coverage(
    road_points: LatLonArray,
    prepared: PreparedRoute,
    threshold_m: float,
    *,
    method: Optional[str] = None,
) -> CoverageResult:
    """Return which road points ``prepared`` passes within ``threshold_m``.

    An empty road or an empty route yields zero coverage.
    """

    if prepared.is_empty or road_points.shape[0] == 0:
        return CoverageResult(np.zeros(road_points.shape[0], dtype=bool))
    if prepared.index is not None:
        covered = indexed_covered_mask(
            road_points, prepared.index, threshold_m, method=method
        )
    else:
        covered = dense_covered_mask(
            road_points, prepared.latlon_points, threshold_m, method=method
        )
    return CoverageResult(covered)


def coverage_fraction(
    road_points: LatLonArray,
    route_points: LatLonArray,
    threshold_m: float,
    *,
    method: Optional[str] = None,
) -> float:
    """Fraction of road points within ``threshold_m`` of some route point."""

    road = np.asarray(road_points, dtype=float).reshape(-1, 2)
    route = np.asarray(route_points, dtype=float).reshape(-1, 2)
    if road.shape[0] == 0 or route.shape[0] == 0:
        return 0.0
    return CoverageResult(dense_covered_mask(road, route, threshold_m, method=method)).fraction


__all__ = [
    "PreparedRoute",
    "CoverageResult",
    "prepare_route",
    "dense_covered_mask",
    "indexed_covered_mask",
    "compute_coverage",
    "coverage_fraction",
]
