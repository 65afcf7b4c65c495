"""Benchmark road coverage matching with and without the grid index."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from datetime import datetime, timezone
import statistics
import sys
import time
from pathlib import Path
from typing import Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Late imports rely on the adjusted sys.path above.
from stroll.activity_types import ActivityType  # noqa: E402
from stroll.exploration import EngineConfig, ExplorationEngine  # noqa: E402
from stroll.models import ExploredRoute, Road  # noqa: E402


@dataclass(slots=True)
class BenchmarkSummary:
    """Aggregated statistics for multiple benchmark iterations."""

    road_count: int
    route_points: int
    iterations: int
    mean_dense_ms: float
    mean_grid_ms: float
    worst_grid_ms: float

    @property
    def speedup(self) -> float:
        return self.mean_dense_ms / self.mean_grid_ms if self.mean_grid_ms else 0.0


def _build_catalog(road_count: int, points_per_road: int) -> List[Road]:
    """Generate parallel east-west roads roughly 100 m apart."""

    base_lat = 39.28
    base_lon = -76.62
    step_deg = 1.2e-4
    return [
        Road(
            name=f"Street {idx}",
            coordinates=[
                (base_lat + idx * 9e-4, base_lon + p * step_deg)
                for p in range(points_per_road)
            ],
        )
        for idx in range(road_count)
    ]


def _build_route(point_count: int) -> ExploredRoute:
    """A diagonal walk crossing the synthetic grid of roads."""

    return ExploredRoute(
        coordinates=[
            (39.28 + idx * 2e-5, -76.62 + idx * 1.5e-5) for idx in range(point_count)
        ],
        activity_type=ActivityType.WALK,
        timestamp=datetime.now(timezone.utc),
    )


def _time_add(roads: List[Road], route: ExploredRoute, *, grid: bool) -> float:
    engine = ExplorationEngine(
        roads, config=EngineConfig(grid_index_enabled=grid, grid_min_points=0)
    )
    start = time.perf_counter()
    engine.add_explored_route(route)
    return time.perf_counter() - start


def run_benchmark(
    road_count: int, points_per_road: int, route_points: int, iterations: int
) -> BenchmarkSummary:
    """Time ``add_explored_route`` for both matching strategies."""

    if iterations <= 0:
        raise ValueError("iterations must be positive")
    roads = _build_catalog(road_count, points_per_road)
    route = _build_route(route_points)

    dense = [_time_add(roads, route, grid=False) for _ in range(iterations)]
    grid = [_time_add(roads, route, grid=True) for _ in range(iterations)]
    return BenchmarkSummary(
        road_count=road_count,
        route_points=route_points,
        iterations=iterations,
        mean_dense_ms=statistics.fmean(dense) * 1000.0,
        mean_grid_ms=statistics.fmean(grid) * 1000.0,
        worst_grid_ms=max(grid) * 1000.0,
    )


def _format_summary(summary: BenchmarkSummary) -> Dict[str, float]:
    """Return a JSON-friendly representation of the benchmark summary."""

    return {
        "road_count": summary.road_count,
        "route_points": summary.route_points,
        "iterations": summary.iterations,
        "mean_dense_ms": summary.mean_dense_ms,
        "mean_grid_ms": summary.mean_grid_ms,
        "worst_grid_ms": summary.worst_grid_ms,
        "speedup": summary.speedup,
    }


def _parse_args() -> argparse.Namespace:
    """Parse command-line arguments for the benchmark utility."""

    parser = argparse.ArgumentParser(
        description="Benchmark road coverage matching on a synthetic catalog",
    )
    parser.add_argument("--roads", type=int, default=200, help="Number of roads")
    parser.add_argument(
        "--road-points", type=int, default=100, help="Points per road polyline"
    )
    parser.add_argument(
        "--route-points", type=int, default=5000, help="Points in the recorded route"
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=3,
        help="Number of repetitions for averaging",
    )
    return parser.parse_args()


def main() -> None:
    """Entry point when running the module as a script."""

    args = _parse_args()
    summary = run_benchmark(
        args.roads, args.road_points, args.route_points, args.iterations
    )
    for key, value in _format_summary(summary).items():
        if key in {"road_count", "route_points", "iterations"}:
            print(f"{key}: {value}")
        else:
            print(f"{key}: {value:.3f}")


if __name__ == "__main__":
    main()
