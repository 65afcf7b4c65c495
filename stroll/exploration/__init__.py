"""Public entry points for road coverage matching and exploration statistics."""

from __future__ import annotations

from ..models import ExplorationStatus, classify_status
from .coverage import (
    CoverageResult,
    PreparedRoute,
    compute_coverage,
    coverage_fraction,
    prepare_route,
)
from .engine import EngineConfig, ExplorationEngine, ExplorationListener
from .grid_index import RouteGridIndex
from .stats import compute_stats, road_length

__all__ = [
    "CoverageResult",
    "EngineConfig",
    "ExplorationEngine",
    "ExplorationListener",
    "ExplorationStatus",
    "PreparedRoute",
    "RouteGridIndex",
    "classify_status",
    "compute_coverage",
    "compute_stats",
    "coverage_fraction",
    "prepare_route",
    "road_length",
]
