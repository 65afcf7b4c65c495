"""Stroll road exploration engine."""

from .activity_types import ActivityType
from .achievements import Achievement, derive_achievements
from .errors import InvalidInputError, StrollError, UnknownRoadError
from .exploration import EngineConfig, ExplorationEngine
from .geo import distance, polyline_length
from .models import (
    ExplorationStats,
    ExplorationStatus,
    ExplorationUpdate,
    ExploredRoute,
    GeoPoint,
    Road,
    RoadChange,
    RoadView,
)

__all__ = [
    "Achievement",
    "ActivityType",
    "EngineConfig",
    "ExplorationEngine",
    "ExplorationStats",
    "ExplorationStatus",
    "ExplorationUpdate",
    "ExploredRoute",
    "GeoPoint",
    "InvalidInputError",
    "Road",
    "RoadChange",
    "RoadView",
    "StrollError",
    "UnknownRoadError",
    "derive_achievements",
    "distance",
    "polyline_length",
]
