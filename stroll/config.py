"""Central configuration for the Stroll exploration engine.

All values are constants imported by the rest of the package. Each one can be
overridden through an environment variable, and a local ``.env`` file is
loaded first so overrides can live beside the project. Unparseable overrides
fall back to the default.
"""

from __future__ import annotations

import os
from typing import Callable, TypeVar

from dotenv import find_dotenv, load_dotenv

T = TypeVar("T")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_value(key: str, default: T, parse: Callable[[str], T]) -> T:
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        return parse(raw.strip())
    except ValueError:
        return default


def _parse_bool(raw: str) -> bool:
    normalized = raw.lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _env_float(key: str, default: float) -> float:
    return _env_value(key, default, float)


def _env_int(key: str, default: int) -> int:
    return _env_value(key, default, int)


def _env_bool(key: str, default: bool) -> bool:
    return _env_value(key, default, _parse_bool)


def _env_choice(key: str, default: str, choices: set[str]) -> str:
    def _parse(raw: str) -> str:
        normalized = raw.lower()
        if normalized not in choices:
            raise ValueError(f"{raw!r} is not one of {sorted(choices)}")
        return normalized

    return _env_value(key, default, _parse)


# Search the working directory and its parents for a .env file.
load_dotenv(find_dotenv(usecwd=True))


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------
# Maximum distance (metres) between a road point and a route point for the
# route to count as having passed that road point.
EXPLORATION_THRESHOLD_M = _env_float("STROLL_EXPLORATION_THRESHOLD_M", 20.0)

# Explored fraction at or above which a road is reported as fully explored.
FULLY_EXPLORED_THRESHOLD = _env_float("STROLL_FULLY_EXPLORED_THRESHOLD", 0.8)

# Surface distance formula: "haversine" (sphere) or "geodesic" (WGS84 ellipsoid).
DISTANCE_METHODS = {"haversine", "geodesic"}
DISTANCE_METHOD = _env_choice("STROLL_DISTANCE_METHOD", "haversine", DISTANCE_METHODS)


# ---------------------------------------------------------------------------
# Performance tuning
# ---------------------------------------------------------------------------
# Bucket route points into a lat/lon grid before the exact distance check.
GRID_INDEX_ENABLED = _env_bool("STROLL_GRID_INDEX_ENABLED", True)

# Grid cell edge (metres). Zero or negative means "use the exploration threshold".
GRID_CELL_M = _env_float("STROLL_GRID_CELL_M", 0.0)

# Routes with fewer points than this are matched with a dense distance matrix.
GRID_MIN_POINTS = _env_int("STROLL_GRID_MIN_POINTS", 64)


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------
# Number of routes returned by the "recent exploration" view.
RECENT_ROUTES_LIMIT = _env_int("STROLL_RECENT_ROUTES_LIMIT", 5)
