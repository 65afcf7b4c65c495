"""Surface distance helpers for WGS84 coordinates.

Two formulas are available: the haversine great-circle distance on a sphere of
radius :data:`EARTH_RADIUS_M` (default) and the geodesic distance on the WGS84
ellipsoid via :class:`pyproj.Geod`. Both are symmetric, non-negative and zero
for identical points.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Protocol, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray
from pyproj import Geod

from .config import DISTANCE_METHOD, DISTANCE_METHODS

EARTH_RADIUS_M = 6_371_000.0

LatLon = Tuple[float, float]
LatLonArray = NDArray[np.float64]

_WGS84 = Geod(ellps="WGS84")


class _HasLatLon(Protocol):
    latitude: float
    longitude: float


PointLike = Union[_HasLatLon, Sequence[float]]


def _resolve_method(method: Optional[str]) -> str:
    resolved = (method or DISTANCE_METHOD).lower()
    if resolved not in DISTANCE_METHODS:
        raise ValueError(f"Unknown distance method {method!r}")
    return resolved


def _latlon(point: PointLike) -> LatLon:
    lat = getattr(point, "latitude", None)
    if lat is not None:
        return float(lat), float(point.longitude)  # type: ignore[union-attr]
    lat_v, lon_v = point  # type: ignore[misc]
    return float(lat_v), float(lon_v)


def as_latlon_array(points: Iterable[PointLike]) -> LatLonArray:
    """Convert points into an ``(n, 2)`` float array of ``[lat, lon]`` rows."""

    rows = [_latlon(point) for point in points]
    if not rows:
        return np.empty((0, 2), dtype=float)
    return np.asarray(rows, dtype=float)


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in metres."""

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    # Rounding can push ``a`` a hair past 1 for antipodal points.
    a = min(max(a, 0.0), 1.0)
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def geodesic_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance between two points on the WGS84 ellipsoid in metres."""

    _az12, _az21, dist = _WGS84.inv(lon1, lat1, lon2, lat2)
    return abs(float(dist))


def distance(a: PointLike, b: PointLike, *, method: Optional[str] = None) -> float:
    """Return the surface distance in metres between ``a`` and ``b``.

    Args:
        a: First point, a ``GeoPoint`` or ``(lat, lon)`` pair.
        b: Second point.
        method: ``"haversine"`` or ``"geodesic"``; defaults to
            :data:`stroll.config.DISTANCE_METHOD`.
    """

    lat1, lon1 = _latlon(a)
    lat2, lon2 = _latlon(b)
    if (lat1, lon1) == (lat2, lon2):
        return 0.0
    if _resolve_method(method) == "geodesic":
        return geodesic_distance(lat1, lon1, lat2, lon2)
    return haversine_distance(lat1, lon1, lat2, lon2)


def _haversine_broadcast(
    lat1: NDArray[np.float64],
    lon1: NDArray[np.float64],
    lat2: NDArray[np.float64],
    lon2: NDArray[np.float64],
) -> NDArray[np.float64]:
    rlat1, rlat2 = np.radians(lat1), np.radians(lat2)
    d_lat = rlat2 - rlat1
    d_lon = np.radians(lon2 - lon1)
    a = np.sin(d_lat / 2) ** 2 + np.cos(rlat1) * np.cos(rlat2) * np.sin(d_lon / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    return EARTH_RADIUS_M * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def _geodesic_broadcast(
    lat1: NDArray[np.float64],
    lon1: NDArray[np.float64],
    lat2: NDArray[np.float64],
    lon2: NDArray[np.float64],
) -> NDArray[np.float64]:
    lat1, lon1, lat2, lon2 = np.broadcast_arrays(lat1, lon1, lat2, lon2)
    shape = lat1.shape
    if lat1.size == 0:
        return np.zeros(shape, dtype=float)
    _az12, _az21, dist = _WGS84.inv(
        lon1.ravel(), lat1.ravel(), lon2.ravel(), lat2.ravel()
    )
    return np.abs(np.asarray(dist, dtype=float)).reshape(shape)


def pairwise_distances(
    points_a: LatLonArray,
    points_b: LatLonArray,
    *,
    method: Optional[str] = None,
) -> NDArray[np.float64]:
    """Return the ``(len(a), len(b))`` matrix of distances in metres.

    Both inputs are ``(n, 2)`` arrays of ``[lat, lon]`` rows as produced by
    :func:`as_latlon_array`.
    """

    a = np.asarray(points_a, dtype=float).reshape(-1, 2)
    b = np.asarray(points_b, dtype=float).reshape(-1, 2)
    lat1, lon1 = a[:, 0:1], a[:, 1:2]
    lat2, lon2 = b[:, 0][np.newaxis, :], b[:, 1][np.newaxis, :]
    if _resolve_method(method) == "geodesic":
        matrix = _geodesic_broadcast(lat1, lon1, lat2, lon2)
    else:
        matrix = _haversine_broadcast(lat1, lon1, lat2, lon2)
    # Identical coordinates are exactly zero regardless of formula round-off.
    same = (lat1 == lat2) & (lon1 == lon2)
    return np.where(same, 0.0, matrix)


def consecutive_distances(
    points: LatLonArray, *, method: Optional[str] = None
) -> NDArray[np.float64]:
    """Return distances between each pair of consecutive rows."""

    array = np.asarray(points, dtype=float).reshape(-1, 2)
    if array.shape[0] < 2:
        return np.zeros(0, dtype=float)
    start, end = array[:-1], array[1:]
    if _resolve_method(method) == "geodesic":
        steps = _geodesic_broadcast(start[:, 0], start[:, 1], end[:, 0], end[:, 1])
    else:
        steps = _haversine_broadcast(start[:, 0], start[:, 1], end[:, 0], end[:, 1])
    same = np.all(start == end, axis=1)
    return np.where(same, 0.0, steps)


def polyline_length(
    points: Iterable[PointLike], *, method: Optional[str] = None
) -> float:
    """Sum of consecutive-point distances; ``0.0`` for fewer than two points."""

    array = as_latlon_array(points)
    return float(np.sum(consecutive_distances(array, method=method)))


__all__ = [
    "EARTH_RADIUS_M",
    "LatLon",
    "LatLonArray",
    "as_latlon_array",
    "haversine_distance",
    "geodesic_distance",
    "distance",
    "pairwise_distances",
    "consecutive_distances",
    "polyline_length",
]
