"""Uniform lat/lon grid used to prune route points before exact distance checks.

The grid only narrows the candidate set. Every candidate is still tested with
the exact surface distance, so a grid lookup returns the same matches as a
dense comparison against every route point.
"""

from __future__ import annotations

from collections import defaultdict
import math
from typing import Dict, Iterator, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from ..geo import LatLonArray

CellKey = Tuple[int, int]

# Lower bound on metres per degree of latitude for both the sphere and the
# WGS84 ellipsoid; using a lower bound keeps the neighbourhood conservative.
_MIN_METRES_PER_DEGREE = 110_000.0

# Above this latitude longitude cells degenerate; callers fall back to brute force.
_MAX_GRID_LATITUDE = 85.0


class RouteGridIndex:
    """Bucket route points into fixed-size lat/lon cells."""

    def __init__(
        self,
        points: LatLonArray,
        cell_lat_deg: float,
        cell_lon_deg: float,
        ring_lat: int,
        ring_lon: int,
    ) -> None:
        self.points = points
        self.cell_lat_deg = cell_lat_deg
        self.cell_lon_deg = cell_lon_deg
        self.ring_lat = ring_lat
        self.ring_lon = ring_lon
        buckets: Dict[CellKey, list[int]] = defaultdict(list)
        for idx, key in enumerate(self._keys(points)):
            buckets[key].append(idx)
        self._cells: Dict[CellKey, NDArray[np.intp]] = {
            key: np.asarray(indices, dtype=np.intp) for key, indices in buckets.items()
        }

    @classmethod
    def build(
        cls,
        points: LatLonArray,
        *,
        threshold_m: float,
        cell_m: float,
    ) -> Optional["RouteGridIndex"]:
        """Return an index for ``points`` or ``None`` when a grid is unsuitable.

        Polar routes and routes spanning or within the threshold of the
        antimeridian are not indexed.
        """

        if points.shape[0] == 0 or threshold_m <= 0:
            return None
        cell_m = cell_m if cell_m > 0 else threshold_m
        cell_lat_deg = cell_m / _MIN_METRES_PER_DEGREE
        margin_deg = threshold_m / _MIN_METRES_PER_DEGREE
        max_abs_lat = float(np.max(np.abs(points[:, 0]))) + margin_deg
        if max_abs_lat >= _MAX_GRID_LATITUDE:
            return None
        cos_lat = math.cos(math.radians(max_abs_lat))
        margin_deg_lon = margin_deg / cos_lat
        lons = points[:, 1]
        if float(np.max(lons) - np.min(lons)) > 180.0:
            return None
        # Column keys do not wrap at +/-180, so any neighbourhood crossing it is unindexable.
        if (
            float(np.min(lons)) - margin_deg_lon < -180.0
            or float(np.max(lons)) + margin_deg_lon > 180.0
        ):
            return None
        cell_lon_deg = cell_lat_deg / cos_lat
        ring_lat = max(1, math.ceil(threshold_m / cell_m))
        # One extra column absorbs the small-angle error of the cosine bound.
        ring_lon = ring_lat + 1
        return cls(points, cell_lat_deg, cell_lon_deg, ring_lat, ring_lon)

    def _keys(self, points: LatLonArray) -> Iterator[CellKey]:
        rows = np.floor(points[:, 0] / self.cell_lat_deg).astype(np.int64)
        cols = np.floor(points[:, 1] / self.cell_lon_deg).astype(np.int64)
        for row, col in zip(rows.tolist(), cols.tolist()):
            yield row, col

    def group_by_cell(self, points: LatLonArray) -> Dict[CellKey, NDArray[np.intp]]:
        """Return indices of ``points`` grouped by the cell they fall in."""

        groups: Dict[CellKey, list[int]] = defaultdict(list)
        for idx, key in enumerate(self._keys(points)):
            groups[key].append(idx)
        return {key: np.asarray(indices, dtype=np.intp) for key, indices in groups.items()}

    def candidates(self, key: CellKey) -> NDArray[np.intp]:
        """Return indices of route points in the neighbourhood of ``key``."""

        row, col = key
        found = [
            self._cells[(r, c)]
            for r in range(row - self.ring_lat, row + self.ring_lat + 1)
            for c in range(col - self.ring_lon, col + self.ring_lon + 1)
            if (r, c) in self._cells
        ]
        if not found:
            return np.empty(0, dtype=np.intp)
        if len(found) == 1:
            return found[0]
        return np.concatenate(found)

    def __len__(self) -> int:
        return int(self.points.shape[0])

    @property
    def cell_count(self) -> int:
        return len(self._cells)


__all__ = ["RouteGridIndex", "CellKey"]
