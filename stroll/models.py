"""Dataclasses describing roads, recorded routes and exploration statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional, Sequence, Tuple, Union
from uuid import uuid4

from polyline import decode as polyline_decode

from .activity_types import ActivityType, coerce_activity_type
from .config import FULLY_EXPLORED_THRESHOLD
from .errors import InvalidInputError
from .validation import (
    normalize_name,
    validate_coordinates,
    validate_percentage,
    validate_timestamp,
)


def _new_id() -> str:
    return uuid4().hex


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """Immutable WGS84 coordinate in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        lat, lon = validate_coordinates(self.latitude, self.longitude)
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)

    @classmethod
    def coerce(cls, value: Any) -> "GeoPoint":
        """Return ``value`` as a GeoPoint; accepts GeoPoints and ``(lat, lon)`` pairs."""

        if isinstance(value, GeoPoint):
            return value
        try:
            lat, lon = value
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(f"Expected a (lat, lon) pair, got {value!r}") from exc
        return cls(lat, lon)

    def as_tuple(self) -> Tuple[float, float]:
        return self.latitude, self.longitude


def coerce_points(values: Iterable[Any]) -> Tuple[GeoPoint, ...]:
    """Convert an iterable of GeoPoints or ``(lat, lon)`` pairs into a tuple."""

    if values is None:
        return ()
    return tuple(GeoPoint.coerce(value) for value in values)


def decode_polyline(encoded: str) -> Tuple[GeoPoint, ...]:
    """Decode an encoded polyline string into GeoPoints."""

    if not encoded:
        return ()
    try:
        decoded = polyline_decode(encoded)
    except (ValueError, TypeError, IndexError) as exc:
        raise InvalidInputError("Unable to decode polyline") from exc
    return tuple(GeoPoint(lat, lon) for lat, lon in decoded)


class ExplorationStatus(Enum):
    UNEXPLORED = "unexplored"
    PARTIALLY_EXPLORED = "partially_explored"
    FULLY_EXPLORED = "fully_explored"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").capitalize()


def classify_status(
    percentage: float, fully_explored_threshold: float = FULLY_EXPLORED_THRESHOLD
) -> ExplorationStatus:
    """Map an explored fraction onto its status.

    ``0`` is unexplored, anything below ``fully_explored_threshold`` is
    partially explored, and the rest is fully explored.
    """

    if percentage <= 0.0:
        return ExplorationStatus.UNEXPLORED
    if percentage < fully_explored_threshold:
        return ExplorationStatus.PARTIALLY_EXPLORED
    return ExplorationStatus.FULLY_EXPLORED


@dataclass(slots=True)
class Road:
    """Reference road centreline with its live exploration progress.

    ``exploration_status`` is always derived from ``explored_percentage``.
    """

    name: str
    coordinates: Tuple[GeoPoint, ...]
    explored_percentage: float = 0.0
    id: str = field(default_factory=_new_id)
    exploration_status: ExplorationStatus = field(
        init=False, default=ExplorationStatus.UNEXPLORED
    )

    def __post_init__(self) -> None:
        self.coordinates = coerce_points(self.coordinates)
        self.explored_percentage = validate_percentage(self.explored_percentage)
        self.exploration_status = classify_status(self.explored_percentage)

    @classmethod
    def from_polyline(cls, name: str, encoded: str, **kwargs: Any) -> "Road":
        return cls(name=name, coordinates=decode_polyline(encoded), **kwargs)


@dataclass(frozen=True, slots=True)
class RoadView:
    """Read-only snapshot of a road handed to consumers of the engine."""

    id: str
    name: str
    coordinates: Tuple[GeoPoint, ...]
    exploration_status: ExplorationStatus
    explored_percentage: float
    length_m: float


@dataclass(frozen=True, slots=True)
class ExploredRoute:
    """A completed tracked activity; immutable once created."""

    coordinates: Tuple[GeoPoint, ...]
    activity_type: ActivityType
    timestamp: datetime
    name: Optional[str] = None
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        object.__setattr__(self, "coordinates", coerce_points(self.coordinates))
        object.__setattr__(
            self, "activity_type", coerce_activity_type(self.activity_type)
        )
        object.__setattr__(self, "timestamp", validate_timestamp(self.timestamp))
        object.__setattr__(self, "name", normalize_name(self.name))

    @classmethod
    def from_polyline(
        cls,
        encoded: str,
        activity_type: ActivityType | str,
        timestamp: datetime,
        name: Optional[str] = None,
    ) -> "ExploredRoute":
        return cls(
            coordinates=decode_polyline(encoded),
            activity_type=coerce_activity_type(activity_type),
            timestamp=timestamp,
            name=name,
        )

    @property
    def display_name(self) -> str:
        return self.name or f"{self.activity_type.value} Activity"


@dataclass(frozen=True, slots=True)
class ExplorationStats:
    """Snapshot of city-wide exploration progress; distances in metres."""

    total_roads: int = 0
    explored_roads: int = 0
    total_distance: float = 0.0
    explored_distance: float = 0.0

    @property
    def exploration_percentage(self) -> float:
        if self.total_roads <= 0:
            return 0.0
        return self.explored_roads / self.total_roads * 100

    @property
    def explored_distance_km(self) -> float:
        return self.explored_distance / 1000.0


@dataclass(frozen=True, slots=True)
class RoadChange:
    """Before/after values for a road whose coverage rose."""

    road_id: str
    road_name: str
    previous_percentage: float
    new_percentage: float
    previous_status: ExplorationStatus
    new_status: ExplorationStatus

    @property
    def status_changed(self) -> bool:
        return self.previous_status is not self.new_status


@dataclass(frozen=True, slots=True)
class ExplorationUpdate:
    """Outcome of adding one route to the engine."""

    route: ExploredRoute
    changes: Tuple[RoadChange, ...]
    stats: ExplorationStats

    @property
    def changed(self) -> bool:
        return bool(self.changes)


RoadInput = Union[Road, Tuple[str, Sequence[Any]]]

__all__ = [
    "GeoPoint",
    "coerce_points",
    "decode_polyline",
    "ExplorationStatus",
    "classify_status",
    "Road",
    "RoadView",
    "ExploredRoute",
    "ExplorationStats",
    "RoadChange",
    "ExplorationUpdate",
    "RoadInput",
]
