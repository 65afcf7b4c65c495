"""Utilities for classifying recorded activity types."""

from __future__ import annotations

from enum import Enum
from typing import Any

from .errors import InvalidInputError

__all__ = ["ActivityType", "normalize_activity_type", "coerce_activity_type"]


class ActivityType(str, Enum):
    """Closed set of activity tags a route can carry."""

    WALK = "Walk"
    RUN = "Run"
    BIKE = "Bike"

    @property
    def icon(self) -> str:
        return _ICONS[self]


_ICONS = {
    ActivityType.WALK: "figure.walk",
    ActivityType.RUN: "figure.run",
    ActivityType.BIKE: "bicycle",
}

# Provider spellings folded onto the closed set.
_ALIASES = {
    "walk": ActivityType.WALK,
    "hike": ActivityType.WALK,
    "run": ActivityType.RUN,
    "trailrun": ActivityType.RUN,
    "bike": ActivityType.BIKE,
    "ride": ActivityType.BIKE,
    "cycle": ActivityType.BIKE,
}


def normalize_activity_type(value: Any) -> str | None:
    """Return a lowercase activity type string or ``None`` when missing.

    Tags arrive from trackers and providers with inconsistent casing and
    spacing. Normalising once keeps downstream comparisons deterministic.
    """

    if value is None:
        return None
    normalized = str(value).strip().lower().replace(" ", "").replace("_", "")
    return normalized or None


def coerce_activity_type(value: Any) -> ActivityType:
    """Return the :class:`ActivityType` for ``value``.

    Args:
        value: An ``ActivityType`` or a string such as ``"run"`` or ``"Ride"``.

    Raises:
        InvalidInputError: When the value is missing or not a known tag.
    """

    if isinstance(value, ActivityType):
        return value
    normalized = normalize_activity_type(value)
    if normalized is None or normalized not in _ALIASES:
        raise InvalidInputError(f"Unknown activity type {value!r}")
    return _ALIASES[normalized]
