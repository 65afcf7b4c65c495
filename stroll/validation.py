"""Input validation for coordinates and route metadata.

Malformed geographic input is rejected at construction time with
:class:`~stroll.errors.InvalidInputError` so the matcher only ever sees finite,
in-range WGS84 coordinates.
"""

from __future__ import annotations

from datetime import datetime, timezone
import math
from typing import Any

from .errors import InvalidInputError
from .utils import to_utc_aware

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def validate_coordinates(latitude: Any, longitude: Any) -> tuple[float, float]:
    """Return ``(lat, lon)`` as floats or raise :class:`InvalidInputError`."""

    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(
            f"Coordinates must be numeric, got ({latitude!r}, {longitude!r})"
        ) from exc
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise InvalidInputError(f"Coordinates must be finite, got ({lat}, {lon})")
    if not -90.0 <= lat <= 90.0:
        raise InvalidInputError(f"Latitude {lat} outside [-90, 90]")
    if not -180.0 <= lon <= 180.0:
        raise InvalidInputError(f"Longitude {lon} outside [-180, 180]")
    return lat, lon


def validate_timestamp(value: Any) -> datetime:
    """Return a UTC-aware timestamp, rejecting non-datetimes and pre-epoch values."""

    if not isinstance(value, datetime):
        raise InvalidInputError(f"Timestamp must be a datetime, got {type(value).__name__}")
    aware = to_utc_aware(value)
    if aware < _EPOCH:
        raise InvalidInputError(f"Timestamp {aware.isoformat()} is before the Unix epoch")
    return aware


def validate_percentage(value: Any) -> float:
    """Return an explored fraction in [0, 1] or raise :class:`InvalidInputError`."""

    try:
        pct = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Explored percentage must be numeric, got {value!r}") from exc
    if not math.isfinite(pct) or not 0.0 <= pct <= 1.0:
        raise InvalidInputError(f"Explored percentage {pct} outside [0, 1]")
    return pct


def normalize_name(value: Any) -> str | None:
    """Return a stripped route name, or ``None`` for missing or blank values."""

    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = [
    "validate_coordinates",
    "validate_timestamp",
    "validate_percentage",
    "normalize_name",
]
