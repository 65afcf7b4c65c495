"""General utility helpers shared across modules."""

from __future__ import annotations

from datetime import datetime, timezone


def to_utc_aware(value: datetime) -> datetime:
    """Return ``value`` as a UTC-aware datetime; naive values are taken as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_percentage(value: float, digits: int = 1) -> str:
    """Format a 0-100 percentage for display, e.g. ``33.3%``."""

    return f"{value:.{digits}f}%"


def format_km(metres: float, digits: int = 1) -> str:
    """Format a distance in metres as kilometres, e.g. ``1.2 km``."""

    return f"{metres / 1000.0:.{digits}f} km"


__all__ = ["to_utc_aware", "format_percentage", "format_km"]
