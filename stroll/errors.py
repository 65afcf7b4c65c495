"""Central error types used across the application."""

from __future__ import annotations


class StrollError(RuntimeError):
    """Base error for the exploration engine."""


class InvalidInputError(StrollError, ValueError):
    """Raised when coordinates, timestamps or activity tags are malformed."""


class UnknownRoadError(StrollError, KeyError):
    """Raised when a road id is not part of the engine's catalog."""


__all__ = [
    "StrollError",
    "InvalidInputError",
    "UnknownRoadError",
]
