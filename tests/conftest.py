"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable catalog and route factories
for the exploration tests.
"""
from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from stroll.activity_types import ActivityType
from stroll.models import ExploredRoute, GeoPoint, Road
from stroll.sample_data import interpolate_points


BASE_TIME = datetime(2025, 7, 20, 8, 0, tzinfo=timezone.utc)


# --- Factory helpers -------------------------------------------------
def baltimore_street_points():
    return interpolate_points(GeoPoint(39.2854, -76.6122), GeoPoint(39.2854, -76.6222))


def make_route(coordinates, activity_type=ActivityType.WALK, minutes=0, name=None):
    return ExploredRoute(
        coordinates=coordinates,
        activity_type=activity_type,
        timestamp=BASE_TIME + timedelta(minutes=minutes),
        name=name,
    )


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def road_points():
    return baltimore_street_points()


@pytest.fixture
def baltimore_road(road_points):
    return Road(name="Baltimore Street", coordinates=road_points, id="baltimore")


@pytest.fixture
def three_road_catalog(road_points):
    main_street = interpolate_points(GeoPoint(39.2904, -76.6122), GeoPoint(39.2954, -76.6172))
    charles_street = interpolate_points(GeoPoint(39.2904, -76.6122), GeoPoint(39.2904, -76.6022))
    return [
        Road(name="Main Street", coordinates=main_street, id="main"),
        Road(name="Baltimore Street", coordinates=road_points, id="baltimore"),
        Road(name="Charles Street", coordinates=charles_street, id="charles"),
    ]


@pytest.fixture
def route_factory():
    return make_route
