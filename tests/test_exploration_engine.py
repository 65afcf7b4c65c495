"""Tests for the exploration engine state transitions."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging

import numpy as np
import pytest

from stroll.activity_types import ActivityType
from stroll.errors import InvalidInputError, UnknownRoadError
from stroll.exploration import EngineConfig, ExplorationEngine
from stroll.models import ExplorationStatus, GeoPoint, Road
from stroll.utils import format_percentage


def _percentages(engine: ExplorationEngine) -> dict[str, float]:
    return {road.id: road.explored_percentage for road in engine.roads}


def test_identical_route_fully_explores_road(baltimore_road, road_points, route_factory) -> None:
    engine = ExplorationEngine([baltimore_road])
    update = engine.add_explored_route(route_factory(road_points, ActivityType.RUN))

    road = engine.get_road("baltimore")
    assert road.explored_percentage == 1.0
    assert road.exploration_status is ExplorationStatus.FULLY_EXPLORED
    assert len(update.changes) == 1
    change = update.changes[0]
    assert change.previous_status is ExplorationStatus.UNEXPLORED
    assert change.new_status is ExplorationStatus.FULLY_EXPLORED
    assert change.status_changed


def test_distant_point_leaves_road_unexplored(baltimore_road, route_factory) -> None:
    engine = ExplorationEngine([baltimore_road])
    update = engine.add_explored_route(route_factory([GeoPoint(39.2944, -76.6172)]))

    road = engine.get_road("baltimore")
    assert road.explored_percentage == 0.0
    assert road.exploration_status is ExplorationStatus.UNEXPLORED
    assert not update.changed
    assert engine.route_count == 1


def test_empty_route_changes_nothing(three_road_catalog, road_points, route_factory) -> None:
    engine = ExplorationEngine(three_road_catalog)
    engine.add_explored_route(route_factory(road_points[:4]))
    before = _percentages(engine)
    update = engine.add_explored_route(route_factory([]))
    assert _percentages(engine) == before
    assert update.changes == ()
    assert engine.route_count == 2


def test_coverage_is_monotonic_and_bounded(baltimore_road, road_points, route_factory) -> None:
    engine = ExplorationEngine([baltimore_road])
    sequence = [road_points[:6], road_points[:2], [], road_points[4:], road_points[3:4]]
    history = []
    for coords in sequence:
        engine.add_explored_route(route_factory(coords))
        pct = engine.get_road("baltimore").explored_percentage
        assert 0.0 <= pct <= 1.0
        history.append(pct)
    assert history == sorted(history)
    # Coverage takes the best single route, it does not union routes.
    assert history[0] == pytest.approx(6 / 11)
    assert history[-1] == pytest.approx(7 / 11)


def test_partial_route_is_partially_explored(baltimore_road, road_points, route_factory) -> None:
    engine = ExplorationEngine([baltimore_road])
    engine.add_explored_route(route_factory(road_points[:5]))
    road = engine.get_road("baltimore")
    assert road.explored_percentage == pytest.approx(5 / 11)
    assert road.exploration_status is ExplorationStatus.PARTIALLY_EXPLORED


def test_readding_route_keeps_state_but_duplicates_history(
    baltimore_road, road_points, route_factory, caplog
) -> None:
    engine = ExplorationEngine([baltimore_road])
    route = route_factory(road_points)
    engine.add_explored_route(route)
    first_stats = engine.stats
    with caplog.at_level(logging.WARNING):
        second = engine.add_explored_route(route)
    assert engine.get_road("baltimore").explored_percentage == 1.0
    assert second.changes == ()
    assert engine.stats == first_stats
    assert engine.routes == (route, route)
    assert "added again" in caplog.text


def test_stats_track_counts_and_distances(three_road_catalog, road_points, route_factory) -> None:
    engine = ExplorationEngine(three_road_catalog)
    lengths = {road.id: road.length_m for road in engine.roads}
    assert engine.stats.total_roads == 3
    assert engine.stats.explored_roads == 0
    assert engine.stats.total_distance == pytest.approx(sum(lengths.values()))
    assert engine.stats.explored_distance == 0.0

    engine.add_explored_route(route_factory(road_points[:5]))
    stats = engine.stats
    assert stats.explored_roads == 1
    assert stats.exploration_percentage == pytest.approx(33.333333, rel=1e-6)
    assert format_percentage(stats.exploration_percentage) == "33.3%"
    assert stats.explored_distance == pytest.approx(lengths["baltimore"] * 5 / 11)


def test_empty_catalog_has_zero_percentage(route_factory, road_points) -> None:
    engine = ExplorationEngine([])
    update = engine.add_explored_route(route_factory(road_points))
    assert engine.stats.total_roads == 0
    assert engine.stats.exploration_percentage == 0.0
    assert update.stats.total_distance == 0.0


def test_catalog_accepts_name_and_pairs() -> None:
    engine = ExplorationEngine([("Pratt Street", [(39.2866, -76.6122), (39.2866, -76.6150)])])
    (road,) = engine.roads
    assert road.name == "Pratt Street"
    assert road.exploration_status is ExplorationStatus.UNEXPLORED
    assert road.length_m > 0


def test_catalog_rejects_duplicate_ids_and_garbage(baltimore_road) -> None:
    with pytest.raises(InvalidInputError):
        ExplorationEngine([baltimore_road, baltimore_road])
    with pytest.raises(InvalidInputError):
        ExplorationEngine([42])  # type: ignore[list-item]


def test_engine_owns_its_roads(baltimore_road, road_points, route_factory) -> None:
    engine = ExplorationEngine([baltimore_road])
    engine.add_explored_route(route_factory(road_points))
    assert baltimore_road.explored_percentage == 0.0
    view = engine.get_road("baltimore")
    with pytest.raises(AttributeError):
        view.explored_percentage = 0.0  # type: ignore[misc]


def test_get_road_unknown_id(baltimore_road) -> None:
    engine = ExplorationEngine([baltimore_road])
    with pytest.raises(UnknownRoadError):
        engine.get_road("nope")
    with pytest.raises(KeyError):
        engine.get_road("nope")


def test_add_rejects_non_route(baltimore_road) -> None:
    engine = ExplorationEngine([baltimore_road])
    with pytest.raises(InvalidInputError):
        engine.add_explored_route([(39.2854, -76.6122)])  # type: ignore[arg-type]


def test_initial_history_is_replayed(three_road_catalog, road_points, route_factory) -> None:
    route = route_factory(road_points, ActivityType.RUN, name="Morning Run")
    engine = ExplorationEngine(three_road_catalog, [route])
    assert engine.routes == (route,)
    assert engine.get_road("baltimore").exploration_status is ExplorationStatus.FULLY_EXPLORED


def test_preexisting_progress_is_kept(road_points, route_factory) -> None:
    road = Road(name="Charles Street", coordinates=road_points, explored_percentage=0.6, id="c")
    engine = ExplorationEngine([road])
    engine.add_explored_route(route_factory(road_points[:2]))
    assert engine.get_road("c").explored_percentage == 0.6
    assert engine.stats.explored_roads == 1


def test_coverage_preview_does_not_mutate(three_road_catalog, road_points, route_factory) -> None:
    engine = ExplorationEngine(three_road_catalog)
    preview = engine.coverage_for(route_factory(road_points))
    assert preview["baltimore"] == 1.0
    assert preview["main"] == 0.0
    assert engine.get_road("baltimore").explored_percentage == 0.0
    assert engine.route_count == 0


def test_custom_threshold_changes_matching(baltimore_road, road_points, route_factory) -> None:
    shifted = [GeoPoint(p.latitude + 0.0003, p.longitude) for p in road_points]  # ~33 m north
    default_engine = ExplorationEngine([baltimore_road])
    wide_engine = ExplorationEngine(
        [baltimore_road], config=EngineConfig(exploration_threshold_m=40.0)
    )
    default_engine.add_explored_route(route_factory(shifted))
    wide_engine.add_explored_route(route_factory(shifted))
    assert default_engine.get_road("baltimore").explored_percentage == 0.0
    assert wide_engine.get_road("baltimore").explored_percentage == 1.0


@pytest.mark.parametrize("threshold", [0.0, -5.0, float("nan")])
def test_engine_config_rejects_bad_threshold(threshold: float) -> None:
    with pytest.raises(ValueError):
        EngineConfig(exploration_threshold_m=threshold)


def test_grid_and_dense_engines_agree(route_factory) -> None:
    rng = np.random.default_rng(3)
    centre = np.array([39.29, -76.61])
    roads = [
        Road(
            name=f"Road {i}",
            coordinates=[tuple(p) for p in centre + rng.normal(scale=0.001, size=(30, 2))],
            id=f"r{i}",
        )
        for i in range(10)
    ]
    walk = [tuple(p) for p in centre + rng.normal(scale=0.001, size=(300, 2))]
    grid_engine = ExplorationEngine(roads, config=EngineConfig(grid_min_points=0))
    dense_engine = ExplorationEngine(roads, config=EngineConfig(grid_index_enabled=False))
    grid_engine.add_explored_route(route_factory(walk))
    dense_engine.add_explored_route(route_factory(walk))
    assert _percentages(grid_engine) == _percentages(dense_engine)


def test_listeners_receive_updates_and_can_unsubscribe(
    baltimore_road, road_points, route_factory
) -> None:
    engine = ExplorationEngine([baltimore_road])
    received = []
    unsubscribe = engine.subscribe(received.append)
    first = engine.add_explored_route(route_factory(road_points))
    unsubscribe()
    unsubscribe()
    engine.add_explored_route(route_factory(road_points))
    assert received == [first]
    assert received[0].stats.explored_roads == 1


def test_failing_listener_is_isolated(baltimore_road, road_points, route_factory, caplog) -> None:
    engine = ExplorationEngine([baltimore_road])
    received = []

    def _broken(_update) -> None:
        raise RuntimeError("boom")

    engine.subscribe(_broken)
    engine.subscribe(received.append)
    with caplog.at_level(logging.ERROR):
        update = engine.add_explored_route(route_factory(road_points))
    assert received == [update]
    assert engine.get_road("baltimore").explored_percentage == 1.0
    assert "listener" in caplog.text


def test_concurrent_adds_are_serialised(baltimore_road, road_points, route_factory) -> None:
    engine = ExplorationEngine([baltimore_road])
    routes = [route_factory(road_points[: n + 1], minutes=n) for n in range(11)]
    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(engine.add_explored_route, routes))
    assert engine.route_count == 11
    assert engine.get_road("baltimore").explored_percentage == 1.0
    assert {r.id for r in engine.routes} == {r.id for r in routes}
