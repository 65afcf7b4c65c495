"""Exploration engine owning the road catalog and the route history.

Each call to :meth:`ExplorationEngine.add_explored_route` matches the route
against every road, raises per-road coverage, and recomputes the aggregate
statistics before returning. The work is synchronous and costs roughly
``O(R x Pr x Pq)`` distance evaluations (roads x points per road x points per
route) without the grid index; the index cuts ``Pq`` down to the route points
near each road point. Callers that need a responsive display thread should run
the call elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from threading import RLock
from typing import Callable, Dict, Iterable, List, Tuple

from ..config import (
    DISTANCE_METHOD,
    EXPLORATION_THRESHOLD_M,
    FULLY_EXPLORED_THRESHOLD,
    GRID_CELL_M,
    GRID_INDEX_ENABLED,
    GRID_MIN_POINTS,
)
from ..errors import InvalidInputError, UnknownRoadError
from ..geo import LatLonArray, as_latlon_array
from ..models import (
    ExplorationStats,
    ExplorationUpdate,
    ExploredRoute,
    Road,
    RoadChange,
    RoadInput,
    RoadView,
    classify_status,
)
from .coverage import PreparedRoute, compute_coverage, prepare_route
from .stats import compute_stats, road_length

ExplorationListener = Callable[[ExplorationUpdate], None]


@dataclass(slots=True)
class EngineConfig:
    exploration_threshold_m: float = EXPLORATION_THRESHOLD_M
    fully_explored_threshold: float = FULLY_EXPLORED_THRESHOLD
    distance_method: str = DISTANCE_METHOD
    grid_index_enabled: bool = GRID_INDEX_ENABLED
    grid_cell_m: float = GRID_CELL_M
    grid_min_points: int = GRID_MIN_POINTS
    logger: logging.Logger | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not math.isfinite(self.exploration_threshold_m) or self.exploration_threshold_m <= 0:
            raise ValueError("exploration_threshold_m must be a positive number")
        if not 0.0 < self.fully_explored_threshold <= 1.0:
            raise ValueError("fully_explored_threshold must be within (0, 1]")


def _copy_road(item: RoadInput) -> Road:
    """Return an engine-owned copy of a catalog entry."""

    if isinstance(item, Road):
        return Road(
            name=item.name,
            coordinates=item.coordinates,
            explored_percentage=item.explored_percentage,
            id=item.id,
        )
    try:
        name, coordinates = item
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(
            f"Catalog entries must be Road or (name, coordinates), got {item!r}"
        ) from exc
    return Road(name=str(name), coordinates=coordinates)


class ExplorationEngine:
    """Explicit state container for road coverage and exploration statistics.

    Only the engine mutates roads. Consumers read :class:`RoadView`
    snapshots, the append-only route history and the current stats, or
    subscribe to :class:`ExplorationUpdate` notifications.
    """

    def __init__(
        self,
        roads: Iterable[RoadInput] = (),
        routes: Iterable[ExploredRoute] = (),
        config: EngineConfig | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)
        self._lock = RLock()
        self._listeners: List[ExplorationListener] = []
        self._roads: List[Road] = []
        self._road_index: Dict[str, int] = {}
        self._road_points: Dict[str, LatLonArray] = {}
        self._lengths: Dict[str, float] = {}
        self._routes: List[ExploredRoute] = []
        self._route_ids: set[str] = set()

        for item in roads:
            road = _copy_road(item)
            if road.id in self._road_index:
                raise InvalidInputError(f"Duplicate road id {road.id!r} in catalog")
            road.exploration_status = classify_status(
                road.explored_percentage, self.config.fully_explored_threshold
            )
            self._road_index[road.id] = len(self._roads)
            self._roads.append(road)
            self._road_points[road.id] = as_latlon_array(road.coordinates)
            self._lengths[road.id] = road_length(
                road, method=self.config.distance_method
            )
        self._stats = self._compute_stats()
        self._log.info(
            "Loaded road catalog: %d roads, %.1f m total",
            self._stats.total_roads,
            self._stats.total_distance,
        )

        for route in routes:
            self.add_explored_route(route)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def exploration_threshold(self) -> float:
        return self.config.exploration_threshold_m

    @property
    def stats(self) -> ExplorationStats:
        with self._lock:
            return self._stats

    @property
    def roads(self) -> Tuple[RoadView, ...]:
        with self._lock:
            return tuple(self._view(road) for road in self._roads)

    @property
    def routes(self) -> Tuple[ExploredRoute, ...]:
        with self._lock:
            return tuple(self._routes)

    @property
    def route_count(self) -> int:
        with self._lock:
            return len(self._routes)

    def get_road(self, road_id: str) -> RoadView:
        with self._lock:
            position = self._road_index.get(road_id)
            if position is None:
                raise UnknownRoadError(road_id)
            return self._view(self._roads[position])

    def _view(self, road: Road) -> RoadView:
        return RoadView(
            id=road.id,
            name=road.name,
            coordinates=road.coordinates,
            exploration_status=road.exploration_status,
            explored_percentage=road.explored_percentage,
            length_m=self._lengths[road.id],
        )

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------
    def _prepare(self, route: ExploredRoute) -> PreparedRoute:
        return prepare_route(
            route,
            threshold_m=self.config.exploration_threshold_m,
            use_grid=self.config.grid_index_enabled,
            cell_m=self.config.grid_cell_m,
            min_grid_points=self.config.grid_min_points,
        )

    def _fraction(self, road: Road, prepared: PreparedRoute) -> float:
        result = compute_coverage(
            self._road_points[road.id],
            prepared,
            self.config.exploration_threshold_m,
            method=self.config.distance_method,
        )
        return result.fraction

    def coverage_for(self, route: ExploredRoute) -> Dict[str, float]:
        """Return ``{road_id: fraction}`` for ``route`` without changing state."""

        prepared = self._prepare(route)
        with self._lock:
            return {road.id: self._fraction(road, prepared) for road in self._roads}

    def add_explored_route(self, route: ExploredRoute) -> ExplorationUpdate:
        """Record ``route`` and raise road coverage from it.

        Coverage only ever rises (``max`` of the previous and new fraction),
        so re-adding a route changes no road but does append a second history
        entry.
        """

        if not isinstance(route, ExploredRoute):
            raise InvalidInputError(
                f"Expected ExploredRoute, got {type(route).__name__}"
            )
        prepared = self._prepare(route)
        changes: List[RoadChange] = []
        with self._lock:
            if route.id in self._route_ids:
                self._log.warning(
                    "Route %s added again; history keeps both entries", route.id
                )
            self._routes.append(route)
            self._route_ids.add(route.id)

            for road in self._roads:
                fraction = self._fraction(road, prepared)
                previous = road.explored_percentage
                if fraction <= previous:
                    continue
                previous_status = road.exploration_status
                road.explored_percentage = fraction
                road.exploration_status = classify_status(
                    fraction, self.config.fully_explored_threshold
                )
                changes.append(
                    RoadChange(
                        road_id=road.id,
                        road_name=road.name,
                        previous_percentage=previous,
                        new_percentage=fraction,
                        previous_status=previous_status,
                        new_status=road.exploration_status,
                    )
                )
                self._log.debug(
                    "Road %s coverage %.3f -> %.3f (%s)",
                    road.name,
                    previous,
                    fraction,
                    road.exploration_status.label,
                )

            self._stats = self._compute_stats()
            update = ExplorationUpdate(
                route=route, changes=tuple(changes), stats=self._stats
            )
            listeners = list(self._listeners)

        self._log.info(
            "Added %s route %s (%d points): %d roads changed, %.1f%% explored",
            route.activity_type.value,
            route.display_name,
            len(route.coordinates),
            len(changes),
            update.stats.exploration_percentage,
        )
        self._notify(listeners, update)
        return update

    def _compute_stats(self) -> ExplorationStats:
        return compute_stats(
            self._roads, self._lengths, method=self.config.distance_method
        )

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def subscribe(self, listener: ExplorationListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that removes it again."""

        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _notify(
        self, listeners: List[ExplorationListener], update: ExplorationUpdate
    ) -> None:
        for listener in listeners:
            try:
                listener(update)
            except Exception:
                self._log.exception(
                    "Exploration listener %r failed for route %s",
                    listener,
                    update.route.id,
                )


__all__ = ["EngineConfig", "ExplorationEngine", "ExplorationListener"]
