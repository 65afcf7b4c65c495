"""Achievement badges derived from exploration progress."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, FrozenSet, Tuple

from .models import ExplorationStats


@dataclass(frozen=True, slots=True)
class Achievement:
    title: str
    description: str
    icon: str


_Rule = Callable[[ExplorationStats, int], bool]

# Ordered from exploration share, through activity count, to road count.
ACHIEVEMENT_RULES: Tuple[Tuple[Achievement, _Rule], ...] = (
    (
        Achievement("Explorer", "Explored 10% of the city", "map"),
        lambda stats, _count: stats.exploration_percentage >= 10,
    ),
    (
        Achievement("Pathfinder", "Explored 25% of the city", "location.north.line"),
        lambda stats, _count: stats.exploration_percentage >= 25,
    ),
    (
        Achievement("Navigator", "Explored 50% of the city", "safari"),
        lambda stats, _count: stats.exploration_percentage >= 50,
    ),
    (
        Achievement("Getting Started", "Completed 5 activities", "figure.walk"),
        lambda _stats, count: count >= 5,
    ),
    (
        Achievement("Regular Explorer", "Completed 25 activities", "flame"),
        lambda _stats, count: count >= 25,
    ),
    (
        Achievement("Road Warrior", "Explored 10 different roads", "road.lanes"),
        lambda stats, _count: stats.explored_roads >= 10,
    ),
)

ALL_ACHIEVEMENTS: Tuple[Achievement, ...] = tuple(a for a, _ in ACHIEVEMENT_RULES)


def derive_achievements(
    stats: ExplorationStats, route_count: int
) -> FrozenSet[Achievement]:
    """Return every achievement earned for ``stats`` and ``route_count``."""

    return frozenset(
        achievement
        for achievement, rule in ACHIEVEMENT_RULES
        if rule(stats, route_count)
    )


def ordered_achievements(
    stats: ExplorationStats, route_count: int
) -> Tuple[Achievement, ...]:
    """Earned achievements in display order."""

    earned = derive_achievements(stats, route_count)
    return tuple(a for a in ALL_ACHIEVEMENTS if a in earned)


__all__ = [
    "Achievement",
    "ACHIEVEMENT_RULES",
    "ALL_ACHIEVEMENTS",
    "derive_achievements",
    "ordered_achievements",
]
