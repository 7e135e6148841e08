#!/usr/bin/env python3
"""
Distance estimators for the grid search.

Each strategy doubles as the movement-cost model: the cost of one move
between adjacent cells is the strategy's distance between them.

    manhattan  orthogonal 1,  diagonal 2
    euclidean  orthogonal 1,  diagonal sqrt(2)
    octile     orthogonal 10, diagonal 14   (integer weights)

Used that way every strategy stays admissible for its own movement model.
"""

from dataclasses import dataclass
from math import sqrt
from typing import Dict, Tuple, Union

from stepstar.core.types import Coord, HeuristicKind


def _deltas(a: Coord, b: Coord) -> Tuple[int, int]:
    return abs(a[0] - b[0]), abs(a[1] - b[1])


@dataclass(frozen=True)
class Manhattan:
    kind: HeuristicKind = HeuristicKind.MANHATTAN

    def distance(self, a: Coord, b: Coord) -> int:
        dx, dy = _deltas(a, b)
        return dx + dy


@dataclass(frozen=True)
class Euclidean:
    kind: HeuristicKind = HeuristicKind.EUCLIDEAN

    def distance(self, a: Coord, b: Coord) -> float:
        dx, dy = _deltas(a, b)
        return sqrt(dx * dx + dy * dy)


@dataclass(frozen=True)
class Octile:
    kind: HeuristicKind = HeuristicKind.OCTILE
    straight: int = 10
    diagonal: int = 14

    def distance(self, a: Coord, b: Coord) -> int:
        dx, dy = _deltas(a, b)
        lo, hi = min(dx, dy), max(dx, dy)
        return self.diagonal * lo + self.straight * (hi - lo)


HEURISTICS: Dict[HeuristicKind, object] = {
    HeuristicKind.MANHATTAN: Manhattan(),
    HeuristicKind.EUCLIDEAN: Euclidean(),
    HeuristicKind.OCTILE: Octile(),
}


def get_heuristic(kind: Union[HeuristicKind, str]):
    """Strategy for a kind or its name; ValueError if unknown."""
    return HEURISTICS[HeuristicKind.parse(kind)]


def resolve_heuristic(value):
    """Accept a kind, a name, or anything with a distance(a, b) method."""
    if hasattr(value, "distance"):
        return value
    return get_heuristic(value)


def next_kind(kind: HeuristicKind) -> HeuristicKind:
    kinds = list(HeuristicKind)
    return kinds[(kinds.index(kind) + 1) % len(kinds)]
