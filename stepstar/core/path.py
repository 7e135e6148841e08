#!/usr/bin/env python3
from typing import List, Sequence

from stepstar.core.types import Coord


def reconstruct_path(grid, start_index: int, end_index: int) -> List[Coord]:
    """
    Follow parent indices from end back to start.

    Returns (x, y) coordinates ordered start -> end, both endpoints included.
    Raises ValueError if the chain never reaches start.
    """
    path: List[Coord] = []
    cur = end_index
    # a chain longer than the grid must contain a cycle
    for _ in range(len(grid.cells)):
        cell = grid.cell_at(cur)
        path.append(cell.pos)
        if cur == start_index:
            path.reverse()
            return path
        if cell.parent is None:
            raise ValueError(f"parent chain broken at {cell.pos}")
        cur = cell.parent
    raise ValueError("parent chain does not reach the start cell")


def path_cost(path: Sequence[Coord], heuristic) -> float:
    """Total movement cost of a route, one adjacent move at a time."""
    return sum(heuristic.distance(a, b) for a, b in zip(path, path[1:]))
