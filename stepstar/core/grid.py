#!/usr/bin/env python3
"""
Square grid of cells with Start/End endpoints and walls.

Cells live in one flat list (index = y * size + x). Parent links written by
the search are indices into that list, so nothing outlives the grid.

Edits that would break the grid (walls on endpoints, endpoints on top of
each other, out-of-bounds coordinates) are ignored and reported as False.
"""

import logging
from typing import Iterable, List, Optional

from stepstar.core.types import (
    Cell,
    CellInfo,
    CellState,
    Coord,
    ENDPOINT_STATES,
    InvalidGrid,
    SEARCH_MARKS,
)

logger = logging.getLogger(__name__)

# left, right, up, down; then up-left, up-right, down-left, down-right
CARDINAL_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))
DIAGONAL_OFFSETS = ((-1, -1), (1, -1), (-1, 1), (1, 1))


class GridModel:
    def __init__(self, size: int):
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise ValueError(f"grid size must be a positive integer, got {size!r}")
        self.size = size
        self.cells: List[Cell] = [
            Cell(x, y) for y in range(size) for x in range(size)
        ]
        self._start: Coord = (0, 0)
        self._end: Coord = (size - 1, size - 1)
        # size 1: both endpoints share (0, 0), which shows as START
        self.cell(*self._end).state = CellState.END
        self.cell(*self._start).state = CellState.START

    # -------------------- addressing --------------------

    @property
    def start(self) -> Coord:
        return self._start

    @property
    def end(self) -> Coord:
        return self._end

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def index(self, x: int, y: int) -> int:
        return y * self.size + x

    def cell(self, x: int, y: int) -> Cell:
        if not self.in_bounds(x, y):
            raise IndexError(f"cell ({x}, {y}) outside {self.size}x{self.size} grid")
        return self.cells[self.index(x, y)]

    def cell_at(self, index: int) -> Cell:
        return self.cells[index]

    def get_state(self, x: int, y: int) -> Optional[CellState]:
        if not self.in_bounds(x, y):
            return None
        return self.cells[self.index(x, y)].state

    def describe(self, x: int, y: int) -> CellInfo:
        c = self.cell(x, y)
        return CellInfo(c.state, c.g, c.h, c.f)

    def is_block(self, x: int, y: int) -> bool:
        return self.get_state(x, y) == CellState.WALL

    def neighbors(self, x: int, y: int, allow_diagonal: bool = False) -> List[Cell]:
        """In-bounds, non-wall neighbors; cardinal directions first."""
        offsets = CARDINAL_OFFSETS + DIAGONAL_OFFSETS if allow_diagonal else CARDINAL_OFFSETS
        out: List[Cell] = []
        for dx, dy in offsets:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny) and not self.is_block(nx, ny):
                out.append(self.cells[self.index(nx, ny)])
        return out

    # -------------------- edits --------------------

    def toggle_wall(self, x: int, y: int) -> bool:
        state = self.get_state(x, y)
        if state is None:
            return False
        return self.set_wall(x, y, state != CellState.WALL)

    def set_wall(self, x: int, y: int, wall: bool) -> bool:
        state = self.get_state(x, y)
        if state is None or state in ENDPOINT_STATES:
            logger.debug("wall edit rejected at (%s, %s): %s", x, y, state)
            return False
        self.cells[self.index(x, y)].state = CellState.WALL if wall else CellState.IDLE
        return True

    def relocate_endpoint(self, which: CellState, x: int, y: int) -> bool:
        """Move Start or End to (x, y); the vacated cell becomes Idle."""
        which = CellState(which)
        if which not in ENDPOINT_STATES:
            raise ValueError(f"not an endpoint: {which!r}")
        if not self.in_bounds(x, y):
            logger.debug("endpoint move rejected, (%s, %s) out of bounds", x, y)
            return False
        here = self._start if which == CellState.START else self._end
        other = self._end if which == CellState.START else self._start
        if (x, y) == here:
            return False
        if (x, y) == other:
            logger.debug("endpoint move rejected, (%s, %s) holds the other endpoint", x, y)
            return False

        self.cell(*here).state = CellState.IDLE
        self.cell(x, y).state = which
        if which == CellState.START:
            self._start = (x, y)
        else:
            self._end = (x, y)
        return True

    move_endpoint = relocate_endpoint

    def clear_search_marks(self) -> None:
        """Open/Closed/Path back to Idle. Costs and parents are left stale."""
        for c in self.cells:
            if c.state in SEARCH_MARKS:
                c.state = CellState.IDLE

    def apply_path(self, path: Iterable[Coord]) -> None:
        """Replace the search overlay with the route."""
        for c in self.cells:
            if c.state in (CellState.OPEN, CellState.CLOSED):
                c.state = CellState.IDLE
        for x, y in path:
            c = self.cell(x, y)
            if c.state not in ENDPOINT_STATES:
                c.state = CellState.PATH

    # -------------------- checks --------------------

    def find_first_with_state(self, state: CellState) -> Optional[Cell]:
        for c in self.cells:
            if c.state == state:
                return c
        return None

    def count_state(self, state: CellState) -> int:
        return sum(1 for c in self.cells if c.state == state)

    def check_endpoints(self) -> None:
        """Raise InvalidGrid unless exactly one Start and one End are present."""
        starts = self.count_state(CellState.START)
        ends = self.count_state(CellState.END)
        if self._start == self._end:
            ok = starts + ends == 1 and self.cell(*self._start).state in ENDPOINT_STATES
        else:
            ok = (
                starts == 1
                and ends == 1
                and self.cell(*self._start).state == CellState.START
                and self.cell(*self._end).state == CellState.END
            )
        if not ok:
            raise InvalidGrid(
                f"grid needs exactly one start and one end "
                f"(found {starts} start, {ends} end)"
            )

    def __repr__(self) -> str:
        return f"GridModel(size={self.size}, start={self._start}, end={self._end})"
