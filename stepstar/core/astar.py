#!/usr/bin/env python3
"""
A* that runs one unit of work per step() so a viewer can animate it.

A unit of work is either
- relaxing ONE neighbor of the node being expanded, or
- selecting the next node from the open set (and finishing if it is End).

Selection order in the PQ:
- (f, h, seq, index): lower f, then lower h, then whichever entry was
  pushed or improved first.

Step results:
- SEARCHING / STATE_CHANGED while running. STATE_CHANGED means the step
  flipped some cell's visible state (Idle -> Open, Open -> Closed), so a
  driver that only repaints on visible change can pause there.
- FOUND / NOT_FOUND are terminal. Stepping again returns the same result
  and touches nothing.

The engine writes g/h/f/parent/state straight into the grid's cells and
keeps no copy of the walls: the grid must not be edited while it runs.
"""

from collections import deque
from typing import Deque, Dict, List, Optional, Set, Tuple
import heapq
import logging

from stepstar.core.grid import GridModel
from stepstar.core.heuristics import resolve_heuristic
from stepstar.core.path import reconstruct_path
from stepstar.core.types import (
    CellState,
    Coord,
    ENDPOINT_STATES,
    HeuristicKind,
    SearchStatus,
    StepResult,
)

logger = logging.getLogger(__name__)


class SearchEngine:
    def __init__(self, grid: GridModel, heuristic=HeuristicKind.MANHATTAN,
                 allow_diagonal: bool = False, name: str = "A*"):
        self.name = name
        self.grid = grid
        self.heuristic = resolve_heuristic(heuristic)
        self.allow_diagonal = bool(allow_diagonal)

        self.open_pq: List[Tuple[float, float, int, int]] = []  # (f, h, seq, index)
        self.open_set: Set[int] = set()
        self.closed_set: Set[int] = set()
        self.neighbor_queue: Deque[int] = deque()
        self._entry_seq: Dict[int, int] = {}   # index -> seq of its live PQ entry
        self.seq = 0

        self.start_index = 0
        self.end_index = 0
        self.current_index: Optional[int] = None
        self.popped_count = 0
        self.step_count = 0
        self._status = SearchStatus.IDLE
        self._final: Optional[StepResult] = None

        self.reset(clear_marks=False)
        logger.debug("search engine ready: %s, diagonal=%s, start=%s, end=%s",
                     getattr(self.heuristic, "kind", self.heuristic),
                     self.allow_diagonal, self.start, self.end)

    # -------------------- lifecycle --------------------

    def reset(self, clear_marks: bool = True) -> None:
        """Forget all progress and seed the open set with Start.

        Re-reads the endpoints from the grid; raises InvalidGrid if they are
        missing.
        """
        self.grid.check_endpoints()
        if clear_marks:
            self.grid.clear_search_marks()

        self.open_pq.clear()
        self.open_set.clear()
        self.closed_set.clear()
        self.neighbor_queue.clear()
        self._entry_seq.clear()
        self.seq = 0
        self.current_index = None
        self.popped_count = 0
        self.step_count = 0
        self._status = SearchStatus.IDLE
        self._final = None

        self.start_index = self.grid.index(*self.grid.start)
        self.end_index = self.grid.index(*self.grid.end)

        s = self.grid.cell_at(self.start_index)
        s.g = 0
        s.h = self.heuristic.distance(s.pos, self.end)
        s.f = s.g + s.h
        s.parent = None
        self._push(self.start_index)
        self.open_set.add(self.start_index)

    # -------------------- introspection --------------------

    @property
    def status(self) -> SearchStatus:
        return self._status

    @property
    def start(self) -> Coord:
        return self.grid.cell_at(self.start_index).pos

    @property
    def end(self) -> Coord:
        return self.grid.cell_at(self.end_index).pos

    @property
    def current(self) -> Optional[Coord]:
        if self.current_index is None:
            return None
        return self.grid.cell_at(self.current_index).pos

    def open_cells(self) -> List[Coord]:
        return sorted(self.grid.cell_at(i).pos for i in self.open_set)

    def closed_cells(self) -> List[Coord]:
        return sorted(self.grid.cell_at(i).pos for i in self.closed_set)

    def pending_neighbors(self) -> List[Coord]:
        return [self.grid.cell_at(i).pos for i in self.neighbor_queue]

    # -------------------- helpers --------------------

    def _bump(self) -> int:
        self.seq += 1
        return self.seq

    def _push(self, index: int) -> None:
        c = self.grid.cell_at(index)
        seq = self._bump()
        self._entry_seq[index] = seq
        heapq.heappush(self.open_pq, (c.f, c.h, seq, index))

    def _pop_best(self) -> int:
        """Lowest (f, h) entry still live in the open set."""
        while self.open_pq:
            _, _, seq, index = heapq.heappop(self.open_pq)
            # entries superseded by a cheaper g are skipped
            if index in self.open_set and self._entry_seq.get(index) == seq:
                return index
        raise RuntimeError("open set and priority queue out of sync")

    def _finish(self, result: StepResult) -> StepResult:
        self._status = result.status
        self._final = result
        return result

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        if self._final is not None:
            return self._final

        self.step_count += 1
        if self.neighbor_queue:
            result = self._relax(self.neighbor_queue.popleft())
        elif not self.open_set:
            logger.info("%s: no path from %s to %s after %d steps",
                        self.name, self.start, self.end, self.step_count)
            return self._finish(StepResult(status=SearchStatus.NOT_FOUND,
                                           metrics=self._metrics()))
        else:
            result = self._select()

        if not result.terminal:
            self._status = SearchStatus.SEARCHING
        return result

    def run(self, max_steps: Optional[int] = None) -> StepResult:
        """Step until a terminal result."""
        taken = 0
        while True:
            result = self.step()
            if result.terminal:
                return result
            taken += 1
            if max_steps is not None and taken >= max_steps:
                raise RuntimeError(f"search not finished after {max_steps} steps")

    def _select(self) -> StepResult:
        index = self._pop_best()
        self.open_set.discard(index)
        self.closed_set.add(index)
        self.popped_count += 1
        self.current_index = index

        cell = self.grid.cell_at(index)
        changed = False
        if cell.state not in ENDPOINT_STATES and cell.state != CellState.CLOSED:
            cell.state = CellState.CLOSED
            changed = True

        if index == self.end_index:
            path = reconstruct_path(self.grid, self.start_index, self.end_index)
            logger.info("%s: path found, %d cells, cost %s, %d steps",
                        self.name, len(path), cell.g, self.step_count)
            return self._finish(StepResult(
                status=SearchStatus.FOUND,
                path=path,
                current=cell.pos,
                closed=[cell.pos],
                metrics=self._metrics(path_len=len(path), total_cost=cell.g),
            ))

        self.neighbor_queue.extend(
            self.grid.index(n.x, n.y)
            for n in self.grid.neighbors(cell.x, cell.y, self.allow_diagonal)
        )
        return StepResult(
            status=SearchStatus.STATE_CHANGED if changed else SearchStatus.SEARCHING,
            current=cell.pos,
            closed=[cell.pos],
            metrics=self._metrics(),
        )

    def _relax(self, index: int) -> StepResult:
        cur = self.grid.cell_at(self.current_index)
        n = self.grid.cell_at(index)
        result = StepResult(status=SearchStatus.SEARCHING, current=cur.pos, examined=n.pos)

        if n.state == CellState.WALL or index in self.closed_set:
            result.metrics = self._metrics()
            return result

        tentative_g = cur.g + self.heuristic.distance(cur.pos, n.pos)
        in_open = index in self.open_set
        if tentative_g < n.g or not in_open:
            n.g = tentative_g
            n.h = self.heuristic.distance(n.pos, self.end)
            n.f = n.g + n.h
            n.parent = self.current_index
            self._push(index)
            if not in_open:
                self.open_set.add(index)
                result.opened.append(n.pos)
                if n.state not in ENDPOINT_STATES and n.state != CellState.OPEN:
                    n.state = CellState.OPEN
                    result.status = SearchStatus.STATE_CHANGED

        result.metrics = self._metrics()
        return result

    # -------------------- metrics --------------------

    def _metrics(self, path_len: int = 0, total_cost=None) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.open_set),
            "closed_count": len(self.closed_set),
            "steps": self.step_count,
            "path_len": path_len,
            "total_cost": total_cost,
        }
