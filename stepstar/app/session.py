#!/usr/bin/env python3
"""
Driver state between the viewer and the search engine.

Holds the grid, the active engine (if any) and the run/pause flag. Grid
edits and model changes are refused while a search is active so the engine
never sees a grid change under it.
"""

import logging
from typing import Optional

from stepstar.core.astar import SearchEngine
from stepstar.core.config import (
    MAX_GRID_SIZE,
    MAX_STEPS_PER_SEC,
    MIN_GRID_SIZE,
    MIN_STEPS_PER_SEC,
    SearchConfig,
    clamp,
)
from stepstar.core.grid import GridModel
from stepstar.core.heuristics import next_kind
from stepstar.core.types import CellState, HeuristicKind, SearchStatus, StepResult

logger = logging.getLogger(__name__)


class SearchSession:
    def __init__(self, config: Optional[SearchConfig] = None):
        self.config = config or SearchConfig()
        self.grid = GridModel(self.config.grid_size)
        self.engine: Optional[SearchEngine] = None
        self.running = False
        self.last_result: Optional[StepResult] = None

    # -------------------- state --------------------

    @property
    def active(self) -> bool:
        return self.engine is not None

    @property
    def state_label(self) -> str:
        if self.active:
            return "Running" if self.running else "Paused"
        if self.last_result is not None:
            if self.last_result.status == SearchStatus.FOUND:
                return "Found"
            if self.last_result.status == SearchStatus.NOT_FOUND:
                return "No path"
        return "Idle"

    @property
    def metrics(self) -> dict:
        if self.last_result is not None and self.last_result.metrics:
            return self.last_result.metrics
        return {}

    def _refuse(self, what: str) -> bool:
        if self.active:
            logger.debug("%s refused while a search is active", what)
            return True
        return False

    # -------------------- grid --------------------

    def new_grid(self, size: int) -> bool:
        if self._refuse("grid resize"):
            return False
        size = clamp(int(size), MIN_GRID_SIZE, MAX_GRID_SIZE)
        self.grid = GridModel(size)
        self.config.grid_size = size
        self.last_result = None
        return True

    def clear(self) -> bool:
        """Fresh grid of the current size; cancels any running search."""
        self.cancel()
        return self.new_grid(self.grid.size)

    def toggle_wall(self, x: int, y: int) -> bool:
        if self._refuse("wall edit"):
            return False
        self._drop_overlay()
        return self.grid.toggle_wall(x, y)

    def move_endpoint(self, which: CellState, x: int, y: int) -> bool:
        if self._refuse("endpoint move"):
            return False
        self._drop_overlay()
        return self.grid.relocate_endpoint(which, x, y)

    def _drop_overlay(self) -> None:
        if self.last_result is not None:
            self.grid.clear_search_marks()
            self.last_result = None

    def reset_marks(self) -> None:
        self.cancel()
        self.grid.clear_search_marks()
        self.last_result = None

    # -------------------- model --------------------

    def set_heuristic(self, kind) -> bool:
        if self._refuse("heuristic change"):
            return False
        self.config.heuristic = HeuristicKind.parse(kind)
        return True

    def cycle_heuristic(self) -> bool:
        return self.set_heuristic(next_kind(self.config.heuristic))

    def set_diagonal(self, allow: bool) -> bool:
        if self._refuse("diagonal change"):
            return False
        self.config.allow_diagonal = bool(allow)
        return True

    def bump_speed(self, dv: int) -> int:
        self.config.steps_per_sec = clamp(self.config.steps_per_sec + dv,
                                          MIN_STEPS_PER_SEC, MAX_STEPS_PER_SEC)
        return self.config.steps_per_sec

    # -------------------- search --------------------

    def start(self) -> SearchEngine:
        """Begin a search (or return the active one)."""
        if self.engine is None:
            self.grid.clear_search_marks()
            self.last_result = None
            self.engine = SearchEngine(self.grid, self.config.heuristic,
                                       self.config.allow_diagonal)
        return self.engine

    def cancel(self) -> None:
        self.engine = None
        self.running = False

    def toggle_running(self) -> bool:
        if self.running:
            self.running = False
        else:
            self.start()
            self.running = True
        return self.running

    def step(self) -> StepResult:
        engine = self.start()
        res = engine.step()
        self.last_result = res
        if res.terminal:
            if res.status == SearchStatus.FOUND:
                self.grid.apply_path(res.path)
            self.engine = None
            self.running = False
        return res

    def step_until_visible(self, limit: int = 64) -> StepResult:
        """Step until a cell visibly changes, the search ends, or limit steps."""
        res = self.step()
        taken = 1
        while res.status == SearchStatus.SEARCHING and taken < limit:
            res = self.step()
            taken += 1
        return res
