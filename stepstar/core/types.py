#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Optional, Dict, Any, NamedTuple

Coord = Tuple[int, int]  # (x, y) == (col, row)


class CellState(str, Enum):
    IDLE = "idle"
    WALL = "wall"
    START = "start"
    END = "end"
    OPEN = "open"
    CLOSED = "closed"
    PATH = "path"


ENDPOINT_STATES = (CellState.START, CellState.END)
SEARCH_MARKS = (CellState.OPEN, CellState.CLOSED, CellState.PATH)


class SearchStatus(str, Enum):
    IDLE = "idle"                    # constructed, never stepped
    SEARCHING = "searching"
    STATE_CHANGED = "state_changed"  # searching, and a cell's visible state flipped
    FOUND = "found"
    NOT_FOUND = "not_found"

    @property
    def terminal(self) -> bool:
        return self in (SearchStatus.FOUND, SearchStatus.NOT_FOUND)


class HeuristicKind(str, Enum):
    MANHATTAN = "manhattan"
    EUCLIDEAN = "euclidean"
    OCTILE = "octile"

    @classmethod
    def parse(cls, value) -> "HeuristicKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown heuristic {value!r}") from None


class InvalidGrid(ValueError):
    """Grid has no usable Start/End pair."""


@dataclass
class Cell:
    x: int
    y: int
    state: CellState = CellState.IDLE
    g: float = 0
    h: float = 0
    f: float = 0
    parent: Optional[int] = None     # index into the owning grid's cell list

    @property
    def pos(self) -> Coord:
        return (self.x, self.y)


class CellInfo(NamedTuple):
    state: CellState
    g: float
    h: float
    f: float


@dataclass
class StepResult:
    status: SearchStatus
    path: List[Coord] = field(default_factory=list)   # only filled on FOUND
    current: Optional[Coord] = None                    # node being expanded
    examined: Optional[Coord] = None                   # neighbor relaxed this step
    opened: List[Coord] = field(default_factory=list)
    closed: List[Coord] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def terminal(self) -> bool:
        return self.status.terminal
