#!/usr/bin/env python3
"""
Run configuration, passed explicitly into the session and engine.

Resolution order (later wins):
    defaults -> environment (STEPSTAR_*) -> CLI flags (--key=value)

    STEPSTAR_GRID_SIZE / --size=N
    STEPSTAR_HEURISTIC / --heuristic=manhattan|euclidean|octile
    STEPSTAR_DIAGONAL  / --diagonal[=yes|no]
    STEPSTAR_SPEED     / --speed=N          (steps per second)
    STEPSTAR_LOG_LEVEL / --log-level=LEVEL
"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from stepstar.core.types import HeuristicKind

logger = logging.getLogger(__name__)

DEFAULT_GRID_SIZE = 5
MIN_GRID_SIZE = 1
MAX_GRID_SIZE = 50
DEFAULT_STEPS_PER_SEC = 8
MIN_STEPS_PER_SEC = 1
MAX_STEPS_PER_SEC = 60
DEFAULT_LOG_LEVEL = "WARNING"

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


@dataclass
class SearchConfig:
    grid_size: int = DEFAULT_GRID_SIZE
    heuristic: HeuristicKind = HeuristicKind.MANHATTAN
    allow_diagonal: bool = False
    steps_per_sec: int = DEFAULT_STEPS_PER_SEC
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        self.grid_size = clamp(int(self.grid_size), MIN_GRID_SIZE, MAX_GRID_SIZE)
        self.heuristic = HeuristicKind.parse(self.heuristic)
        self.allow_diagonal = bool(self.allow_diagonal)
        self.steps_per_sec = clamp(int(self.steps_per_sec), MIN_STEPS_PER_SEC, MAX_STEPS_PER_SEC)
        self.log_level = str(self.log_level).upper()


def _parse_bool(raw: str, key: str, default: bool) -> bool:
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    logger.warning("ignoring %s=%r, expected yes/no", key, raw)
    return default


def _parse_int(raw: str, key: str, default: int) -> int:
    try:
        return int(raw)
    except ValueError:
        logger.warning("ignoring %s=%r, expected an integer", key, raw)
        return default


def _parse_heuristic(raw: str, key: str, default: HeuristicKind) -> HeuristicKind:
    try:
        return HeuristicKind.parse(raw)
    except ValueError:
        logger.warning("ignoring %s=%r, expected one of %s",
                       key, raw, ", ".join(k.value for k in HeuristicKind))
        return default


def _parse_level(raw: str, key: str, default: str) -> str:
    level = raw.strip().upper()
    if isinstance(logging.getLevelName(level), int):
        return level
    logger.warning("ignoring %s=%r, not a logging level", key, raw)
    return default


def resolve_config(argv: Optional[Sequence[str]] = None,
                   environ: Optional[Mapping[str, str]] = None) -> SearchConfig:
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ
    d = SearchConfig()

    raw = {
        "size": environ.get("STEPSTAR_GRID_SIZE"),
        "heuristic": environ.get("STEPSTAR_HEURISTIC"),
        "diagonal": environ.get("STEPSTAR_DIAGONAL"),
        "speed": environ.get("STEPSTAR_SPEED"),
        "log-level": environ.get("STEPSTAR_LOG_LEVEL"),
    }
    for arg in argv:
        if not arg.startswith("--"):
            continue
        key, sep, value = arg[2:].partition("=")
        if key not in raw:
            continue
        if not sep and key == "diagonal":
            value = "yes"
        raw[key] = value

    def pick(key, parse, default):
        return default if raw[key] is None else parse(raw[key], key, default)

    return SearchConfig(
        grid_size=pick("size", _parse_int, d.grid_size),
        heuristic=pick("heuristic", _parse_heuristic, d.heuristic),
        allow_diagonal=pick("diagonal", _parse_bool, d.allow_diagonal),
        steps_per_sec=pick("speed", _parse_int, d.steps_per_sec),
        log_level=pick("log-level", _parse_level, d.log_level),
    )
