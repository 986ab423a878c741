#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

Position = Tuple[int, int]  # (col, row)


@dataclass
class Cell:
    position: Position
    is_wall: bool = False
    is_spawn: bool = False
    is_target: bool = False

    # search state, only meaningful during/after a run
    g_cost: float = 0.0
    h_cost: float = 0.0
    closed: bool = False
    parent: Optional[Position] = None   # key into the owning grid, never a Cell

    @property
    def f_cost(self) -> float:
        return self.g_cost + self.h_cost

    @property
    def x(self) -> int:
        return self.position[0]

    @property
    def y(self) -> int:
        return self.position[1]

    def reset_search_state(self) -> None:
        self.g_cost = 0.0
        self.h_cost = 0.0
        self.closed = False
        self.parent = None


@dataclass(frozen=True)
class Found:
    path: Tuple[Position, ...]    # spawn first, target last
    cost: float

    found = True

    @property
    def moves(self) -> int:
        return len(self.path) - 1

    def __len__(self) -> int:
        return len(self.path)


@dataclass(frozen=True)
class NotFound:
    found = False

    def __len__(self) -> int:
        return 0


PathResult = Union[Found, NotFound]


class SearchStatus(str, Enum):
    READY = "ready"
    RUNNING = "running"
    PATH_FOUND = "path_found"
    NO_PATH_EXISTS = "no_path"
    INVALID_ENDPOINTS = "invalid_endpoints"

    @property
    def terminal(self) -> bool:
        return self not in (SearchStatus.READY, SearchStatus.RUNNING)


@dataclass
class StepResult:
    status: SearchStatus
    opened: List[Position] = field(default_factory=list)
    closed: List[Position] = field(default_factory=list)
    current: Optional[Position] = None
    result: Optional[PathResult] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
