#!/usr/bin/env python3
"""
A* over an 8-connected Grid, one expansion per step() for animation.

API used by the editor/viewer:
- start(grid, spawn, target) - step() -> StepResult - iter_steps()
- run(grid, spawn, target) -> PathResult for a synchronous search

Cost model: octile moves, octile heuristic (see core.cost).

Tie-breaking in the PQ:
- (f, h, seq, g, pos): lower f, then lower h, then first-inserted by seq.
  A cell keeps the seq of its first insertion when its g improves, so the
  order does not depend on how many times it was relaxed.

Search bookkeeping (g, h, closed, parent) lives on the grid's Cells so a
renderer can draw cost overlays straight from the grid.
"""

import heapq
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from pathpaint.core.cost import heuristic, move_cost
from pathpaint.core.errors import InvalidEndpoints
from pathpaint.core.grid import Grid
from pathpaint.core.types import (
    Cell,
    Found,
    NotFound,
    PathResult,
    Position,
    SearchStatus,
    StepResult,
)

logger = logging.getLogger(__name__)


@dataclass
class PathFinder:
    name: str = "A*"

    # Internal state
    grid: Optional[Grid] = None
    spawn: Optional[Position] = None
    target: Optional[Position] = None
    status: SearchStatus = SearchStatus.READY
    result: Optional[PathResult] = None
    open_pq: List[Tuple[float, float, int, float, Position]] = field(default_factory=list)  # (f, h, seq, g, pos)
    open_seq: Dict[Position, int] = field(default_factory=dict)   # positions currently open -> first seq
    popped_count: int = 0
    closed_count: int = 0
    seq: int = 0  # monotonic counter for PQ stability

    # -------------------- lifecycle --------------------

    def start(self, grid: Grid, spawn: Optional[Position], target: Optional[Position]) -> None:
        """Validate endpoints, clear the grid's search state and seed the open set."""
        self.grid = grid
        self.spawn = spawn
        self.target = target
        self.result = None
        self.open_pq.clear()
        self.open_seq.clear()
        self.popped_count = 0
        self.closed_count = 0
        self.seq = 0
        self.status = SearchStatus.READY

        try:
            self._validate_endpoints()
        except InvalidEndpoints:
            self.status = SearchStatus.INVALID_ENDPOINTS
            raise

        grid.reset_search_state()
        s = grid.cell_at(*self.spawn)
        s.g_cost = 0.0
        s.h_cost = heuristic(self.spawn, self.target)
        self._push(s, first=True)
        self.status = SearchStatus.RUNNING
        logger.debug("%s search on %r from %s to %s", self.name, grid, spawn, target)

    def run(self, grid: Grid, spawn: Optional[Position], target: Optional[Position]) -> PathResult:
        """Run a whole search synchronously and return its result."""
        self.start(grid, spawn, target)
        for _ in self.iter_steps():
            pass
        return self.result

    def iter_steps(self) -> Iterator[StepResult]:
        """Yield one StepResult per expansion until the search terminates."""
        while self.status == SearchStatus.RUNNING:
            yield self.step()

    # -------------------- helpers --------------------

    @staticmethod
    def _as_position(label: str, pos) -> Position:
        if pos is None:
            raise InvalidEndpoints(f"{label} is not set")
        if (not isinstance(pos, (tuple, list)) or len(pos) != 2
                or not all(isinstance(v, int) and not isinstance(v, bool) for v in pos)):
            raise InvalidEndpoints(f"{label} must be an (x, y) pair of ints, got {pos!r}")
        return (pos[0], pos[1])

    def _validate_endpoints(self) -> None:
        grid = self.grid
        self.spawn = self._as_position("spawn", self.spawn)
        self.target = self._as_position("target", self.target)
        for label, pos in (("spawn", self.spawn), ("target", self.target)):
            if not grid.in_bounds(pos):
                raise InvalidEndpoints(f"{label} {pos} is outside the {grid.width}x{grid.height} grid")
            if grid.cell_at(*pos).is_wall:
                raise InvalidEndpoints(f"{label} {pos} is a wall")
        if self.spawn == self.target:
            raise InvalidEndpoints(f"spawn and target are the same cell {self.spawn}")

    def _bump(self) -> int:
        self.seq += 1
        return self.seq

    def _push(self, cell: Cell, first: bool) -> None:
        if first:
            self.open_seq[cell.position] = self._bump()
        seq = self.open_seq[cell.position]
        heapq.heappush(self.open_pq, (cell.f_cost, cell.h_cost, seq, cell.g_cost, cell.position))

    def _reconstruct_path(self, end: Cell) -> Tuple[Position, ...]:
        path: List[Position] = []
        cur: Optional[Position] = end.position
        while cur is not None:
            path.append(cur)
            cur = self.grid.cell_at(*cur).parent
        path.reverse()
        return tuple(path)

    def _finish(self, status: SearchStatus, result: PathResult) -> None:
        self.status = status
        self.result = result
        if isinstance(result, Found):
            logger.debug("%s found a path of %d cells, cost %.3f after %d expansions",
                         self.name, len(result), result.cost, self.popped_count)
        else:
            logger.debug("%s exhausted the open set after %d expansions", self.name, self.popped_count)

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        """
        Run ONE A* expansion:
          - Pop the open cell with the lowest (f, h, seq).
          - If it is the target, reconstruct and finish.
          - Else close it and relax its walkable, non-closed neighbors.
        """
        if self.status != SearchStatus.RUNNING:
            return StepResult(status=self.status, result=self.result, metrics=self._metrics())

        # Pop best live entry, skipping ones superseded by a cheaper g
        u: Optional[Cell] = None
        while self.open_pq:
            _, _, _, g_entry, pos = heapq.heappop(self.open_pq)
            cell = self.grid.cell_at(*pos)
            if pos in self.open_seq and g_entry == cell.g_cost:
                u = cell
                break

        if u is None:
            self._finish(SearchStatus.NO_PATH_EXISTS, NotFound())
            return StepResult(status=self.status, result=self.result, metrics=self._metrics())

        del self.open_seq[u.position]
        self.popped_count += 1

        if u.position == self.target:
            path = self._reconstruct_path(u)
            self._finish(SearchStatus.PATH_FOUND, Found(path=path, cost=u.g_cost))
            return StepResult(status=self.status, current=u.position, result=self.result,
                              metrics=self._metrics())

        # Finalize u
        u.closed = True
        self.closed_count += 1

        opened_now: List[Position] = []
        for v in self.grid.neighbors_of(u.position):
            if v.closed:
                continue
            alt = u.g_cost + move_cost(u.position, v.position)
            if v.position not in self.open_seq:
                v.g_cost = alt
                v.h_cost = heuristic(v.position, self.target)
                v.parent = u.position
                self._push(v, first=True)
                opened_now.append(v.position)
            elif alt < v.g_cost:
                v.g_cost = alt
                v.parent = u.position
                self._push(v, first=False)

        return StepResult(
            status=self.status,
            opened=opened_now,
            closed=[u.position],
            current=u.position,
            metrics=self._metrics(),
        )

    # -------------------- metrics --------------------

    def _metrics(self) -> dict:
        found = isinstance(self.result, Found)
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.open_seq),
            "closed_count": self.closed_count,
            "path_len": len(self.result) if found else 0,
            "total_cost": self.result.cost if found else None,
        }


def find_path(
    grid: Grid,
    spawn: Optional[Position] = None,
    target: Optional[Position] = None,
) -> PathResult:
    """Search grid from spawn to target, defaulting to the grid's flagged endpoints."""
    if spawn is None:
        spawn = grid.spawn
    if target is None:
        target = grid.target
    return PathFinder().run(grid, spawn, target)
