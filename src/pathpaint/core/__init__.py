"""Grid path-finding engine: cells, grid, octile cost model and A*."""

from pathpaint.core.astar import PathFinder, find_path
from pathpaint.core.cost import heuristic, move_cost, path_cost
from pathpaint.core.errors import BlockedCell, GridError, InvalidEndpoints, OutOfBounds
from pathpaint.core.grid import Grid
from pathpaint.core.types import Cell, Found, NotFound, PathResult, Position, SearchStatus, StepResult

__all__ = [
    "BlockedCell",
    "Cell",
    "Found",
    "Grid",
    "GridError",
    "InvalidEndpoints",
    "NotFound",
    "OutOfBounds",
    "PathFinder",
    "PathResult",
    "Position",
    "SearchStatus",
    "StepResult",
    "find_path",
    "heuristic",
    "move_cost",
    "path_cost",
]
