#!/usr/bin/env python3
"""
Fixed-size grid of Cells.

The grid owns every Cell for the whole session. Only the wall/spawn/target
flags change while editing, and only the search fields change while a
PathFinder runs on it.
"""

from typing import Iterator, List, Optional, Sequence

from pathpaint.core.errors import BlockedCell, OutOfBounds
from pathpaint.core.types import Cell, Position

# E, W, S, N, then SE, SW, NE, NW. Fixed so expansions are reproducible.
NEIGHBOR_OFFSETS = (
    (1, 0), (-1, 0), (0, 1), (0, -1),
    (1, 1), (-1, 1), (1, -1), (-1, -1),
)


class Grid:
    def __init__(self, width: int, height: int):
        if not isinstance(width, int) or not isinstance(height, int) or width <= 0 or height <= 0:
            raise ValueError(f"grid size must be positive integers, got {width!r}x{height!r}")
        self.width = width
        self.height = height
        self.cells: List[List[Cell]] = [
            [Cell((x, y)) for x in range(width)] for y in range(height)
        ]   # [row][col]
        self._spawn: Optional[Position] = None
        self._target: Optional[Position] = None

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, spawn={self._spawn}, target={self._target})"

    def __iter__(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    # -------------------- queries --------------------

    def in_bounds(self, pos: Position) -> bool:
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, x: int, y: int) -> Cell:
        if not self.in_bounds((x, y)):
            raise OutOfBounds(x, y, self.width, self.height)
        return self.cells[y][x]

    def neighbors_of(self, pos: Position) -> List[Cell]:
        """Walkable cells among the 8 compass neighbors of pos."""
        x, y = pos
        self.cell_at(x, y)
        out: List[Cell] = []
        for dx, dy in NEIGHBOR_OFFSETS:
            n = (x + dx, y + dy)
            if not self.in_bounds(n):
                continue
            cell = self.cells[n[1]][n[0]]
            if not cell.is_wall:
                out.append(cell)
        return out

    @property
    def spawn(self) -> Optional[Position]:
        return self._spawn

    @property
    def target(self) -> Optional[Position]:
        return self._target

    def walls(self) -> List[Position]:
        return [c.position for c in self if c.is_wall]

    # -------------------- edits --------------------

    def set_wall(self, x: int, y: int, is_wall: bool = True) -> None:
        cell = self.cell_at(x, y)
        if is_wall and (cell.is_spawn or cell.is_target):
            raise BlockedCell(f"cannot place a wall on the {'spawn' if cell.is_spawn else 'target'} at ({x}, {y})")
        cell.is_wall = bool(is_wall)

    def set_spawn(self, x: int, y: int) -> None:
        cell = self.cell_at(x, y)
        if cell.is_wall:
            raise BlockedCell(f"spawn ({x}, {y}) is a wall")
        if cell.is_target:
            raise BlockedCell(f"spawn ({x}, {y}) is the target")
        self.clear_spawn()
        cell.is_spawn = True
        self._spawn = cell.position

    def set_target(self, x: int, y: int) -> None:
        cell = self.cell_at(x, y)
        if cell.is_wall:
            raise BlockedCell(f"target ({x}, {y}) is a wall")
        if cell.is_spawn:
            raise BlockedCell(f"target ({x}, {y}) is the spawn")
        self.clear_target()
        cell.is_target = True
        self._target = cell.position

    def clear_spawn(self) -> None:
        if self._spawn is not None:
            self.cell_at(*self._spawn).is_spawn = False
            self._spawn = None

    def clear_target(self) -> None:
        if self._target is not None:
            self.cell_at(*self._target).is_target = False
            self._target = None

    def clear_walls(self) -> None:
        for cell in self:
            cell.is_wall = False

    def reset_search_state(self) -> None:
        for cell in self:
            cell.reset_search_state()

    # -------------------- row-list form (map files) --------------------

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[int]],
        spawn: Optional[Position] = None,
        target: Optional[Position] = None,
    ) -> "Grid":
        """Build a grid from [row][col] values where 1 marks a wall."""
        if not rows or not rows[0]:
            raise ValueError("rows must be a non-empty list of non-empty rows")
        width = len(rows[0])
        if any(len(r) != width for r in rows):
            raise ValueError("rows must all have the same length")
        grid = cls(width, len(rows))
        for y, row in enumerate(rows):
            for x, v in enumerate(row):
                grid.cells[y][x].is_wall = bool(v)
        if spawn is not None:
            grid.set_spawn(*spawn)
        if target is not None:
            grid.set_target(*target)
        return grid

    def to_rows(self) -> List[List[int]]:
        return [[1 if c.is_wall else 0 for c in row] for row in self.cells]
