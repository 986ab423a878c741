#!/usr/bin/env python3
"""
Editor state machine between the user and the engine.

Edit phase:   EDITING_WALLS -> PLACING_SPAWN -> PLACING_TARGET -> READY
Search phase: READY -> SEARCHING -> FINISHED

Grid edits are only accepted in the three editing modes, so a search never
sees the grid change under it. Refused edits are logged and reported with a
False return instead of an exception, since they come straight from clicks.
"""

import logging
from enum import Enum
from typing import Optional

from pathpaint.core.astar import PathFinder
from pathpaint.core.errors import GridError, InvalidEndpoints
from pathpaint.core.grid import Grid
from pathpaint.core.types import PathResult, Position, SearchStatus, StepResult

logger = logging.getLogger(__name__)


class EditMode(str, Enum):
    EDITING_WALLS = "walls"
    PLACING_SPAWN = "spawn"
    PLACING_TARGET = "target"
    READY = "ready"
    SEARCHING = "searching"
    FINISHED = "finished"


EDIT_ORDER = (EditMode.EDITING_WALLS, EditMode.PLACING_SPAWN, EditMode.PLACING_TARGET, EditMode.READY)


class Editor:
    def __init__(self, grid: Grid, finder: Optional[PathFinder] = None):
        self.grid = grid
        self.finder = finder or PathFinder()
        self.mode = EditMode.EDITING_WALLS

    @property
    def editing(self) -> bool:
        return self.mode in (EditMode.EDITING_WALLS, EditMode.PLACING_SPAWN, EditMode.PLACING_TARGET)

    @property
    def has_endpoints(self) -> bool:
        return self.grid.spawn is not None and self.grid.target is not None

    @property
    def status(self) -> SearchStatus:
        if self.mode in (EditMode.SEARCHING, EditMode.FINISHED):
            return self.finder.status
        return SearchStatus.READY

    @property
    def result(self) -> Optional[PathResult]:
        return self.finder.result if self.mode == EditMode.FINISHED else None

    # -------------------- modes --------------------

    def set_mode(self, mode: EditMode) -> bool:
        if mode in (EditMode.SEARCHING, EditMode.FINISHED):
            logger.warning("Mode %s is entered by searching, not directly", mode.value)
            return False
        if mode == EditMode.READY and not self.has_endpoints:
            logger.warning("Place both spawn and target before searching")
            return False
        if not self.editing and self.mode != EditMode.READY:
            self._clear_search()
        logger.debug("Editor mode %s -> %s", self.mode.value, mode.value)
        self.mode = mode
        return True

    def advance(self) -> bool:
        """Move to the next editing mode."""
        if self.mode not in EDIT_ORDER or self.mode == EditMode.READY:
            return False
        return self.set_mode(EDIT_ORDER[EDIT_ORDER.index(self.mode) + 1])

    def edit(self) -> None:
        """Back to wall painting, dropping any search overlay."""
        self._clear_search()
        self.mode = EditMode.EDITING_WALLS

    def clear(self) -> None:
        self.edit()
        self.grid.clear_walls()
        self.grid.clear_spawn()
        self.grid.clear_target()

    # -------------------- edits --------------------

    def _refuse_if_locked(self, what: str) -> bool:
        if self.editing:
            return False
        logger.warning("Ignoring %s while in %s mode", what, self.mode.value)
        return True

    def paint(self, pos: Position, wall: bool = True) -> bool:
        """Paint or erase one wall cell. Spawn and target cells are skipped."""
        if self._refuse_if_locked("wall edit") or self.mode != EditMode.EDITING_WALLS:
            return False
        x, y = pos
        try:
            cell = self.grid.cell_at(x, y)
            if cell.is_spawn or cell.is_target or cell.is_wall == wall:
                return False
            self.grid.set_wall(x, y, wall)
        except GridError as ex:
            logger.warning("Wall edit refused: %s", ex)
            return False
        return True

    def click(self, pos: Position) -> bool:
        """Apply a left click at pos according to the current mode."""
        if self._refuse_if_locked("click"):
            return False
        if self.mode == EditMode.EDITING_WALLS:
            return self.paint(pos, wall=True)
        try:
            if self.mode == EditMode.PLACING_SPAWN:
                self.grid.set_spawn(*pos)
            else:
                self.grid.set_target(*pos)
        except GridError as ex:
            logger.warning("Placement refused: %s", ex)
            return False
        return True

    # -------------------- search --------------------

    def start_search(self) -> bool:
        if self.mode != EditMode.READY:
            logger.warning("Search needs READY mode, editor is in %s", self.mode.value)
            return False
        try:
            self.finder.start(self.grid, self.grid.spawn, self.grid.target)
        except InvalidEndpoints as ex:
            logger.warning("Cannot search: %s", ex)
            return False
        self.mode = EditMode.SEARCHING
        return True

    def step(self) -> Optional[StepResult]:
        """One expansion; starts the search first when READY."""
        if self.mode == EditMode.READY and not self.start_search():
            return None
        if self.mode not in (EditMode.SEARCHING, EditMode.FINISHED):
            return None
        res = self.finder.step()
        if res.status.terminal and self.mode == EditMode.SEARCHING:
            self.mode = EditMode.FINISHED
            if res.status == SearchStatus.NO_PATH_EXISTS:
                logger.info("No path from %s to %s", self.grid.spawn, self.grid.target)
            else:
                logger.info("Path of %d cells, cost %.3f", res.metrics["path_len"], res.metrics["total_cost"])
        return res

    def solve(self) -> Optional[PathResult]:
        """Run (or finish) the search synchronously."""
        if self.mode == EditMode.READY and not self.start_search():
            return None
        if self.mode not in (EditMode.SEARCHING, EditMode.FINISHED):
            return None
        while self.mode == EditMode.SEARCHING:
            self.step()
        return self.finder.result

    def reset_search(self) -> None:
        """Drop the search and return to READY with the same grid."""
        if self.mode not in (EditMode.SEARCHING, EditMode.FINISHED):
            return
        self._clear_search()
        self.mode = EditMode.READY

    def _clear_search(self) -> None:
        self.grid.reset_search_state()
        self.finder = PathFinder(name=self.finder.name)
