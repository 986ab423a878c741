"""Errors raised by the grid and the path finder.

A search that exhausts the open set is not an error: it ends in the
``NotFound`` result with ``SearchStatus.NO_PATH_EXISTS``.
"""


class GridError(Exception):
    """Base class for every refused grid or search operation."""


class OutOfBounds(GridError, IndexError):
    def __init__(self, x, y, width: int, height: int):
        super().__init__(f"({x}, {y}) is outside the {width}x{height} grid")
        self.x = x
        self.y = y
        self.width = width
        self.height = height


class BlockedCell(GridError, ValueError):
    """Spawn/target placed on a wall or on each other, or a wall painted over one of them."""


class InvalidEndpoints(GridError, ValueError):
    """Search started without a valid, distinct, walkable spawn and target."""
