"""Paint walls on a grid, mark a spawn and a target, watch A* find the way."""

__version__ = "0.1.0"
