#!/usr/bin/env python3
"""
Cost model for 8-connected unit grids.

Orthogonal steps cost 1 and diagonal steps cost sqrt(2). The octile distance
is the exact obstacle-free cost between two cells, so using it as the A*
heuristic keeps h admissible and consistent.
"""

import math
from typing import Sequence

from pathpaint.core.types import Position

SQRT2 = math.sqrt(2.0)


def move_cost(a: Position, b: Position) -> float:
    """Octile distance between a and b."""
    dx = abs(a[0] - b[0])
    dy = abs(a[1] - b[1])
    return min(dx, dy) * SQRT2 + abs(dx - dy)


def heuristic(a: Position, b: Position) -> float:
    return move_cost(a, b)


def path_cost(path: Sequence[Position]) -> float:
    total = 0.0
    for a, b in zip(path, path[1:]):
        total += move_cost(a, b)
    return total
