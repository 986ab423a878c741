# src/pathpaint/app/layout.py
"""
Pixel geometry of the board.

Cells are BLOCK_SIZE squares separated by BLOCK_GAP pixels of background, so
one cell plus its gap spans BLOCK_OUTLINE pixels.
"""

from typing import Optional, Tuple

from pathpaint.core.types import Position

BLOCK_SIZE = 30  # px
BLOCK_GAP = 3    # px
BLOCK_OUTLINE = BLOCK_SIZE + BLOCK_GAP


def canvas_size(width: int, height: int) -> Tuple[int, int]:
    return (BLOCK_OUTLINE * width + BLOCK_GAP, BLOCK_OUTLINE * height + BLOCK_GAP)


def cell_rect(pos: Position) -> Tuple[int, int, int, int]:
    """(left, top, w, h) of a cell on the canvas."""
    x, y = pos
    return (BLOCK_OUTLINE * x + BLOCK_GAP, BLOCK_OUTLINE * y + BLOCK_GAP, BLOCK_SIZE, BLOCK_SIZE)


def cell_center(pos: Position) -> Tuple[int, int]:
    left, top, w, h = cell_rect(pos)
    return (left + w // 2, top + h // 2)


def raycast_cell(px: float, py: float, width: int, height: int) -> Optional[Position]:
    """
    Cell under the cursor at canvas pixel (px, py), or None off the board.

    The cursor is shifted by half a gap so each gap is split between the two
    cells it separates.
    """
    px -= BLOCK_GAP / 2
    py -= BLOCK_GAP / 2

    x = int(px // BLOCK_OUTLINE)
    y = int(py // BLOCK_OUTLINE)

    if x < 0 or x >= width or y < 0 or y >= height:
        return None
    return (x, y)
