import pytest

from pathpaint.app.layout import (
    BLOCK_GAP,
    BLOCK_OUTLINE,
    BLOCK_SIZE,
    canvas_size,
    cell_center,
    cell_rect,
    raycast_cell,
)


def test_outline_is_block_plus_gap():
    assert BLOCK_OUTLINE == BLOCK_SIZE + BLOCK_GAP == 33


def test_canvas_size():
    assert canvas_size(30, 30) == (993, 993)
    assert canvas_size(3, 2) == (102, 69)


def test_cell_rect():
    assert cell_rect((0, 0)) == (3, 3, 30, 30)
    assert cell_rect((2, 1)) == (69, 36, 30, 30)


def test_raycast_hits_cell_centers():
    for x in range(4):
        for y in range(3):
            cx, cy = cell_center((x, y))
            assert raycast_cell(cx, cy, 4, 3) == (x, y)


def test_raycast_splits_gaps():
    # first half-gap before a cell belongs to that cell
    assert raycast_cell(2, 2, 3, 3) == (0, 0)
    assert raycast_cell(34.5, 2, 3, 3) == (1, 0)
    assert raycast_cell(34.4, 2, 3, 3) == (0, 0)


@pytest.mark.parametrize("px,py", [(0, 10), (10, 0), (-5, -5), (101, 10), (10, 68)])
def test_raycast_off_board(px, py):
    assert raycast_cell(px, py, 3, 2) is None
