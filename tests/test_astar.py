import heapq
import math
import random

import pytest

from pathpaint.core.astar import PathFinder, find_path
from pathpaint.core.cost import SQRT2, move_cost, path_cost
from pathpaint.core.errors import InvalidEndpoints
from pathpaint.core.grid import Grid
from pathpaint.core.types import Found, NotFound, SearchStatus


def _grid(width, height, walls=()):
    grid = Grid(width, height)
    for x, y in walls:
        grid.set_wall(x, y)
    return grid


def _dijkstra_cost(grid, spawn, target):
    """Reference shortest-path cost over the same 8-connected move model."""
    best = {spawn: 0.0}
    pq = [(0.0, spawn)]
    while pq:
        d, u = heapq.heappop(pq)
        if u == target:
            return d
        if d > best[u]:
            continue
        for cell in grid.neighbors_of(u):
            v = cell.position
            alt = d + move_cost(u, v)
            if alt < best.get(v, math.inf):
                best[v] = alt
                heapq.heappush(pq, (alt, v))
    return None


def _assert_walkable_chain(grid, path):
    for x, y in path:
        assert not grid.cell_at(x, y).is_wall
    for (ax, ay), (bx, by) in zip(path, path[1:]):
        assert max(abs(ax - bx), abs(ay - by)) == 1


# ---------- concrete scenarios ----------

def test_scenario_a_empty_diagonal():
    grid = _grid(5, 5)
    res = PathFinder().run(grid, (0, 0), (4, 4))
    assert isinstance(res, Found)
    assert res.path == ((0, 0), (1, 1), (2, 2), (3, 3), (4, 4))
    assert len(res) == 5
    assert abs(res.cost - 4 * math.sqrt(2)) < 1e-9


def test_scenario_b_full_wall_has_no_path():
    grid = _grid(3, 3, walls=[(1, 0), (1, 1), (1, 2)])
    finder = PathFinder()
    res = finder.run(grid, (0, 1), (2, 1))
    assert res == NotFound()
    assert not res.found
    assert finder.status == SearchStatus.NO_PATH_EXISTS


def test_scenario_c_detours_through_gap():
    grid = _grid(3, 3, walls=[(1, 0), (1, 1)])
    res = PathFinder().run(grid, (0, 0), (2, 0))
    assert isinstance(res, Found)
    assert res.path == ((0, 0), (0, 1), (1, 2), (2, 1), (2, 0))
    assert res.moves == 4
    assert (1, 2) in res.path
    _assert_walkable_chain(grid, res.path)
    assert abs(res.cost - (2 + 2 * SQRT2)) < 1e-9


def test_straight_run_on_empty_grid():
    grid = _grid(6, 3)
    res = find_path(grid, (0, 1), (5, 1))
    assert res.path == tuple((x, 1) for x in range(6))
    assert abs(res.cost - 5) < 1e-9


def test_direct_neighbor_gives_two_cells():
    res = find_path(_grid(2, 2), (0, 0), (1, 1))
    assert res.path == ((0, 0), (1, 1))


def test_enclosed_target_not_found():
    ring = [(x, y) for x in range(1, 4) for y in range(1, 4) if (x, y) != (2, 2)]
    grid = _grid(5, 5, walls=ring)
    res = find_path(grid, (0, 0), (2, 2))
    assert isinstance(res, NotFound)
    # the whole outside ring got explored and closed
    assert grid.cell_at(4, 4).closed


# ---------- properties ----------

@pytest.mark.parametrize("spawn,target", [
    ((0, 0), (7, 3)),
    ((6, 6), (1, 2)),
    ((3, 0), (3, 7)),
    ((0, 7), (7, 0)),
])
def test_empty_grid_cost_equals_octile_distance(spawn, target):
    grid = _grid(8, 8)
    res = find_path(grid, spawn, target)
    assert res.path[0] == spawn and res.path[-1] == target
    assert abs(res.cost - move_cost(spawn, target)) < 1e-9
    assert abs(path_cost(res.path) - res.cost) < 1e-9
    _assert_walkable_chain(grid, res.path)


@pytest.mark.parametrize("seed", range(12))
def test_random_grids_match_reference_cost(seed):
    rng = random.Random(seed)
    w, h = rng.randint(4, 14), rng.randint(4, 14)
    grid = _grid(w, h)
    free = [(x, y) for x in range(w) for y in range(h)]
    rng.shuffle(free)
    spawn, target = free[0], free[1]
    for x, y in free[2:]:
        if rng.random() < 0.3:
            grid.set_wall(x, y)

    res = find_path(grid, spawn, target)
    expected = _dijkstra_cost(grid, spawn, target)
    if expected is None:
        assert isinstance(res, NotFound)
        return
    assert isinstance(res, Found)
    assert res.path[0] == spawn and res.path[-1] == target
    _assert_walkable_chain(grid, res.path)
    assert abs(res.cost - expected) < 1e-9
    assert abs(path_cost(res.path) - res.cost) < 1e-9


def test_rerun_is_deterministic():
    grid = Grid.from_rows([
        [0, 0, 0, 0, 0, 0],
        [0, 1, 1, 1, 1, 0],
        [0, 0, 0, 0, 1, 0],
        [1, 1, 1, 0, 1, 0],
        [0, 0, 0, 0, 0, 0],
    ])

    def trace():
        finder = PathFinder()
        finder.start(grid, (0, 4), (5, 0))
        order = [r.current for r in finder.iter_steps()]
        return order, finder.result

    first_order, first = trace()
    second_order, second = trace()
    assert first == second
    assert first_order == second_order


def test_ties_break_on_h_then_insertion_order():
    # wall straight between spawn and target, two mirror-image detours
    grid = _grid(3, 3, walls=[(1, 1)])
    finder = PathFinder()
    finder.start(grid, (1, 0), (1, 2))

    r1 = finder.step()
    assert r1.current == (1, 0)
    assert r1.opened == [(2, 0), (0, 0), (2, 1), (0, 1)]

    # (2,1) and (0,1) tie on f and h; (2,1) was inserted first
    r2 = finder.step()
    assert r2.current == (2, 1)

    # target now ties (0,1) on f but has the lower h
    r3 = finder.step()
    assert r3.current == (1, 2)
    assert r3.status == SearchStatus.PATH_FOUND
    assert finder.result.path == ((1, 0), (2, 1), (1, 2))


def test_equal_cost_relaxation_keeps_first_parent():
    # several equal-cost routes reach (1,2); the parent set first must stay
    grid = Grid.from_rows([
        [0, 0, 0],
        [0, 1, 0],
        [1, 0, 1],
        [0, 0, 0],
    ])
    res = find_path(grid, (1, 0), (1, 3))
    assert res.path == ((1, 0), (2, 1), (1, 2), (1, 3))


def test_improved_cell_keeps_first_insertion_rank():
    # (2,3) is reached first, then improved later; it must keep its original
    # place among equal (f, h) entries
    grid = Grid.from_rows([
        [0, 0, 0, 0],
        [0, 1, 0, 0],
        [0, 1, 1, 0],
        [0, 0, 0, 1],
    ])
    res = find_path(grid, (3, 0), (0, 3))
    assert res.path == ((3, 0), (3, 1), (3, 2), (2, 3), (1, 3), (0, 3))


def test_popped_f_costs_never_decrease():
    grid = _grid(9, 9, walls=[(4, y) for y in range(1, 9)])
    finder = PathFinder()
    finder.start(grid, (0, 8), (8, 8))
    fs = []
    for r in finder.iter_steps():
        if r.current is not None:
            fs.append(grid.cell_at(*r.current).f_cost)
    assert all(b >= a - 1e-9 for a, b in zip(fs, fs[1:]))


# ---------- state machine & bookkeeping ----------

def test_status_transitions():
    grid = _grid(4, 4)
    finder = PathFinder()
    assert finder.status == SearchStatus.READY
    finder.start(grid, (0, 0), (3, 3))
    assert finder.status == SearchStatus.RUNNING
    results = list(finder.iter_steps())
    assert results[-1].status == SearchStatus.PATH_FOUND
    assert all(r.status == SearchStatus.RUNNING for r in results[:-1])
    assert finder.status.terminal


def test_step_after_terminal_repeats_outcome():
    grid = _grid(3, 3, walls=[(1, 0), (1, 1), (1, 2)])
    finder = PathFinder()
    finder.run(grid, (0, 0), (2, 2))
    again = finder.step()
    assert again.status == SearchStatus.NO_PATH_EXISTS
    assert again.result == NotFound()
    assert again.opened == [] and again.closed == []


def test_search_state_left_for_renderer():
    grid = _grid(5, 5)
    res = find_path(grid, (0, 0), (4, 0))
    spawn = grid.cell_at(0, 0)
    assert spawn.closed and spawn.g_cost == 0 and spawn.parent is None
    assert spawn.h_cost == 4
    target = grid.cell_at(4, 0)
    assert not target.closed
    assert target.parent == (3, 0)
    assert abs(target.g_cost - res.cost) < 1e-9
    for x, y in res.path[1:]:
        assert grid.cell_at(x, y).parent is not None


def test_start_resets_stale_state():
    grid = _grid(5, 5)
    find_path(grid, (0, 0), (4, 4))
    grid.set_wall(2, 2)
    res = find_path(grid, (4, 0), (0, 0))
    assert (2, 2) not in res.path
    assert grid.cell_at(4, 0).parent is None
    assert grid.cell_at(4, 0).g_cost == 0
    # the old spawn is the new target: it is never closed and gets a parent
    assert not grid.cell_at(0, 0).closed
    assert grid.cell_at(0, 0).parent is not None


def test_result_survives_grid_edits():
    grid = _grid(4, 4)
    res = find_path(grid, (0, 0), (3, 0))
    path = res.path
    grid.set_wall(1, 0)
    grid.reset_search_state()
    assert res.path == path


def test_metrics_after_found():
    grid = _grid(5, 5)
    finder = PathFinder()
    finder.run(grid, (0, 0), (4, 4))
    m = finder.step().metrics
    assert m["algo"] == "A*"
    assert m["path_len"] == 5
    assert abs(m["total_cost"] - 4 * SQRT2) < 1e-9
    assert m["popped"] == m["closed_count"] + 1


# ---------- preconditions ----------

@pytest.mark.parametrize("spawn,target", [
    (None, (1, 1)),
    ((0, 0), None),
    ((-1, 0), (1, 1)),
    ((0, 0), (3, 0)),
    ((1, 1), (1, 1)),
    ((1, 1), [1, 1]),
    ((2, 2), (0, 0)),
    (5, (1, 1)),
    ((0, 0), (1, 1, 0)),
    ((0,), (1, 1)),
    (("a", 0), (1, 1)),
    ((0, 0), (1.0, 1)),
])
def test_invalid_endpoints(spawn, target):
    grid = _grid(3, 3, walls=[(2, 2)])
    finder = PathFinder()
    with pytest.raises(InvalidEndpoints):
        finder.start(grid, spawn, target)
    assert finder.status == SearchStatus.INVALID_ENDPOINTS


def test_invalid_endpoints_leave_search_state_alone():
    grid = _grid(3, 3)
    find_path(grid, (0, 0), (2, 2))
    before = [(c.g_cost, c.closed, c.parent) for c in grid]
    with pytest.raises(InvalidEndpoints):
        find_path(grid, (1, 1), (1, 1))
    assert [(c.g_cost, c.closed, c.parent) for c in grid] == before


def test_find_path_defaults_to_grid_endpoints():
    grid = _grid(4, 4)
    grid.set_spawn(0, 3)
    grid.set_target(3, 3)
    res = find_path(grid)
    assert res.path[0] == (0, 3) and res.path[-1] == (3, 3)


def test_find_path_without_endpoints_fails():
    with pytest.raises(InvalidEndpoints):
        find_path(_grid(4, 4))
