import pytest

from stepstar.core.grid import GridModel
from stepstar.core.types import CellState, InvalidGrid


def test_new_grid_places_endpoints_in_corners():
    g = GridModel(5)
    assert g.start == (0, 0) and g.end == (4, 4)
    assert g.get_state(0, 0) == CellState.START
    assert g.get_state(4, 4) == CellState.END
    # everything else starts idle
    assert g.count_state(CellState.IDLE) == 23
    g.check_endpoints()


@pytest.mark.parametrize("size", [0, -3, 2.5, "4", True])
def test_bad_size_rejected(size):
    with pytest.raises(ValueError):
        GridModel(size)


def test_size_one_grid_shares_the_cell():
    g = GridModel(1)
    assert g.start == g.end == (0, 0)
    assert g.get_state(0, 0) == CellState.START
    g.check_endpoints()


def test_out_of_bounds_state_is_none():
    g = GridModel(3)
    assert g.get_state(-1, 0) is None
    assert g.get_state(3, 0) is None
    with pytest.raises(IndexError):
        g.cell(0, 3)


def test_neighbors_cardinal_order():
    g = GridModel(3)
    got = [c.pos for c in g.neighbors(1, 1)]
    assert got == [(0, 1), (2, 1), (1, 0), (1, 2)]


def test_neighbors_diagonal_after_cardinal():
    g = GridModel(3)
    got = [c.pos for c in g.neighbors(1, 1, allow_diagonal=True)]
    assert got == [(0, 1), (2, 1), (1, 0), (1, 2), (0, 0), (2, 0), (0, 2), (2, 2)]


def test_neighbors_skip_walls_and_bounds():
    g = GridModel(3)
    g.toggle_wall(1, 0)
    got = [c.pos for c in g.neighbors(0, 0, allow_diagonal=True)]
    assert got == [(0, 1), (1, 1)]


def test_toggle_wall_flips_and_refuses_endpoints():
    g = GridModel(3)
    assert g.toggle_wall(1, 1)
    assert g.get_state(1, 1) == CellState.WALL
    assert g.toggle_wall(1, 1)
    assert g.get_state(1, 1) == CellState.IDLE
    # endpoints and outside cells stay untouched
    assert not g.toggle_wall(0, 0)
    assert not g.toggle_wall(2, 2)
    assert not g.toggle_wall(5, 5)
    assert g.get_state(0, 0) == CellState.START
    assert g.get_state(2, 2) == CellState.END


def test_set_wall_explicit():
    g = GridModel(3)
    assert g.set_wall(1, 2, True)
    assert g.set_wall(1, 2, True)
    assert g.get_state(1, 2) == CellState.WALL
    assert g.set_wall(1, 2, False)
    assert g.get_state(1, 2) == CellState.IDLE
    assert not g.set_wall(0, 0, True)


def test_relocate_endpoint_moves_and_vacates():
    g = GridModel(4)
    g.toggle_wall(2, 1)
    assert g.relocate_endpoint(CellState.START, 2, 1)
    assert g.start == (2, 1)
    assert g.get_state(2, 1) == CellState.START
    assert g.get_state(0, 0) == CellState.IDLE
    assert g.move_endpoint(CellState.END, 0, 3)
    assert g.end == (0, 3)
    assert g.get_state(3, 3) == CellState.IDLE
    g.check_endpoints()


def test_relocate_endpoint_rejections():
    g = GridModel(3)
    # onto the other endpoint
    assert not g.relocate_endpoint(CellState.START, 2, 2)
    # out of bounds
    assert not g.relocate_endpoint(CellState.END, 3, 0)
    assert not g.relocate_endpoint(CellState.END, -1, 0)
    assert g.start == (0, 0) and g.end == (2, 2)
    with pytest.raises(ValueError):
        g.relocate_endpoint(CellState.WALL, 1, 1)


def test_clear_search_marks_keeps_walls_endpoints_and_costs():
    g = GridModel(3)
    g.toggle_wall(1, 1)
    g.cell(1, 0).state = CellState.OPEN
    g.cell(2, 0).state = CellState.CLOSED
    g.cell(0, 1).state = CellState.PATH
    g.cell(1, 0).g = 7
    g.clear_search_marks()
    assert g.get_state(1, 0) == CellState.IDLE
    assert g.get_state(2, 0) == CellState.IDLE
    assert g.get_state(0, 1) == CellState.IDLE
    assert g.get_state(1, 1) == CellState.WALL
    assert g.get_state(0, 0) == CellState.START
    assert g.cell(1, 0).g == 7


def test_apply_path_replaces_overlay():
    g = GridModel(3)
    g.cell(2, 0).state = CellState.CLOSED
    g.cell(1, 1).state = CellState.OPEN
    g.apply_path([(0, 0), (0, 1), (0, 2), (1, 2), (2, 2)])
    assert g.get_state(0, 1) == CellState.PATH
    assert g.get_state(1, 2) == CellState.PATH
    assert g.get_state(2, 0) == CellState.IDLE
    assert g.get_state(1, 1) == CellState.IDLE
    assert g.get_state(0, 0) == CellState.START
    assert g.get_state(2, 2) == CellState.END


def test_describe_reports_costs():
    g = GridModel(2)
    c = g.cell(1, 0)
    c.g, c.h, c.f = 1, 1, 2
    info = g.describe(1, 0)
    assert info == (CellState.IDLE, 1, 1, 2)
    assert info.f == info.g + info.h


def test_check_endpoints_detects_corruption():
    g = GridModel(3)
    g.cell(2, 2).state = CellState.IDLE
    with pytest.raises(InvalidGrid):
        g.check_endpoints()

    g = GridModel(3)
    g.cell(1, 1).state = CellState.START
    with pytest.raises(InvalidGrid):
        g.check_endpoints()
