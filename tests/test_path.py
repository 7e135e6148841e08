import pytest

from stepstar.core.grid import GridModel
from stepstar.core.heuristics import Manhattan, Octile
from stepstar.core.path import path_cost, reconstruct_path


def _link(grid, chain):
    """Set parent indices along chain (start first)."""
    for prev, cur in zip(chain, chain[1:]):
        grid.cell(*cur).parent = grid.index(*prev)


def test_reconstruct_includes_both_endpoints():
    g = GridModel(3)
    chain = [(0, 0), (1, 0), (1, 1), (2, 1), (2, 2)]
    _link(g, chain)
    path = reconstruct_path(g, g.index(0, 0), g.index(2, 2))
    assert path == chain


def test_reconstruct_single_cell():
    g = GridModel(1)
    assert reconstruct_path(g, 0, 0) == [(0, 0)]


def test_broken_chain_raises():
    g = GridModel(3)
    _link(g, [(1, 1), (2, 2)])
    with pytest.raises(ValueError):
        reconstruct_path(g, g.index(0, 0), g.index(2, 2))


def test_cyclic_chain_raises():
    g = GridModel(3)
    g.cell(1, 1).parent = g.index(2, 2)
    g.cell(2, 2).parent = g.index(1, 1)
    with pytest.raises(ValueError):
        reconstruct_path(g, g.index(0, 0), g.index(2, 2))


def test_path_cost():
    path = [(0, 0), (1, 1), (2, 1)]
    assert path_cost(path, Octile()) == 24
    assert path_cost(path, Manhattan()) == 3
    assert path_cost([(0, 0)], Manhattan()) == 0
