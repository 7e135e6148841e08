from stepstar.app.viewer import format_cost, pixel_to_cell


def test_pixel_to_cell_inside_grid():
    # origin (16, 16), 20px cells, 5x5 grid
    assert pixel_to_cell((16, 16), (16, 16), 20, 5) == (0, 0)
    assert pixel_to_cell((55, 36), (16, 16), 20, 5) == (1, 1)
    assert pixel_to_cell((115, 115), (16, 16), 20, 5) == (4, 4)


def test_pixel_to_cell_outside_grid():
    assert pixel_to_cell((10, 40), (16, 16), 20, 5) is None
    assert pixel_to_cell((116, 40), (16, 16), 20, 5) is None
    assert pixel_to_cell((40, 200), (16, 16), 20, 5) is None


def test_format_cost():
    assert format_cost(8) == "8"
    assert format_cost(3.0) == "3"
    assert format_cost(1.41421) == "1.4"
