import pytest

from roomgrow.dungeon import FLOOR_COLOR, Color, FloodFill, RasterSurface
from roomgrow.dungeon.cells import Rect

ROOM = Color(10, 20, 128)
OTHER = Color(200, 20, 128)


def _wall_with_gap():
    """7x5 room-colored surface split by a foreign wall at x=3 with a one-cell gap at (3,2)."""
    s = RasterSurface(7, 5, fill=ROOM)
    for y in range(5):
        if y != 2:
            s.set_pixel(3, y, OTHER)
    return s


def test_fill_equal_to_test_color_is_rejected():
    s = RasterSurface(3, 3, fill=ROOM)
    with pytest.raises(ValueError):
        FloodFill(s, ROOM, ROOM)


def test_plain_fill_of_clear_space_covers_everything():
    s = RasterSurface(4, 4)
    steps = FloodFill(s, FLOOR_COLOR).fill(0, 0)
    assert steps >= 16
    assert s.color_counts() == {FLOOR_COLOR: 16}


def test_plain_fill_leaks_through_one_cell_gap():
    s = _wall_with_gap()
    FloodFill(s, FLOOR_COLOR, ROOM).fill(1, 2)
    assert s.get_pixel(5, 2) == FLOOR_COLOR
    assert s.get_pixel(3, 2) == FLOOR_COLOR


def test_roomy_fill_does_not_cross_one_cell_gap():
    s = _wall_with_gap()
    ff = FloodFill(s, FLOOR_COLOR, ROOM, roomy=True)
    start = ff.find_suitable_fill_start_point(Rect(0, 0, 7, 5))
    assert start == (1, 1)
    ff.fill(start.x, start.y)
    filled = {(x, y) for x, y, c in s.iter_cells() if c == FLOOR_COLOR}
    assert filled == {(1, 1), (1, 2), (1, 3)}
    # gap and far side untouched
    assert s.get_pixel(3, 2) == ROOM
    assert s.get_pixel(5, 2) == ROOM


def test_roomy_fill_leaves_wall_ring_against_bounds():
    s = RasterSurface(6, 6, fill=ROOM)
    FloodFill(s, FLOOR_COLOR, ROOM, roomy=True).fill(2, 2)
    for x, y, c in s.iter_cells():
        on_edge = x in (0, 5) or y in (0, 5)
        assert (c == ROOM) == on_edge, (x, y, c)


def test_roomy_fill_stops_at_diagonal_touch():
    # two foreign wall runs that only meet at a corner between (2,2) and (3,3)
    s = RasterSurface(8, 8, fill=ROOM)
    for i in range(3):
        s.set_pixel(2, i, OTHER)
        s.set_pixel(3, 3 + i, OTHER)
    s.set_pixel(0, 2, OTHER)
    s.set_pixel(1, 2, OTHER)
    s.set_pixel(4, 3, OTHER)
    s.set_pixel(5, 3, OTHER)
    s.set_pixel(6, 3, OTHER)
    s.set_pixel(7, 3, OTHER)
    ff = FloodFill(s, FLOOR_COLOR, ROOM, roomy=True)
    ff.fill(5, 1)
    assert s.get_pixel(5, 1) == FLOOR_COLOR
    # nothing below the wall line on the far side of the corner
    assert all(s.get_pixel(x, y) != FLOOR_COLOR for x in range(8) for y in range(4, 8))


def test_no_start_point_when_region_too_thin():
    s = RasterSurface(5, 2, fill=ROOM)
    ff = FloodFill(s, FLOOR_COLOR, ROOM, roomy=True)
    assert ff.find_suitable_fill_start_point(Rect(0, 0, 5, 2)) is None


def test_step_fill_is_incremental():
    s = RasterSurface(3, 1)
    ff = FloodFill(s, FLOOR_COLOR)
    ff.start_fill(0, 0)
    assert ff.step_fill() is True
    assert s.get_pixel(0, 0) == FLOOR_COLOR
    assert s.get_pixel(2, 0) != FLOOR_COLOR
    while ff.step_fill():
        pass
    assert s.color_counts() == {FLOOR_COLOR: 3}
