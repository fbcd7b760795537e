import pytest

from roomgrow.dungeon import (
    CLEAR_COLOR,
    FLOOR_COLOR,
    VOID_COLOR,
    Color,
    Dungeon,
    DungeonBuilder,
    RasterSurface,
    build,
    prepare_build,
)
from roomgrow.dungeon.cells import EAST, WEST, Rect
from roomgrow.dungeon.colors import RESERVED_KEYS
from roomgrow.dungeon.config import DungeonConfig
from roomgrow.dungeon.dungeon import resolve_surface
from roomgrow.dungeon.pipeline import DONE, GROWING
from roomgrow.dungeon.tiles import surface_to_rows


class CountingRng:
    def __init__(self, value):
        self.value = value
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.value


def test_grid_seeding_on_64x64():
    builder = DungeonBuilder(RasterSurface(64, 64))
    planted = builder.seed(16, 0, 1.0, rng=lambda: 0.5)
    assert planted == 16
    assert builder.phase == GROWING
    # row-major grid order, color derived from normalized seed position
    assert builder.rooms[0].color == Color(0, 0, 128)
    assert builder.rooms[1].color == Color(64, 0, 128)
    assert builder.rooms[4].color == Color(0, 64, 128)
    assert [r.id for r in builder.rooms] == list(range(16))
    builder.generate_rooms()
    assert builder.done()
    assert len(builder.rooms) == 16
    assert CLEAR_COLOR not in builder.surface.color_counts()
    assert len({r.color.key for r in builder.rooms}) == 16
    assert builder.metrics["rooms"] == 16
    # one door per horizontal or vertical grid neighbor on the 4x4 layout
    expected = {(i, i + 1) for i in range(16) if i % 4 != 3} | {(i, i + 4) for i in range(12)}
    pairs = [tuple(sorted((d.room_id, d.neighbor_id))) for d in builder.doors]
    assert len(expected) == 24
    assert len(pairs) == 24
    assert set(pairs) == expected
    assert set(builder.connectivity.pairs()) == expected
    assert builder.metrics["doors_created"] == 24
    assert builder.metrics["doors_rejected"] == 0


def test_rng_draws_only_jitter_when_frequency_is_one():
    rng = CountingRng(0.5)
    builder = DungeonBuilder(RasterSurface(64, 64))
    builder.seed(16, 0, 1.0, rng=rng)
    assert rng.calls == 32


def test_rejected_grid_points_draw_no_jitter():
    rng = CountingRng(0.9)
    builder = DungeonBuilder(RasterSurface(64, 64))
    assert builder.seed(16, 0, 0.5, rng=rng) == 0
    assert rng.calls == 16
    assert builder.rooms == []


def test_void_surface_builds_nothing():
    surface = RasterSurface(20, 20, fill=VOID_COLOR)
    before = surface.copy()
    out, info = build(surface, seed=3)
    assert out is surface
    assert out == before
    assert info.rooms == []
    assert info.doors == []
    assert info.metrics["rooms"] == 0


def test_two_rooms_share_exactly_one_door(two_room_builder):
    b = two_room_builder
    a, other = b.rooms
    assert a.bounding_box() == Rect(0, 0, 6, 9)
    assert other.bounding_box() == Rect(6, 0, 14, 9)
    assert b.rooms_touching_room(a) == [other]
    assert b.are_rooms_neighbors(a, other)
    assert b.are_rooms_connected(other, a)
    assert list(b.connectivity.pairs()) == [(0, 1)]
    assert len(b.doors) == 1
    door = b.doors[0]
    assert (door.room_id, door.neighbor_id) == (0, 1)
    assert (door.x, door.y, door.direction) == (4, 4, EAST)
    assert door.cells == [(5, 4), (6, 4)]
    rows = surface_to_rows(b.surface, b.floor_color, b.void_color, b.doors)
    assert rows[0] == "W" * 20
    assert rows[4] == "W....DD............W"
    assert rows[1] == "W....WW............W"


def test_floor_leaves_one_cell_wall_per_room(two_room_builder):
    s = two_room_builder.surface
    a, other = two_room_builder.rooms
    assert s.get_pixel(5, 1) == a.color
    assert s.get_pixel(6, 1) == other.color
    assert s.get_pixel(4, 1) == FLOOR_COLOR
    assert s.get_pixel(7, 1) == FLOOR_COLOR


def test_door_rejected_when_not_mutual_neighbors(two_room_builder):
    b = two_room_builder
    a, other = b.rooms
    a.adjacent_color_keys = set()
    assert b.mark_door_connecting_rooms(a, other) is False
    assert b.metrics["doors_rejected"] == 1


def test_create_doors_skips_connected_pairs(two_room_builder):
    b = two_room_builder
    before = b.surface.copy()
    assert b.create_doors_for_room(b.rooms[1]) == []
    assert b.surface == before


def _void_split_builder():
    # two 10-wide regions divided by a one-cell void column at x=10
    mask = ["." * 10 + "#" + "." * 10 for _ in range(9)]
    builder = DungeonBuilder(RasterSurface.from_mask(mask))
    builder.seed(11, 0, 1.0, rng=lambda: 0.5)
    builder.generate_rooms()
    return builder


def test_door_is_carved_across_void_even_when_pair_is_rejected():
    b = _void_split_builder()
    a, other = b.rooms
    assert not b.are_rooms_neighbors(a, other)
    # each side carves its own tunnel; neither is recorded as a connection
    assert [(d.room_id, d.neighbor_id, d.x, d.y, d.direction) for d in b.doors] == [
        (0, 1, 8, 4, EAST),
        (1, 0, 12, 5, WEST),
    ]
    assert b.doors[0].cells == [(9, 4), (10, 4), (11, 4)]
    assert b.doors[1].cells == [(11, 5), (10, 5), (9, 5)]
    assert len(b.connectivity) == 0
    assert b.metrics["doors_created"] == 2
    assert b.metrics["doors_rejected"] == 2
    rows = surface_to_rows(b.surface, b.floor_color, b.void_color, b.doors)
    assert rows[3] == "W........W#W........W"
    assert rows[4] == "W........DDD........W"
    assert rows[5] == "W........DDD........W"
    for x in range(8, 13):
        assert b.surface.get_pixel(x, 4) == FLOOR_COLOR


def test_colliding_seed_colors_step_blue_past_reserved_keys():
    builder = DungeonBuilder(RasterSurface(4, 4))
    # every blue from 128 up is already taken for red=0, green=0
    for i, blue in enumerate(range(128, 256)):
        builder.room_ids_by_color[Color(0, 0, blue).key] = i
    color = builder._unique_room_color(0, 0, 64, 64)
    # blue wraps to 0, which would be the void color, so 1 is next
    assert color == Color(0, 0, 1)
    assert builder.metrics["color_collisions"] == 1


def test_dense_seeding_keeps_wall_colors_unique_and_unreserved():
    builder = DungeonBuilder(RasterSurface(600, 1))
    assert builder.seed(1, 0, 1.0, rng=lambda: 0.5) == 600
    keys = [r.color.key for r in builder.rooms]
    assert len(set(keys)) == 600
    assert not RESERVED_KEYS & set(keys)
    assert CLEAR_COLOR.key not in keys
    assert builder.metrics["color_collisions"] > 0


def test_doors_match_connectivity_and_pairs_unique():
    builder = prepare_build((96, 64), seed=1234)
    builder.generate_rooms()
    marked = [
        tuple(sorted((d.room_id, d.neighbor_id)))
        for d in builder.doors
        if builder.connectivity.are_connected(d.room_id, d.neighbor_id)
    ]
    assert len(marked) == len(set(marked)) == len(builder.connectivity)
    assert builder.metrics["doors_created"] == len(builder.doors)
    for door in builder.doors:
        for x, y in door.cells:
            assert builder.surface.get_pixel(x, y) == FLOOR_COLOR


def test_build_is_deterministic_for_seed():
    s1, info1 = build((80, 60), seed=42, wiggle=0.4, frequency=0.8)
    s2, info2 = build((80, 60), seed=42, wiggle=0.4, frequency=0.8)
    assert s1 == s2
    assert [d.to_dict() for d in info1.doors] == [d.to_dict() for d in info2.doors]
    assert [r.to_dict() for r in info1.rooms] == [r.to_dict() for r in info2.rooms]


def test_advance_matches_blocking_generation():
    stepped = prepare_build((70, 50), seed=99, wiggle=0.3)
    ticks = 0
    while stepped.advance():
        ticks += 1
        assert not stepped.done()
    assert stepped.done()
    assert stepped.phase == DONE
    assert stepped.advance() is False

    blocking = prepare_build((70, 50), seed=99, wiggle=0.3)
    blocking.generate_rooms()
    assert stepped.surface == blocking.surface
    assert stepped.tick_count == blocking.tick_count == ticks + 1


def test_out_of_range_options_are_coerced():
    builder = prepare_build((128, 128), frequency=0, room_grid_size=4, seed=7, rng=lambda: 0.05)
    assert builder.config.frequency == pytest.approx(0.1)
    assert builder.config.room_grid_size == 8
    # step 128 / 8 = 16; a zero frequency still accepts draws below 0.1
    assert len(builder.rooms) == 64


def test_no_clear_cells_remain_in_open_surface():
    surface, info = build((60, 40), seed=5)
    assert CLEAR_COLOR not in surface.color_counts()
    assert info.metrics["rooms"] == len(info.rooms) > 0


def test_mask_void_cells_survive_build():
    mask = ["#" * 30] + ["#" + "." * 28 + "#" for _ in range(18)] + ["#" * 30]
    surface = RasterSurface.from_mask(mask)
    voids = {(x, y) for x, y, c in surface.iter_cells() if c == VOID_COLOR}
    build(surface, seed=8)
    assert voids == {(x, y) for x, y, c in surface.iter_cells() if c == VOID_COLOR}


def test_room_info_serializes():
    _, info = build((40, 40), seed=2)
    data = info.to_dict()
    assert set(data) == {"floorColor", "voidColor", "rooms", "doors", "metrics"}
    assert data["floorColor"]["hash"] == "255-255-255-255"
    assert data["voidColor"]["hash"] == "0-0-0-255"
    for room in data["rooms"]:
        assert set(room) == {"id", "color", "bounds"}


def test_dungeon_object_wraps_build():
    d = Dungeon(seed=11, size=(40, 30))
    assert d.seed == 11
    rows = d.rows()
    assert len(rows) == 30 and all(len(r) == 40 for r in rows)
    assert d.metrics["rooms"] == len(d.rooms)


def test_resolve_surface_variants():
    assert resolve_surface((3, 4)).width == 3
    assert resolve_surface({"width": 5, "height": 2}).height == 2
    existing = RasterSurface(2, 2)
    assert resolve_surface(existing) is existing
    with pytest.raises(ValueError):
        resolve_surface("not a map")


def test_dungeon_size_does_not_mutate_caller_config():
    config = DungeonConfig(width=64, height=48, seed=4)
    d = Dungeon(config, size=(30, 20))
    assert (config.width, config.height) == (64, 48)
    assert (d.surface.width, d.surface.height) == (30, 20)
