import importlib.util
import os

import pytest

from roomgrow.dungeon import CLEAR_COLOR, DungeonBuilder, RasterSurface, prepare_build
from roomgrow.dungeon.diagnostics import analyze, is_healthy, unclaimed_cells

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


@pytest.mark.parametrize("seed", [1, 292372, 730727])
def test_builds_are_structurally_healthy(seed):
    builder = prepare_build((96, 80), seed=seed, wiggle=0.5)
    builder.generate_rooms()
    report = analyze(builder)
    assert is_healthy(report), report


def test_two_room_report(two_room_builder):
    report = analyze(two_room_builder)
    assert report["doors"] == report["connected_pairs"] == 1
    assert report["neighbors_without_door"] == []


def test_unclaimed_cells_flags_gaps(two_room_builder):
    two_room_builder.surface.set_pixel(1, 1, CLEAR_COLOR)
    two_room_builder.surface.set_pixel(0, 4, CLEAR_COLOR)
    # both cleared cells sit against room 0's outer wall column
    assert unclaimed_cells(two_room_builder) == [(1, 1), (0, 4)]
    assert not is_healthy(analyze(two_room_builder))


def test_analyze_requires_finished_build():
    builder = DungeonBuilder(RasterSurface(20, 20))
    builder.seed(10, 0, 1.0, rng=lambda: 0.5)
    with pytest.raises(ValueError):
        analyze(builder)


def test_diagnose_script_reports_ok(capsys):
    spec = importlib.util.spec_from_file_location("diagnose_seeds", os.path.join(ROOT, "scripts", "diagnose_seeds.py"))
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    assert mod.main(["--size", "48x40", "7", "orc"]) == 0
    out = capsys.readouterr().out
    assert '"ok": true' in out


def test_doors_across_void_are_reported_not_failed():
    mask = ["." * 10 + "#" + "." * 10 for _ in range(9)]
    builder = DungeonBuilder(RasterSurface.from_mask(mask))
    builder.seed(11, 0, 1.0, rng=lambda: 0.5)
    builder.generate_rooms()
    report = analyze(builder)
    assert report["doors"] == 2
    assert report["connected_pairs"] == report["marked_door_pairs"] == 0
    assert report["non_adjacent_door_pairs"] == [(0, 1), (0, 1)]
    assert report["duplicate_door_pairs"] == []
    assert is_healthy(report)
