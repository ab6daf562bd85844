"""Tests for the statistics run and charts."""
from __future__ import annotations

import csv
import json

from voxel_layout.eval.charts import heightmap, plot_level_heightmap
from voxel_layout.eval.evaluate import FIELDNAMES, collect_level_stats, run_all_experiments
from voxel_layout.grid import VoxelGrid, VoxelState
from voxel_layout.layouts import LayoutType


def test_collect_level_stats_consistency():
    stats = collect_level_stats(LayoutType.WALLS, seed=4, num_agents=2)
    assert stats.layout_type == "walls"
    assert stats.box_count > 0
    assert stats.solid_voxels >= stats.box_count
    assert stats.compression_ratio == stats.solid_voxels / stats.box_count
    assert stats.has_exit_pad and not stats.has_building_zone


def test_run_all_experiments_writes_outputs(tmp_path):
    results = run_all_experiments(str(tmp_path), seeds=[0, 1], num_agents=2)
    assert len(results) == 2 * len(LayoutType)

    with open(tmp_path / "results_table.csv", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == len(results)
    assert list(rows[0].keys()) == FIELDNAMES

    with open(tmp_path / "summary.json", encoding="utf-8") as f:
        summary = json.load(f)
    assert {r["layout_type"] for r in summary} == {lt.value for lt in LayoutType}

    charts = tmp_path / "charts"
    for name in ("box_count.png", "compression_ratio.png", "runtime.png"):
        assert (charts / name).is_file()
    for lt in LayoutType:
        assert (charts / f"heightmap_{lt.value}.png").is_file()


def test_heightmap_top_surface(tmp_path):
    grid = VoxelGrid()
    for x in range(3):
        for z in range(3):
            grid.set((x, 0, z), VoxelState(solid=True))
    grid.set((1, 1, 1), VoxelState(solid=True))
    grid.set((2, 1, 2), VoxelState(occupant=0))

    top = heightmap(grid, (3, 2, 3))
    assert top.shape == (3, 3)
    assert top[1, 1] == 1
    assert top[2, 2] == 0
    assert top.sum() == 1

    out = tmp_path / "level.png"
    plot_level_heightmap(grid, (3, 2, 3), str(out), title="test")
    assert out.is_file()
