"""Tests for region-growth cave carving."""
from __future__ import annotations

import pytest

from voxel_layout.cave import grow_cave, num_cave_seeds, paint_cave, pick_cave_seeds
from voxel_layout.config import LayoutParams
from voxel_layout.grid import NEIGHBORS_6, VoxelCoords, VoxelGrid
from voxel_layout.layouts import CaveLayout
from voxel_layout.rng import make_rng


def _carve(seed: int, length: int = 20, width: int = 15, cave_height: int = 3):
    rng = make_rng(seed)
    seeds = pick_cave_seeds(length, width, cave_height, rng)
    return grow_cave(seeds, length, width, cave_height, rng)


def test_num_cave_seeds():
    assert num_cave_seeds(8, 7) == 2
    assert num_cave_seeds(6, 6) == 1
    assert num_cave_seeds(30, 20) == 5


def test_carving_is_deterministic():
    first = _carve(11)
    second = _carve(11)
    assert first.cells == second.cells
    assert first.growth_steps == second.growth_steps


def test_cave_cells_stay_in_bounds():
    length, width, cave_height = 20, 15, 3
    for seed in range(10):
        result = _carve(seed, length, width, cave_height)
        for c in result.cells:
            assert 2 <= c.x < length - 2
            assert 1 <= c.z < width - 1
            assert 1 <= c.y <= cave_height


def test_growth_probability_decays_per_step():
    result = _carve(3)
    assert result.growth_steps == len(result.cells) - len(set(result.seeds))
    assert result.final_growth_prob == pytest.approx(0.8 * 0.995 ** result.growth_steps)
    assert len(result.seeds) <= result.queue_peak <= len(result.seeds) + result.growth_steps


def test_zero_growth_keeps_only_seed():
    seed = VoxelCoords(5, 2, 5)
    result = grow_cave([seed], 12, 10, 2, make_rng(0), growth_prob=0.0)
    assert result.cells == {seed}
    assert result.growth_steps == 0


def test_paint_closes_the_cavity():
    length, width, cave_height = 20, 15, 3
    result = _carve(4, length, width, cave_height)
    grid = VoxelGrid()
    paint_cave(grid, result.cells, length, width, cave_height)

    for c in result.cells:
        assert not grid.is_solid(c)
        for dx, dy, dz in NEIGHBORS_6:
            n = c.offset(dx, dy, dz)
            if n.y > cave_height or n in result.cells:
                continue
            assert grid.is_solid(n)


def test_cave_layout_single_seed_without_growth():
    layout = CaveLayout(2, make_rng(8), LayoutParams(growth_prob=0.0))
    layout.init()
    h = layout.cave_height
    seed = VoxelCoords(4, h, 4)

    grid = VoxelGrid()
    layout.generate(grid, seeds=[seed])

    assert layout.cave is not None
    assert layout.cave.cells == {seed}

    # 顶面除种子所在列外全部为实心
    for x in range(1, layout.length - 1):
        for z in range(1, layout.width - 1):
            assert grid.is_solid((x, h, z)) == ((x, z) != (4, 4))
