"""Tests for free voxel discovery and floor candidates."""
from __future__ import annotations

from voxel_layout.candidates import find_free_voxels, floor_cells
from voxel_layout.grid import VoxelCoords, VoxelGrid, VoxelState


def _floor(length: int, width: int) -> VoxelGrid:
    grid = VoxelGrid()
    for x in range(length):
        for z in range(width):
            grid.set((x, 0, z), VoxelState(solid=True))
    return grid


def test_flat_floor_yields_one_voxel_per_interior_column():
    free = find_free_voxels(_floor(5, 5), 5, 5, start_y=3)
    assert len(free) == 9
    assert all(v.y == 1 for v in free)


def test_free_voxel_sits_on_highest_solid_below_start():
    grid = _floor(5, 5)
    grid.set((2, 1, 2), VoxelState(solid=True))
    free = find_free_voxels(grid, 5, 5, start_y=3)
    assert VoxelCoords(2, 2, 2) in free
    assert VoxelCoords(2, 1, 2) not in free


def test_column_without_solid_is_skipped():
    grid = _floor(5, 5)
    grid.set((1, 0, 1), VoxelState())
    free = find_free_voxels(grid, 5, 5, start_y=3)
    assert len(free) == 8
    assert all((v.x, v.z) != (1, 1) for v in free)


def test_object_occupancy_is_not_standable():
    grid = _floor(5, 5)
    grid.set((3, 1, 3), VoxelState(occupant=0))
    free = find_free_voxels(grid, 5, 5, start_y=3)
    assert VoxelCoords(3, 1, 3) in free


def test_floor_cells():
    cells = floor_cells(1, 3, 6)
    assert len(cells) == 8
    assert {c.x for c in cells} == {1, 2}
    assert {c.z for c in cells} == {1, 2, 3, 4}
    assert all(c.y == 1 for c in cells)
    assert all(c.y == 2 for c in floor_cells(1, 3, 6, y=2))
