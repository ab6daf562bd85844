"""Tests for the sparse voxel grid and bounding boxes."""
from __future__ import annotations

import numpy as np
import pytest

from voxel_layout.grid import ZERO_BOX, BoundingBox, VoxelCoords, VoxelGrid, VoxelState


def test_absent_voxel_is_empty():
    grid = VoxelGrid()
    assert grid.get((1, 2, 3)) is None
    assert not grid.is_solid((1, 2, 3))
    assert len(grid) == 0


def test_set_get_overwrite_and_clear():
    grid = VoxelGrid()
    grid.set((1, 0, 1), VoxelState(solid=True))
    assert grid.get(VoxelCoords(1, 0, 1)) == VoxelState(solid=True)

    grid.set((1, 0, 1), VoxelState(solid=False, occupant=7))
    state = grid.get((1, 0, 1))
    assert state is not None and not state.solid and state.occupant == 7

    grid.clear()
    assert grid.get((1, 0, 1)) is None
    assert len(grid) == 0


def test_empty_state_is_never_materialized():
    grid = VoxelGrid()
    grid.set((0, 0, 0), VoxelState())
    assert len(grid) == 0

    grid.set((0, 0, 0), VoxelState(solid=True))
    grid.set((0, 0, 0), VoxelState())
    assert (0, 0, 0) not in grid
    for _, state in grid:
        assert state.solid or state.occupant is not None


def test_iteration_and_solid_count():
    grid = VoxelGrid()
    grid.set((0, 0, 0), VoxelState(solid=True))
    grid.set((1, 0, 0), VoxelState(solid=True))
    grid.set((2, 1, 0), VoxelState(occupant=0))

    items = dict(grid.items())
    assert set(items) == {(0, 0, 0), (1, 0, 0), (2, 1, 0)}
    assert grid.solid_count() == 2


def test_to_dense_ignores_out_of_shape_voxels():
    grid = VoxelGrid()
    grid.set((0, 0, 0), VoxelState(solid=True))
    grid.set((5, 5, 5), VoxelState(solid=True))
    grid.set((1, 0, 1), VoxelState(occupant=3))

    dense = grid.to_dense((2, 2, 2))
    assert dense.dtype == np.bool_
    assert dense.sum() == 1
    assert dense[0, 0, 0]


def test_bounding_box_rejects_inverted_bounds():
    with pytest.raises(ValueError):
        BoundingBox(VoxelCoords(2, 0, 0), VoxelCoords(1, 0, 0))


def test_bounding_box_geometry():
    box = BoundingBox((0, 0, 0), (1, 0, 2))
    assert box.size == (2, 1, 3)
    assert box.volume == 6
    assert len(list(box.voxels())) == 6
    assert box.half_extents() == (1.0, 0.5, 1.5)
    assert box.center() == (1.0, 0.5, 1.5)

    grown = box.add_point((-1, 3, 1))
    assert grown.min == (-1, 0, 0)
    assert grown.max == (1, 3, 2)


def test_contains_is_inclusive():
    box = BoundingBox((1, 1, 1), (2, 2, 3))
    assert box.contains((1, 1, 1))
    assert box.contains((2, 2, 3))
    assert box.contains((1.5, 1.2, 2.9))
    assert not box.contains((2.01, 1, 1))
    assert not box.contains((0, 1, 1))


def test_zero_box_sentinel():
    assert ZERO_BOX.is_zero()
    assert not BoundingBox((0, 0, 0), (1, 0, 0)).is_zero()
    assert BoundingBox.of_point((0, 0, 0)) == ZERO_BOX
