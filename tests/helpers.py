"""Shared assertions for box coverage checks."""
from __future__ import annotations

from typing import Iterable

from voxel_layout.grid import BoundingBox, VoxelGrid


def assert_exact_cover(grid: VoxelGrid, boxes: Iterable[BoundingBox]) -> None:
    """长方体并集恰好等于实心体素集合，且两两不重叠。"""

    boxes = list(boxes)
    solid = {c for c, v in grid.items() if v.solid}

    covered = set()
    total = 0
    for box in boxes:
        for c in box.voxels():
            assert c in solid, f"{box} covers non-solid voxel {c}"
            covered.add(c)
        total += box.volume

    assert covered == solid
    # 体积和等于并集大小说明没有重叠
    assert total == len(solid)
