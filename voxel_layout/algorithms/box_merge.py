from __future__ import annotations

from dataclasses import dataclass
from time import perf_counter
from typing import List, Optional, Set, Tuple

from ..grid import NEIGHBORS_6, BoundingBox, VoxelCoords, VoxelGrid


@dataclass
class BoxMergeResult:
    """贪心长方体合并结果。"""

    boxes: List[BoundingBox]
    solid_voxels: int
    runtime_ms: float

    @property
    def box_count(self) -> int:
        return len(self.boxes)

    @property
    def compression_ratio(self) -> float:
        """平均每个长方体覆盖的实心体素数。"""

        if not self.boxes:
            return 0.0
        return self.solid_voxels / len(self.boxes)


def _slab_range(lo: int, hi: int, step: int) -> Tuple[int, int]:
    if step == 1:
        return hi + 1, hi + 1
    if step == -1:
        return lo - 1, lo - 1
    return lo, hi


def _next_slab(
    grid: VoxelGrid,
    bbox: BoundingBox,
    direction: Tuple[int, int, int],
    visited: Set[VoxelCoords],
) -> Optional[List[VoxelCoords]]:
    """包围盒在 direction 方向外侧紧邻的一层；若其中存在非实心、
    缺失或已访问的格子则返回 None。"""

    dx, dy, dz = direction
    x0, x1 = _slab_range(bbox.min.x, bbox.max.x, dx)
    y0, y1 = _slab_range(bbox.min.y, bbox.max.y, dy)
    z0, z1 = _slab_range(bbox.min.z, bbox.max.z, dz)

    slab: List[VoxelCoords] = []
    for x in range(x0, x1 + 1):
        for y in range(y0, y1 + 1):
            for z in range(z0, z1 + 1):
                coords = VoxelCoords(x, y, z)
                if coords in visited or not grid.is_solid(coords):
                    return None
                slab.append(coords)
    return slab


def greedy_box_merge(grid: VoxelGrid) -> BoxMergeResult:
    """把实心体素集合贪心压缩为互不重叠的轴对齐长方体。

    - 按网格迭代顺序访问每个未访问的实心体素，以其为 1×1×1 种子；
    - 依次沿 -x, +x, -y, +y, -z, +z 方向，每个方向尽可能地整层扩展，
      一个方向扩展完毕后才处理下一个方向，不回头重试；
    - 输出的长方体并集恰好等于实心体素集合，每个体素只属于一个长方体。

    结果依赖方向顺序，因此长方体边界并不唯一，但覆盖性质始终成立。
    """

    start = perf_counter()

    visited: Set[VoxelCoords] = set()
    boxes: List[BoundingBox] = []
    solid_voxels = 0

    for coords, voxel in grid.items():
        if not voxel.solid:
            continue
        solid_voxels += 1
        if coords in visited:
            continue

        visited.add(coords)
        bbox = BoundingBox.of_point(coords)

        for direction in NEIGHBORS_6:
            while True:
                slab = _next_slab(grid, bbox, direction, visited)
                if slab is None:
                    break
                visited.update(slab)
                # 层是连续的矩形，只需加入两个对角即可
                bbox = bbox.add_point(slab[0]).add_point(slab[-1])

        boxes.append(bbox)

    runtime_ms = (perf_counter() - start) * 1000.0

    return BoxMergeResult(boxes=boxes, solid_voxels=solid_voxels, runtime_ms=runtime_ms)


def extract_boxes(grid: VoxelGrid) -> List[BoundingBox]:
    return greedy_box_merge(grid).boxes
