from __future__ import annotations

from typing import List

from .grid import VoxelCoords, VoxelGrid


def find_free_voxels(grid: VoxelGrid, length: int, width: int, start_y: int) -> List[VoxelCoords]:
    """在内部每个 (x, z) 列上寻找可站立的空气格。

    规则：
    - 从 start_y 开始向下扫描；
    - 找到的第一个下方为 Solid 的格子 (x, y, z) 即为该列的自由体素；
    - 每列最多产生一个自由体素，没有找到则跳过该列。

    洞穴挖出后可站立表面不规则，无法用固定公式给出，因此出生点与出口
    候选都从这里取。
    """

    free: List[VoxelCoords] = []

    for x in range(1, length - 1):
        for z in range(1, width - 1):
            for y in range(start_y, 0, -1):
                if grid.is_solid((x, y - 1, z)):
                    free.append(VoxelCoords(x, y, z))
                    break

    return free


def floor_cells(x_start: int, x_end: int, width: int, y: int = 1) -> List[VoxelCoords]:
    """x ∈ [x_start, x_end)、z ∈ [1, width-1) 范围内高度为 y 的全部格子。"""

    return [VoxelCoords(x, y, z) for x in range(x_start, x_end) for z in range(1, width - 1)]
