from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, List, Set

import numpy as np

from .grid import NEIGHBORS_6, VoxelCoords, VoxelGrid, VoxelState
from .rng import frand, rand_range


@dataclass
class CaveResult:
    """洞穴区域生长结果。"""

    cells: Set[VoxelCoords]
    seeds: List[VoxelCoords]
    growth_steps: int = 0
    final_growth_prob: float = 0.0
    queue_peak: int = field(default=0, repr=False)


def num_cave_seeds(length: int, width: int, divisor: int = 7) -> int:
    return max(1, max(length, width) // divisor + 1)


def pick_cave_seeds(
    length: int,
    width: int,
    cave_height: int,
    rng: np.random.Generator,
    divisor: int = 7,
) -> List[VoxelCoords]:
    """在 y = cave_height 平面的内部随机选取生长起点。"""

    seeds: List[VoxelCoords] = []
    for _ in range(num_cave_seeds(length, width, divisor)):
        x = rand_range(2, length - 2, rng)
        z = rand_range(2, width - 2, rng)
        seeds.append(VoxelCoords(x, cave_height, z))
    return seeds


def _in_cave_bounds(c: VoxelCoords, length: int, width: int, cave_height: int) -> bool:
    return 2 <= c.x < length - 2 and 1 <= c.z < width - 1 and 1 <= c.y <= cave_height


def grow_cave(
    seeds: Iterable[VoxelCoords],
    length: int,
    width: int,
    cave_height: int,
    rng: np.random.Generator,
    growth_prob: float = 0.8,
    decay: float = 0.995,
) -> CaveResult:
    """从起点出发做概率性 BFS 区域生长。

    规则：
    - 每个出队格子依次尝试 6 个邻居，每个邻居都先消耗一次随机数；
    - 随机数 >= growth_prob 时放弃该邻居；
    - 邻居已在洞穴中或越界 (2 <= x < length-2, 1 <= z < width-1,
      1 <= y <= cave_height) 时放弃；
    - 每次成功生长后 growth_prob *= decay，限制洞穴规模与队列长度。

    固定起点与随机流时结果完全可复现。
    """

    seed_list = [VoxelCoords(*s) for s in seeds]
    cave: Set[VoxelCoords] = set(seed_list)
    q: deque[VoxelCoords] = deque(seed_list)

    steps = 0
    peak = len(q)

    while q:
        curr = q.popleft()
        for dx, dy, dz in NEIGHBORS_6:
            nxt = curr.offset(dx, dy, dz)

            if frand(rng) >= growth_prob:
                continue
            if nxt in cave:
                continue
            if not _in_cave_bounds(nxt, length, width, cave_height):
                continue

            q.append(nxt)
            cave.add(nxt)
            growth_prob *= decay
            steps += 1

        peak = max(peak, len(q))

    return CaveResult(
        cells=cave,
        seeds=seed_list,
        growth_steps=steps,
        final_growth_prob=growth_prob,
        queue_peak=peak,
    )


def paint_cave(
    grid: VoxelGrid,
    cave: Set[VoxelCoords],
    length: int,
    width: int,
    cave_height: int,
) -> None:
    """把洞穴写入网格：顶面 + 洞壁，形成封闭空腔。"""

    # 顶面：y = cave_height 上不属于洞穴的内部格子
    for x in range(1, length - 1):
        for z in range(1, width - 1):
            coords = VoxelCoords(x, cave_height, z)
            if coords in cave:
                continue
            grid.set(coords, VoxelState(solid=True))

    # 洞壁：与洞穴相邻、自身不在洞穴内且不高于 cave_height 的格子
    for c in cave:
        for dx, dy, dz in NEIGHBORS_6:
            adjacent = c.offset(dx, dy, dz)
            if adjacent.y > cave_height:
                continue
            if adjacent in cave:
                continue
            grid.set(adjacent, VoxelState(solid=True))
