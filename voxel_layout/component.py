from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from .config import LayoutParams
from .grid import BoundingBox, VoxelCoords, VoxelGrid, VoxelState
from .layouts import LayoutError, LayoutGenerator, LayoutType, make_layout

LOGGER = logging.getLogger(__name__)


class GridLayoutComponent:
    """布局组件：按枚举选择生成策略并转发调用。

    组件与会话共享同一个随机流；每次 init 都会丢弃上一关的策略对象。
    """

    def __init__(self, rng: np.random.Generator, params: LayoutParams | None = None) -> None:
        self.rng = rng
        self.params = params
        self.generator: Optional[LayoutGenerator] = None

    def init(self, num_agents: int, layout_type: LayoutType | str) -> LayoutGenerator:
        self.generator = make_layout(layout_type, num_agents, self.rng, self.params)
        self.generator.init()
        LOGGER.info(
            "Initialized %s layout with dims %s",
            type(self.generator).__name__,
            self.generator.dims,
        )
        return self.generator

    def _require_generator(self) -> LayoutGenerator:
        if self.generator is None:
            raise LayoutError("init() must be called before using the layout")
        return self.generator

    def generate(self, grid: VoxelGrid) -> None:
        self._require_generator().generate(grid)

    def extract_primitives(self, grid: VoxelGrid) -> List[BoundingBox]:
        boxes = self._require_generator().extract_primitives(grid)
        LOGGER.info("Env has %d layout drawables", len(boxes))
        return boxes

    def level_exit(self, grid: VoxelGrid) -> BoundingBox:
        return self._require_generator().level_exit(grid)

    def building_zone(self, grid: VoxelGrid) -> BoundingBox:
        return self._require_generator().building_zone(grid)

    def starting_positions(self, grid: VoxelGrid) -> List[VoxelCoords]:
        return self._require_generator().starting_positions(grid)

    def object_spawn_positions(self, grid: VoxelGrid) -> List[VoxelCoords]:
        return self._require_generator().object_spawn_positions(grid)


def mark_objects(grid: VoxelGrid, positions: Sequence[VoxelCoords], first_id: int = 0) -> List[int]:
    """在网格中登记可移动物体的占据信息。

    每个位置写入一个非实心、occupant 为物体编号的体素，编号即外部物体表中的
    下标；返回分配的编号列表。位置上已有的实心方块会被覆盖。
    """

    ids: List[int] = []
    for i, pos in enumerate(positions):
        obj_id = first_id + i
        grid.set(pos, VoxelState(solid=False, occupant=obj_id))
        ids.append(obj_id)
    return ids
