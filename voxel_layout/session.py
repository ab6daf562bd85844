from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .component import GridLayoutComponent, mark_objects
from .config import LayoutParams
from .grid import BoundingBox, VoxelCoords, VoxelGrid
from .layouts import LayoutType, parse_layout_type
from .rng import draw_seed, make_rng, reseed

LOGGER = logging.getLogger(__name__)


@dataclass
class LevelDescription:
    """一关的完整描述，供外部渲染 / 物理 / 仿真组件使用。"""

    seed: int
    layout_type: LayoutType
    dims: Tuple[int, int, int]  # (length, height, width)
    boxes: List[BoundingBox]
    exit_pad: BoundingBox
    building_zone: BoundingBox
    agent_positions: List[VoxelCoords]
    object_positions: List[VoxelCoords]
    object_ids: List[int] = field(default_factory=list)

    @property
    def has_exit_pad(self) -> bool:
        return self.exit_pad.max.x - self.exit_pad.min.x > 0

    @property
    def has_building_zone(self) -> bool:
        return self.building_zone.max.x - self.building_zone.min.x > 0


class LevelSession:
    """关卡生成会话：独占网格、布局组件与随机流，一次只生成一关。

    reset() 先从当前随机流抽取新种子并记录日志，再用它重新播种，
    回放工具可以通过日志中的种子复现任意一关。
    """

    def __init__(
        self,
        num_agents: int,
        layout_type: LayoutType | str = LayoutType.EMPTY,
        seed: Optional[int] = None,
        params: LayoutParams | None = None,
    ) -> None:
        self.num_agents = num_agents
        self.layout_type = parse_layout_type(layout_type)
        self.rng = make_rng(seed)
        self.grid = VoxelGrid()
        self.layout = GridLayoutComponent(self.rng, params)
        self.level: Optional[LevelDescription] = None

    def seed(self, value: int) -> None:
        reseed(self.rng, value)

    def reset(self) -> LevelDescription:
        seed = draw_seed(self.rng)
        reseed(self.rng, seed)
        LOGGER.info("Using seed %d", seed)

        # 丢弃上一关的网格与策略
        self.grid.clear()

        generator = self.layout.init(self.num_agents, self.layout_type)
        self.layout.generate(self.grid)

        boxes = self.layout.extract_primitives(self.grid)

        object_positions = self.layout.object_spawn_positions(self.grid)
        object_ids = mark_objects(self.grid, object_positions)

        exit_pad = self.layout.level_exit(self.grid)
        building_zone = self.layout.building_zone(self.grid)
        agent_positions = self.layout.starting_positions(self.grid)

        self.level = LevelDescription(
            seed=seed,
            layout_type=self.layout_type,
            dims=generator.dims,
            boxes=boxes,
            exit_pad=exit_pad,
            building_zone=building_zone,
            agent_positions=agent_positions,
            object_positions=object_positions,
            object_ids=object_ids,
        )
        return self.level

    def agents_at_exit(self, positions: Sequence[Sequence[float]]) -> List[bool]:
        """逐个判断智能体位置是否在出口平台内（闭区间比较）。"""

        if self.level is None or not self.level.has_exit_pad:
            return [False] * len(positions)
        return [self.level.exit_pad.contains(p) for p in positions]
