from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple, Type

import numpy as np

from .algorithms.box_merge import greedy_box_merge
from .candidates import find_free_voxels, floor_cells
from .cave import CaveResult, grow_cave, paint_cave, pick_cave_seeds
from .config import LayoutParams
from .grid import ZERO_BOX, BoundingBox, VoxelCoords, VoxelGrid, VoxelState
from .rng import rand_range, shuffle

LOGGER = logging.getLogger(__name__)


class LayoutType(enum.Enum):
    EMPTY = "empty"
    WALLS = "walls"
    CAVE = "cave"
    TOWERS = "towers"


class LayoutError(ValueError):
    """布局前置条件不满足（未知布局类型、出口放不下等），不可在生成中途恢复。"""


class LayoutGenerator(ABC):
    """布局生成策略的公共接口。

    生命周期：init() 抽取随机尺寸与特征 -> generate(grid) 绘制网格 ->
    extract_primitives / level_exit / building_zone / starting_positions /
    object_spawn_positions 查询。

    所有随机数都来自构造时传入的同一个 numpy Generator。
    """

    has_exit_pad = True

    def __init__(
        self,
        num_agents: int,
        rng: np.random.Generator,
        params: LayoutParams | None = None,
    ) -> None:
        if num_agents < 1:
            raise LayoutError(f"num_agents 必须为正数: {num_agents}")
        self.num_agents = num_agents
        self.rng = rng
        self.params = params or LayoutParams()

        # length = x, height = y, width = z
        self.length = 0
        self.height = 0
        self.width = 0

    @property
    def dims(self) -> Tuple[int, int, int]:
        return self.length, self.height, self.width

    @property
    def exit_pad_width(self) -> int:
        return min(self.params.exit_pad_max_width, self.num_agents)

    def init(self) -> None:
        p = self.params
        self.length = rand_range(p.length_min, p.length_max, self.rng)
        self.width = rand_range(p.width_min, p.width_max, self.rng)

    def check_exit_pad_fits(self) -> None:
        if self.has_exit_pad and self.width - 2 < self.exit_pad_width:
            raise LayoutError(
                f"出口平台宽度 {self.exit_pad_width} 超出内部宽度 {self.width - 2}"
            )

    @abstractmethod
    def generate(self, grid: VoxelGrid) -> None:
        raise NotImplementedError

    def extract_primitives(self, grid: VoxelGrid) -> List[BoundingBox]:
        return greedy_box_merge(grid).boxes

    @abstractmethod
    def level_exit(self, grid: VoxelGrid) -> BoundingBox:
        raise NotImplementedError

    @abstractmethod
    def building_zone(self, grid: VoxelGrid) -> BoundingBox:
        raise NotImplementedError

    @abstractmethod
    def starting_positions(self, grid: VoxelGrid) -> List[VoxelCoords]:
        raise NotImplementedError

    @abstractmethod
    def object_spawn_positions(self, grid: VoxelGrid) -> List[VoxelCoords]:
        raise NotImplementedError


class EmptyLayout(LayoutGenerator):
    """空房间：地面 + 四周围墙，其余布局都以它为基线。"""

    def init(self) -> None:
        super().init()
        p = self.params
        self.height = rand_range(p.height_min, p.height_max, self.rng)
        self.check_exit_pad_fits()

    def generate(self, grid: VoxelGrid) -> None:
        L, H, W = self.length, self.height, self.width

        # 地面
        for x in range(L):
            for z in range(W):
                grid.set((x, 0, z), VoxelState(solid=True))

        # 四周围墙
        for x in (0, L - 1):
            for y in range(H):
                for z in range(W):
                    grid.set((x, y, z), VoxelState(solid=True))

        for x in range(L):
            for y in range(H):
                for z in (0, W - 1):
                    grid.set((x, y, z), VoxelState(solid=True))

    def _exit_pad_at(self, x: int, z: int, y: int = 1) -> BoundingBox:
        return BoundingBox(
            VoxelCoords(x, y, z),
            VoxelCoords(x + 1, y + 1, z + self.exit_pad_width),
        )

    def level_exit(self, grid: VoxelGrid) -> BoundingBox:
        self.check_exit_pad_fits()
        x = rand_range(self.length - 2, self.length - 1, self.rng)
        z = rand_range(1, self.width - self.exit_pad_width, self.rng)
        return self._exit_pad_at(x, z)

    def building_zone(self, grid: VoxelGrid) -> BoundingBox:
        return ZERO_BOX

    def starting_positions(self, grid: VoxelGrid) -> List[VoxelCoords]:
        """拒绝采样出生点，每个智能体最多尝试 spawn_attempts 次。

        采样耗尽时返回的位置数可能少于 num_agents。
        """

        positions: List[VoxelCoords] = []

        for _ in range(self.num_agents):
            for _attempt in range(self.params.spawn_attempts):
                pos = VoxelCoords(
                    rand_range(1, self.length - 1, self.rng),
                    1,
                    rand_range(1, self.width - 1, self.rng),
                )
                if pos not in positions:
                    positions.append(pos)
                    break

        if len(positions) < self.num_agents:
            LOGGER.warning(
                "Only found %d of %d starting positions", len(positions), self.num_agents
            )
        return positions

    def object_spawn_positions(self, grid: VoxelGrid) -> List[VoxelCoords]:
        return []


class WallsLayout(EmptyLayout):
    """横跨整个宽度的若干堵墙，物体足够让智能体堆叠翻越。"""

    def __init__(
        self,
        num_agents: int,
        rng: np.random.Generator,
        params: LayoutParams | None = None,
    ) -> None:
        super().__init__(num_agents, rng, params)
        # (x, height)
        self.walls: List[Tuple[int, int]] = []
        self.first_wall_x = 3
        self.max_wall_x = 0
        self.max_wall_height = 0
        self.agent_spawn_coords: List[VoxelCoords] = []
        self.object_spawn_coords: List[VoxelCoords] = []

    def init(self) -> None:
        super().init()
        p = self.params

        self.walls = []
        self.first_wall_x = 3
        self.max_wall_x = 0
        self.max_wall_height = 0

        num_walls = rand_range(0, p.max_num_walls + 1, self.rng)
        min_length = num_walls * p.wall_gap + 4 + p.wall_end_clearance
        self.length = rand_range(min_length, p.walls_length_max, self.rng)

        self._place_walls(num_walls, min_length)

        self.height = rand_range(p.height_min, p.height_max, self.rng) + self.max_wall_height

        candidates = shuffle(floor_cells(1, self.first_wall_x, self.width), self.rng)
        self.agent_spawn_coords = candidates[: self.num_agents]
        spawn_idx = len(self.agent_spawn_coords)
        if spawn_idx < self.num_agents:
            LOGGER.warning(
                "Not enough spawn candidates for agents: %d < %d", spawn_idx, self.num_agents
            )

        min_num_objects = self.min_num_objects()
        num_objects = rand_range(min_num_objects, min_num_objects + p.extra_objects, self.rng)
        available = len(candidates) - spawn_idx
        if num_objects > available:
            LOGGER.warning("Only %d of %d objects fit before the first wall", available, num_objects)
            num_objects = available

        self.object_spawn_coords = candidates[spawn_idx : spawn_idx + num_objects]

    def _place_walls(self, num_walls: int, min_length: int) -> None:
        p = self.params
        if num_walls <= 0:
            return

        self.first_wall_x = rand_range(4, 4 + 1 + self.length - min_length, self.rng)
        first_height = rand_range(1, p.tallest_wall + 1, self.rng)
        self.walls.append((self.first_wall_x, first_height))
        self.max_wall_x = self.first_wall_x
        self.max_wall_height = first_height

        prev_x = self.first_wall_x
        for i in range(1, num_walls):
            wall_height = rand_range(1, p.tallest_wall + 1, self.rng)
            remaining = p.wall_end_clearance + (num_walls - i - 1) * p.wall_gap

            lo = prev_x + p.wall_gap
            hi = self.length - remaining
            if lo >= hi:
                LOGGER.warning("Could not generate wall %d, not enough space!", i)
                break

            wall_x = rand_range(lo, hi, self.rng)
            prev_x = wall_x

            self.walls.append((wall_x, wall_height))
            self.max_wall_height = max(self.max_wall_height, wall_height)
            self.max_wall_x = max(self.max_wall_x, wall_x)

    def min_num_objects(self) -> int:
        """翻越每堵墙所需的最少物体数：每堵墙 2 * (高度 - 1)。"""

        return sum(2 * (h - 1) for _, h in self.walls)

    def generate(self, grid: VoxelGrid) -> None:
        super().generate(grid)

        for wall_x, wall_height in self.walls:
            for y in range(1, 1 + wall_height):
                for z in range(1, self.width - 1):
                    grid.set((wall_x, y, z), VoxelState(solid=True))

    def starting_positions(self, grid: VoxelGrid) -> List[VoxelCoords]:
        return list(self.agent_spawn_coords)

    def object_spawn_positions(self, grid: VoxelGrid) -> List[VoxelCoords]:
        return list(self.object_spawn_coords)

    def level_exit(self, grid: VoxelGrid) -> BoundingBox:
        self.check_exit_pad_fits()
        x = rand_range(self.max_wall_x + 1, self.length - 1, self.rng)
        z = rand_range(1, self.width - 1 - self.exit_pad_width, self.rng)
        return self._exit_pad_at(x, z)


class CaveLayout(EmptyLayout):
    """封闭洞穴：顶面之下由区域生长挖出的空腔。"""

    def __init__(
        self,
        num_agents: int,
        rng: np.random.Generator,
        params: LayoutParams | None = None,
    ) -> None:
        super().__init__(num_agents, rng, params)
        self.cave_height = 0
        self.cave: Optional[CaveResult] = None
        self.free_voxels: List[VoxelCoords] = []

    def init(self) -> None:
        super().init()
        p = self.params
        self.cave_height = rand_range(p.cave_height_min, p.cave_height_max, self.rng)
        self.height = rand_range(p.height_min, p.height_max, self.rng) + self.cave_height

    def carve(self, seeds: List[VoxelCoords] | None = None) -> CaveResult:
        p = self.params
        if seeds is None:
            seeds = pick_cave_seeds(
                self.length, self.width, self.cave_height, self.rng, p.cave_seed_divisor
            )
        return grow_cave(
            seeds,
            self.length,
            self.width,
            self.cave_height,
            self.rng,
            growth_prob=p.growth_prob,
            decay=p.growth_decay,
        )

    def generate(self, grid: VoxelGrid, seeds: List[VoxelCoords] | None = None) -> None:
        super().generate(grid)

        self.cave = self.carve(seeds)
        paint_cave(grid, self.cave.cells, self.length, self.width, self.cave_height)

        self.free_voxels = shuffle(
            find_free_voxels(grid, self.length, self.width, self.cave_height + 1), self.rng
        )

    def starting_positions(self, grid: VoxelGrid) -> List[VoxelCoords]:
        positions = self.free_voxels[: self.num_agents]
        if len(positions) < self.num_agents:
            LOGGER.warning(
                "Only %d free voxels for %d agents", len(positions), self.num_agents
            )
        return positions

    def level_exit(self, grid: VoxelGrid) -> BoundingBox:
        self.check_exit_pad_fits()
        w = self.exit_pad_width

        # 从打乱后的自由体素末尾往前找第一个放得下出口的位置
        for v in reversed(self.free_voxels):
            if any(grid.is_solid((v.x, v.y, z)) for z in range(v.z, v.z + w)):
                continue
            return BoundingBox(v, VoxelCoords(v.x + 1, v.y + 1, v.z + w))

        LOGGER.warning("No free voxel fits the exit pad, using the default corner")
        return BoundingBox(VoxelCoords(1, 1, 1), VoxelCoords(2, 2, 2))


class TowersLayout(EmptyLayout):
    """建塔场景：一块建造区域 + 一块材料区域，物体铺满材料区。"""

    has_exit_pad = False

    def __init__(
        self,
        num_agents: int,
        rng: np.random.Generator,
        params: LayoutParams | None = None,
    ) -> None:
        super().__init__(num_agents, rng, params)
        self.build_zone_length = self.build_zone_width = 0
        self.build_zone_x = self.build_zone_z = 0
        self.materials_length = self.materials_width = 0
        self.materials_x = self.materials_z = 0
        self.agent_spawn_coords: List[VoxelCoords] = []
        self.object_spawn_coords: List[VoxelCoords] = []

    def init(self) -> None:
        # 不调用基线 init，尺寸完全由本布局决定
        p = self.params
        rng = self.rng

        self.height = rand_range(p.tower_height_min, p.tower_height_max, rng)
        self.length = rand_range(p.tower_length_min, p.tower_length_max, rng)
        self.width = rand_range(p.tower_width_min, p.tower_width_max, rng)

        self.build_zone_length = rand_range(p.building_zone_min, p.building_zone_max, rng)
        self.build_zone_width = rand_range(p.building_zone_min, p.building_zone_max, rng)
        self.materials_length = rand_range(p.materials_min, p.materials_max, rng)
        self.materials_width = rand_range(p.materials_min, p.materials_max, rng)

        self.length = max(self.build_zone_length + self.materials_length + 3, self.length)
        self.width = max(self.build_zone_width + self.materials_width + 3, self.width)

        self.build_zone_x = rand_range(1, self.length - self.build_zone_length - 1, rng)
        self.build_zone_z = rand_range(1, self.width - self.build_zone_width - 1, rng)
        self.materials_x = rand_range(1, self.length - self.materials_length - 1, rng)
        self.materials_z = rand_range(1, self.width - self.materials_width - 1, rng)

        candidates = shuffle(floor_cells(1, self.length - 1, self.width, y=2), rng)

        self.agent_spawn_coords = candidates[: min(self.num_agents, len(candidates))]
        spawn_idx = len(self.agent_spawn_coords)

        max_random_objects = min(len(candidates) - self.num_agents, p.max_random_objects)
        num_objects = rand_range(0, max(1, max_random_objects), rng)

        objects = candidates[spawn_idx : spawn_idx + num_objects]
        # 材料区外的物体放到地面上
        self.object_spawn_coords = [
            c if self.in_materials_zone(c) else c.offset(0, -1, 0) for c in objects
        ]

        # 材料区整块铺满一层物体
        for x in range(self.materials_x, self.materials_x + self.materials_length):
            for z in range(self.materials_z, self.materials_z + self.materials_width):
                self.object_spawn_coords.append(VoxelCoords(x, 1, z))

        if len(self.agent_spawn_coords) < self.num_agents:
            LOGGER.warning(
                "Padding %d agent spawns with duplicates",
                self.num_agents - len(self.agent_spawn_coords),
            )
        while len(self.agent_spawn_coords) < self.num_agents:
            self.agent_spawn_coords.append(self.agent_spawn_coords[0])

    def in_materials_zone(self, c: VoxelCoords) -> bool:
        return (
            self.materials_x <= c.x < self.materials_x + self.materials_length
            and self.materials_z <= c.z < self.materials_z + self.materials_width
        )

    def starting_positions(self, grid: VoxelGrid) -> List[VoxelCoords]:
        return list(self.agent_spawn_coords)

    def object_spawn_positions(self, grid: VoxelGrid) -> List[VoxelCoords]:
        return list(self.object_spawn_coords)

    def level_exit(self, grid: VoxelGrid) -> BoundingBox:
        return ZERO_BOX

    def building_zone(self, grid: VoxelGrid) -> BoundingBox:
        return BoundingBox(
            VoxelCoords(self.build_zone_x, 1, self.build_zone_z),
            VoxelCoords(
                self.build_zone_x + self.build_zone_length,
                1,
                self.build_zone_z + self.build_zone_width,
            ),
        )

    def materials_zone(self) -> BoundingBox:
        return BoundingBox(
            VoxelCoords(self.materials_x, 1, self.materials_z),
            VoxelCoords(
                self.materials_x + self.materials_length,
                1,
                self.materials_z + self.materials_width,
            ),
        )


def parse_layout_type(layout_type: LayoutType | str) -> LayoutType:
    try:
        return LayoutType(layout_type)
    except ValueError:
        LOGGER.error("Layout type not supported %r", layout_type)
        raise LayoutError(f"未知 layout_type: {layout_type!r}") from None


LAYOUT_CLASSES: Dict[LayoutType, Type[LayoutGenerator]] = {
    LayoutType.EMPTY: EmptyLayout,
    LayoutType.WALLS: WallsLayout,
    LayoutType.CAVE: CaveLayout,
    LayoutType.TOWERS: TowersLayout,
}


def make_layout(
    layout_type: LayoutType | str,
    num_agents: int,
    rng: np.random.Generator,
    params: LayoutParams | None = None,
) -> LayoutGenerator:
    """统一入口，根据布局类型构造对应的生成策略（尚未调用 init）。"""

    return LAYOUT_CLASSES[parse_layout_type(layout_type)](num_agents, rng, params)
