from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, NamedTuple, Optional, Tuple

import numpy as np


class VoxelCoords(NamedTuple):
    """体素整数坐标：x 为长度方向，y 为高度方向，z 为宽度方向。"""

    x: int
    y: int
    z: int

    def offset(self, dx: int, dy: int, dz: int) -> "VoxelCoords":
        return VoxelCoords(self.x + dx, self.y + dy, self.z + dz)


@dataclass
class VoxelState:
    """单个体素的状态。

    solid: 是否为结构性实心方块；
    occupant: 可移动物体的编号（指向外部物体表的非拥有句柄），None 表示无物体。
    物体占据不会令体素变为 solid。
    """

    solid: bool = False
    occupant: Optional[int] = None

    def is_empty(self) -> bool:
        return not self.solid and self.occupant is None


class VoxelGrid:
    """稀疏三维体素网格：VoxelCoords -> VoxelState。

    不存在的键表示“空且非实心”。网格不做边界检查，调用方只在布局
    声明的 length / height / width 范围内查询。
    """

    def __init__(self) -> None:
        self._voxels: Dict[VoxelCoords, VoxelState] = {}

    def get(self, coords: Tuple[int, int, int]) -> Optional[VoxelState]:
        return self._voxels.get(VoxelCoords(*coords))

    def set(self, coords: Tuple[int, int, int], state: VoxelState) -> None:
        key = VoxelCoords(*coords)
        if state.is_empty():
            # 空且无物体的体素从不实体化
            self._voxels.pop(key, None)
            return
        self._voxels[key] = state

    def clear(self) -> None:
        self._voxels.clear()

    def is_solid(self, coords: Tuple[int, int, int]) -> bool:
        v = self._voxels.get(VoxelCoords(*coords))
        return v is not None and v.solid

    def items(self) -> Iterator[Tuple[VoxelCoords, VoxelState]]:
        return iter(self._voxels.items())

    def __iter__(self) -> Iterator[Tuple[VoxelCoords, VoxelState]]:
        return self.items()

    def __len__(self) -> int:
        return len(self._voxels)

    def __contains__(self, coords: object) -> bool:
        return coords in self._voxels

    def solid_count(self) -> int:
        return sum(1 for v in self._voxels.values() if v.solid)

    def to_dense(self, shape: Tuple[int, int, int]) -> np.ndarray:
        """导出 shape = (length, height, width) 的稠密 bool 数组，True 表示 solid。

        超出 shape 的体素被忽略。
        """

        solid = np.zeros(shape, dtype=bool)
        L, H, W = shape
        for (x, y, z), v in self._voxels.items():
            if v.solid and 0 <= x < L and 0 <= y < H and 0 <= z < W:
                solid[x, y, z] = True
        return solid


@dataclass(frozen=True)
class BoundingBox:
    """闭区间轴对齐包围盒，min 与 max 两端都包含在内。

    既表示合并后的实心长方体，也表示出口平台或建造区域。
    min == max == 原点 的零盒表示“该区域不存在”。
    """

    min: VoxelCoords
    max: VoxelCoords

    def __post_init__(self) -> None:
        object.__setattr__(self, "min", VoxelCoords(*self.min))
        object.__setattr__(self, "max", VoxelCoords(*self.max))
        if any(lo > hi for lo, hi in zip(self.min, self.max)):
            raise ValueError(f"包围盒 min 必须逐分量 <= max: {self.min} > {self.max}")

    @classmethod
    def of_point(cls, coords: Tuple[int, int, int]) -> "BoundingBox":
        return cls(VoxelCoords(*coords), VoxelCoords(*coords))

    def add_point(self, coords: Tuple[int, int, int]) -> "BoundingBox":
        """返回扩展到包含 coords 的新包围盒。"""

        x, y, z = coords
        return BoundingBox(
            VoxelCoords(min(self.min.x, x), min(self.min.y, y), min(self.min.z, z)),
            VoxelCoords(max(self.max.x, x), max(self.max.y, y), max(self.max.z, z)),
        )

    def is_zero(self) -> bool:
        return self.min == ORIGIN and self.max == ORIGIN

    def contains(self, point) -> bool:
        """逐轴闭区间包含测试，point 可以是整数或浮点坐标。"""

        return all(lo <= p <= hi for lo, p, hi in zip(self.min, point, self.max))

    def voxels(self) -> Iterator[VoxelCoords]:
        for x in range(self.min.x, self.max.x + 1):
            for y in range(self.min.y, self.max.y + 1):
                for z in range(self.min.z, self.max.z + 1):
                    yield VoxelCoords(x, y, z)

    @property
    def volume(self) -> int:
        dx, dy, dz = self.size
        return dx * dy * dz

    @property
    def size(self) -> Tuple[int, int, int]:
        return (
            self.max.x - self.min.x + 1,
            self.max.y - self.min.y + 1,
            self.max.z - self.min.z + 1,
        )

    def half_extents(self) -> Tuple[float, float, float]:
        """物理/渲染长方体的半尺寸。"""

        dx, dy, dz = self.size
        return dx / 2, dy / 2, dz / 2

    def center(self) -> Tuple[float, float, float]:
        """长方体中心（体素 v 占据 [v, v+1) 区间）。"""

        return (
            (self.min.x + self.max.x) / 2 + 0.5,
            (self.min.y + self.max.y) / 2 + 0.5,
            (self.min.z + self.max.z) / 2 + 0.5,
        )


ORIGIN = VoxelCoords(0, 0, 0)
ZERO_BOX = BoundingBox(ORIGIN, ORIGIN)

# 六邻接方向，按轴 x、y、z 排列，每个轴先负后正
NEIGHBORS_6: Tuple[Tuple[int, int, int], ...] = (
    (-1, 0, 0),
    (1, 0, 0),
    (0, -1, 0),
    (0, 1, 0),
    (0, 0, -1),
    (0, 0, 1),
)
