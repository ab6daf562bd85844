from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutParams:
    """布局生成参数配置。

    所有整数区间均为左闭右开 [min, max)，与 rand_range 一致。
    """

    # 通用尺寸：length = x，height = y，width = z
    length_min: int = 8
    length_max: int = 30
    width_min: int = 7
    width_max: int = 25
    height_min: int = 3
    height_max: int = 5

    # 出口平台最大宽度（实际为 min(该值, num_agents)）
    exit_pad_max_width: int = 3
    # Empty 布局每个智能体的出生点拒绝采样次数
    spawn_attempts: int = 10

    # Walls 布局
    max_num_walls: int = 4
    tallest_wall: int = 4
    walls_length_max: int = 35
    wall_gap: int = 2          # 相邻墙之间至少留出的地面
    wall_end_clearance: int = 3  # 首墙之前 / 末墙之后的空地
    extra_objects: int = 4

    # Cave 布局
    cave_height_min: int = 2
    cave_height_max: int = 5
    growth_prob: float = 0.8
    growth_decay: float = 0.995
    cave_seed_divisor: int = 7

    # Towers 布局
    tower_height_min: int = 5
    tower_height_max: int = 7
    tower_length_min: int = 12
    tower_length_max: int = 30
    tower_width_min: int = 12
    tower_width_max: int = 25
    building_zone_min: int = 3
    building_zone_max: int = 9
    materials_min: int = 2
    materials_max: int = 8
    max_random_objects: int = 25


DEFAULT_PARAMS = LayoutParams()
