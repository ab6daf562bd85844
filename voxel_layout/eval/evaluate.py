from __future__ import annotations

import csv
import json
import logging
import os
from dataclasses import asdict, dataclass
from typing import Iterable, List

from ..algorithms.box_merge import greedy_box_merge
from ..layouts import LayoutType
from ..session import LevelSession
from .charts import plot_all_charts, plot_level_heightmap

LOGGER = logging.getLogger(__name__)


@dataclass
class LevelStats:
    """单次生成（布局类型 × 种子）的统计记录。"""

    layout_type: str
    base_seed: int
    level_seed: int

    length: int
    height: int
    width: int

    solid_voxels: int
    box_count: int
    compression_ratio: float
    runtime_ms: float

    num_agent_positions: int
    num_object_positions: int
    has_exit_pad: bool
    has_building_zone: bool


FIELDNAMES = [
    "layout_type",
    "base_seed",
    "level_seed",
    "length",
    "height",
    "width",
    "solid_voxels",
    "box_count",
    "compression_ratio",
    "runtime_ms",
    "num_agent_positions",
    "num_object_positions",
    "has_exit_pad",
    "has_building_zone",
]


def _ensure_output_dirs(base_dir: str) -> None:
    os.makedirs(base_dir, exist_ok=True)
    os.makedirs(os.path.join(base_dir, "charts"), exist_ok=True)


def collect_level_stats(layout_type: LayoutType, seed: int, num_agents: int) -> LevelStats:
    session = LevelSession(num_agents, layout_type, seed=seed)
    level = session.reset()

    # 单独再跑一次合并以记录耗时
    merge = greedy_box_merge(session.grid)
    length, height, width = level.dims

    return LevelStats(
        layout_type=layout_type.value,
        base_seed=seed,
        level_seed=level.seed,
        length=length,
        height=height,
        width=width,
        solid_voxels=merge.solid_voxels,
        box_count=len(level.boxes),
        compression_ratio=merge.compression_ratio,
        runtime_ms=merge.runtime_ms,
        num_agent_positions=len(level.agent_positions),
        num_object_positions=len(level.object_positions),
        has_exit_pad=level.has_exit_pad,
        has_building_zone=level.has_building_zone,
    )


def run_all_experiments(
    output_dir: str = "output",
    seeds: Iterable[int] = range(5),
    num_agents: int = 2,
    with_charts: bool = True,
) -> List[LevelStats]:
    _ensure_output_dirs(output_dir)

    seeds = list(seeds)
    results: List[LevelStats] = []

    for layout_type in LayoutType:
        for seed in seeds:
            stats = collect_level_stats(layout_type, seed, num_agents)
            LOGGER.info(
                "%s seed=%d boxes=%d solid=%d",
                layout_type.value,
                seed,
                stats.box_count,
                stats.solid_voxels,
            )
            results.append(stats)

    # 写出 CSV 与 JSON 摘要
    csv_path = os.path.join(output_dir, "results_table.csv")
    json_path = os.path.join(output_dir, "summary.json")

    with open(csv_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for r in results:
            writer.writerow(asdict(r))

    with open(json_path, "w", encoding="utf-8") as f:
        json.dump([asdict(r) for r in results], f, ensure_ascii=False, indent=2)

    if with_charts:
        charts_dir = os.path.join(output_dir, "charts")
        plot_all_charts(results, charts_dir)

        # 每种布局画一张首个种子的俯视高度图
        if seeds:
            for layout_type in LayoutType:
                session = LevelSession(num_agents, layout_type, seed=seeds[0])
                level = session.reset()
                plot_level_heightmap(
                    session.grid,
                    level.dims,
                    os.path.join(charts_dir, f"heightmap_{layout_type.value}.png"),
                    title=f"{layout_type.value} (seed {level.seed})",
                )

    return results


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s %(message)s")
    run_all_experiments()


if __name__ == "__main__":
    main()
