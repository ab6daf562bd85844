from __future__ import annotations

import os
from typing import Dict, Iterable, List, Tuple

import matplotlib.pyplot as plt
import numpy as np

from ..grid import VoxelGrid

LAYOUT_ORDER = ["empty", "walls", "cave", "towers"]
LAYOUT_LABELS = {"empty": "空房间", "walls": "墙体", "cave": "洞穴", "towers": "建塔"}


def _group_by(
    results: Iterable[dict], key: str
) -> Dict[str, List[dict]]:
    grouped: Dict[str, List[dict]] = {}
    for r in results:
        k = r[key]
        grouped.setdefault(k, []).append(r)
    return grouped


def _plot_bar_per_layout(
    results: List[dict],
    metric_key: str,
    ylabel: str,
    title: str,
    filename: str,
    output_dir: str,
) -> None:
    """横轴为布局类型，柱高为该指标在所有种子上的均值，误差线为标准差。"""

    grouped = _group_by(results, "layout_type")
    layouts = [lt for lt in LAYOUT_ORDER if lt in grouped]
    if not layouts:
        return

    means = []
    stds = []
    for lt in layouts:
        vals = np.array([r[metric_key] for r in grouped[lt]], dtype=float)
        means.append(float(np.mean(vals)))
        stds.append(float(np.std(vals)))

    fig, ax = plt.subplots(figsize=(8, 5), dpi=150)

    x = np.arange(len(layouts))
    ax.bar(x, means, 0.5, yerr=stds, capsize=4)

    ax.set_xticks(x)
    ax.set_xticklabels([LAYOUT_LABELS.get(lt, lt) for lt in layouts])
    ax.set_ylabel(ylabel)
    ax.set_title(title)
    fig.subplots_adjust(bottom=0.15, top=0.88)

    out_path = os.path.join(output_dir, filename)
    fig.savefig(out_path, bbox_inches="tight")
    plt.close(fig)


def heightmap(grid: VoxelGrid, dims: Tuple[int, int, int]) -> np.ndarray:
    """每个 (x, z) 列最高实心体素的 y 值，空列为 -1。形状为 (length, width)。"""

    length, height, width = dims
    solid = grid.to_dense((length, height, width))
    ys = np.arange(height).reshape(1, height, 1)
    top = np.where(solid, ys, -1).max(axis=1)
    return top


def plot_level_heightmap(
    grid: VoxelGrid,
    dims: Tuple[int, int, int],
    out_path: str,
    title: str = "",
) -> None:
    """一关的俯视高度图。"""

    top = heightmap(grid, dims)

    fig, ax = plt.subplots(figsize=(6, 5), dpi=150)
    im = ax.imshow(top.T, origin="lower", cmap="viridis", interpolation="nearest")
    fig.colorbar(im, ax=ax, label="y")
    ax.set_xlabel("x")
    ax.set_ylabel("z")
    if title:
        ax.set_title(title)

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    fig.savefig(out_path, bbox_inches="tight")
    plt.close(fig)


def plot_all_charts(results_dataclasses, output_dir: str) -> None:
    """从 LevelStats 列表生成所有统计图表。"""

    os.makedirs(output_dir, exist_ok=True)

    # dataclass -> dict
    results: List[dict] = [
        r if isinstance(r, dict) else r.__dict__ for r in results_dataclasses
    ]

    # 1) 长方体数量
    _plot_bar_per_layout(
        results,
        metric_key="box_count",
        ylabel="长方体数量",
        title="各布局合并后的长方体数量",
        filename="box_count.png",
        output_dir=output_dir,
    )

    # 2) 压缩比
    _plot_bar_per_layout(
        results,
        metric_key="compression_ratio",
        ylabel="体素 / 长方体",
        title="各布局的合并压缩比",
        filename="compression_ratio.png",
        output_dir=output_dir,
    )

    # 3) 合并耗时
    _plot_bar_per_layout(
        results,
        metric_key="runtime_ms",
        ylabel="运行时间 (ms)",
        title="各布局的合并耗时",
        filename="runtime.png",
        output_dir=output_dir,
    )
