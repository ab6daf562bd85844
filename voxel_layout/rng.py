from __future__ import annotations

from typing import List, Optional, TypeVar

import numpy as np

T = TypeVar("T")

# reset() 派生新种子的取值范围 [0, SEED_RANGE)
SEED_RANGE = 10000


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    return np.random.default_rng(seed)


def rand_range(low: int, high: int, rng: np.random.Generator) -> int:
    """均匀抽取 [low, high) 内的整数；区间为空时 numpy 抛出 ValueError。"""

    return int(rng.integers(low, high))


def frand(rng: np.random.Generator) -> float:
    """均匀抽取 [0, 1) 内的浮点数。"""

    return float(rng.random())


def shuffle(items: List[T], rng: np.random.Generator) -> List[T]:
    """原地打乱列表并返回它本身。"""

    rng.shuffle(items)
    return items


def reseed(rng: np.random.Generator, seed: int) -> None:
    """原地重置随机流。

    直接替换 bit generator 的内部状态，持有同一个 Generator 引用的
    布局策略都会看到新的随机流。
    """

    bit_gen = rng.bit_generator
    bit_gen.state = type(bit_gen)(seed).state


def draw_seed(rng: np.random.Generator) -> int:
    """从当前随机流中抽取下一个 episode 使用的种子。"""

    return rand_range(0, SEED_RANGE, rng)
