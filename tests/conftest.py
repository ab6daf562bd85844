"""Pytest configuration for voxel layout tests."""
from __future__ import annotations

import os
import sys
from pathlib import Path

# 无显示环境下绘图
os.environ.setdefault("MPLBACKEND", "Agg")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
