"""
どこで: `engine.render.scene_geometry`
何を: 参照グリッド（XZ 平面）の線分と、位置履歴から軌跡の点列を生成する純粋関数。
なぜ: 描画 API に依存せず、形状と点数の規約をテストで固定するため。
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike

GRID_SIZE = 200.0
GRID_CELLS = 10

# 履歴 1 区間あたりの軌跡ドット数（端点含む）
TRAIL_SEGMENT_POINTS = 8


def grid_segments(cells: int = GRID_CELLS, size: float = GRID_SIZE) -> np.ndarray:
    """XZ 平面上のグリッド線分を (2 * (2 * cells + 1), 2, 3) で返す。

    X 軸に平行な線（z 固定）と Z 軸に平行な線（x 固定）を、-cells..cells の各格子位置に 1 本ずつ。
    """
    if cells < 0:
        raise ValueError("cells は 0 以上が必要")
    coords = np.arange(-cells, cells + 1, dtype=np.float64) * size
    half = cells * size
    n = len(coords)

    along_x = np.zeros((n, 2, 3), dtype=np.float64)
    along_x[:, 0, 0] = -half
    along_x[:, 1, 0] = half
    along_x[:, :, 2] = coords[:, np.newaxis]

    along_z = np.zeros((n, 2, 3), dtype=np.float64)
    along_z[:, :, 0] = coords[:, np.newaxis]
    along_z[:, 0, 2] = -half
    along_z[:, 1, 2] = half

    return np.concatenate([along_x, along_z], axis=0)


def _segment_points(p1: np.ndarray, p2: np.ndarray, count: int) -> np.ndarray:
    t = np.linspace(0.0, 1.0, count)[:, np.newaxis]
    return p1 + (p2 - p1) * t


def trail_points(
    history: Sequence[Sequence[float]],
    current: ArrayLike,
    *,
    segment_points: int = TRAIL_SEGMENT_POINTS,
) -> np.ndarray:
    """軌跡のドット位置 (M, 3) を返す。

    - 履歴が 2 件未満なら空（形状 (0, 3)）。
    - 隣接する履歴間に `segment_points` 個ずつ等間隔の点を置き、最後の履歴から
      現在の補間位置までの区間も同様に加える。
    """
    if segment_points < 2:
        raise ValueError("segment_points は 2 以上が必要")
    hist = np.asarray(history, dtype=np.float64).reshape(-1, 3)
    if len(hist) < 2:
        return np.zeros((0, 3), dtype=np.float64)
    cur = np.asarray(current, dtype=np.float64).reshape(3)
    parts = [_segment_points(a, b, segment_points) for a, b in zip(hist[:-1], hist[1:])]
    parts.append(_segment_points(hist[-1], cur, segment_points))
    return np.concatenate(parts, axis=0)


__all__ = [
    "GRID_SIZE",
    "GRID_CELLS",
    "TRAIL_SEGMENT_POINTS",
    "grid_segments",
    "trail_points",
]
