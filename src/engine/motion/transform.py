"""
どこで: `engine.motion.transform`
何を: 隣接 Frame の差分に固定 4x4 整数行列を掛け、[total, x, y, z] の運動ベクトル列を得る純粋関数。
なぜ: 声部間の並進/反行の関係を、描画が直接使える 4 成分の整数へ決定的に写像するため。

行列の各行:
- 0: 全声部の差分和（総運動）
- 1: x 方向の反行（(1,4) 対 (2,3)）
- 2: y 方向の反行（(1,3) 対 (2,4)）
- 3: z 方向の反行（(1,2) 対 (3,4)）
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from common.types import VOICE_COUNT, FrameArray, MotionArray

MOTION_MATRIX = np.array(
    [
        [1, 1, 1, 1],
        [1, -1, -1, 1],
        [1, -1, 1, -1],
        [1, 1, -1, -1],
    ],
    dtype=np.int64,
)
MOTION_MATRIX.flags.writeable = False


def _as_frames(frames: ArrayLike) -> FrameArray:
    arr = np.asarray(frames, dtype=np.int64)
    if arr.size == 0:
        return arr.reshape(0, VOICE_COUNT)
    if arr.ndim != 2 or arr.shape[1] != VOICE_COUNT:
        raise ValueError(f"frames must have shape (N, {VOICE_COUNT}), got {arr.shape}")
    return arr


def transform_pair(start: ArrayLike, end: ArrayLike) -> tuple[int, int, int, int]:
    """1 組の Frame から運動ベクトルを返す（`T · (end - start)`）。"""
    d = np.asarray(end, dtype=np.int64) - np.asarray(start, dtype=np.int64)
    m = MOTION_MATRIX @ d
    return int(m[0]), int(m[1]), int(m[2]), int(m[3])


def convert(frames: ArrayLike) -> MotionArray:
    """Frame 列 (N, 4) を運動ベクトル列 (N-1, 4) へ変換する。

    - N <= 1 の場合は形状 (0, 4) の空配列。
    - 各行は対応する隣接ペアのみに依存する（行ごとに独立）。
    - 返り値は読み取り専用。
    """
    arr = _as_frames(frames)
    if len(arr) <= 1:
        out = np.zeros((0, VOICE_COUNT), dtype=np.int64)
    else:
        deltas = np.diff(arr, axis=0)
        out = deltas @ MOTION_MATRIX.T
    out.flags.writeable = False
    return out


def total_shift(motions: ArrayLike) -> tuple[int, int, int, int]:
    """運動ベクトル列の成分ごとの総和を返す。空なら全て 0。"""
    arr = np.asarray(motions, dtype=np.int64).reshape(-1, VOICE_COUNT)
    s = arr.sum(axis=0)
    return int(s[0]), int(s[1]), int(s[2]), int(s[3])


__all__ = ["MOTION_MATRIX", "transform_pair", "convert", "total_shift"]
