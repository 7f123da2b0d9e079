"""
どこで: `common.types`
何を: パイプライン全体で共有する配列型エイリアスと声部数などの定数。
なぜ: 抽出/変換/アニメーションの各層で同一の形状規約（(N, 4) 整数配列）を参照するため。
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

# 追跡する声部（トラック）数
VOICE_COUNT = 4

# (N, 4) int64。各行が 1 ステップの声部ピッチ（無音は 0）
FrameArray = npt.NDArray[np.int64]

# (N-1, 4) int64。各行が [total, x, y, z] の運動ベクトル
MotionArray = npt.NDArray[np.int64]

# (3,) float64 の空間座標
Vec3 = npt.NDArray[np.float64]

__all__ = ["VOICE_COUNT", "FrameArray", "MotionArray", "Vec3"]
