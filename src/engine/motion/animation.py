"""
どこで: `engine.motion.animation`
何を: 運動ベクトル列を壁時計時間で 1 キーフレームずつ進め、補間位置/色と軌跡履歴を提供する状態機械。
なぜ: 描画ループから `advance(dt)` を 1 フレーム 1 回呼ぶだけで、滑らかなサンプル列を得られるようにするため。

状態遷移:
    INITIALIZED --advance--> PLAYING --(index >= 件数)--> COMPLETED（終端）

設計方針:
- 1 回の `advance` で処理する境界は高々 1 つ。dt が大きくても追いつき処理はしない。
- 進捗（progress）は境界直前の 1 フレームだけ 1.0 を超え得る。補間ではクランプしない。
- COMPLETED 後の `advance` は何も変更せず `STOP` を返す（呼び出し側は停止すること）。
"""

from __future__ import annotations

import logging
import math
from collections import deque
from enum import Enum
from typing import Deque

import numpy as np
from numpy.typing import ArrayLike

from common.settings import get as get_settings
from common.types import VOICE_COUNT, MotionArray, Vec3
from util.color import hsv_to_rgb

logger = logging.getLogger(__name__)


class AdvanceResult(Enum):
    """`advance` の戻り値。"""

    CONTINUE = "continue"
    STOP = "stop"


class AnimationPhase(Enum):
    INITIALIZED = "initialized"
    PLAYING = "playing"
    COMPLETED = "completed"


def _frac(x: float) -> float:
    """x の小数部（0.0 <= r < 1.0）。負の値にも安定。"""
    r = x - math.floor(x)
    if r < 0.0 or r >= 1.0:
        return 0.0
    return r


def shortest_hue_diff(current: float, target: float) -> float:
    """円環 [0, 1) 上で current → target の短い方向の差分を返す。"""
    diff = target - current
    if abs(diff) > 0.5:
        diff = diff - 1.0 if diff > 0.0 else diff + 1.0
    return diff


class MotionAnimation:
    """運動ベクトル列を補間再生するアニメーション状態。

    引数:
        motions: (N, 4) の運動ベクトル列（N >= 1）。
        position_scale: ベクトル成分 /100 に掛ける位置スケール。None で設定値。
        color_scale: 総運動成分に掛ける色相スケール。None で設定値。
        keyframe_duration: 1 キーフレームの遷移時間 [秒]。None で設定値。
        history_capacity: 軌跡履歴の最大件数。None で設定値。
    """

    def __init__(
        self,
        motions: ArrayLike,
        *,
        position_scale: float | None = None,
        color_scale: float | None = None,
        keyframe_duration: float | None = None,
        history_capacity: int | None = None,
    ) -> None:
        arr = np.array(motions, dtype=np.int64)
        if arr.size == 0:
            raise ValueError("motion sequence must not be empty")
        if arr.ndim != 2 or arr.shape[1] != VOICE_COUNT:
            raise ValueError(f"motions must have shape (N, {VOICE_COUNT}), got {arr.shape}")
        arr.flags.writeable = False

        s = get_settings()
        self._position_scale = float(s.POSITION_SCALE if position_scale is None else position_scale)
        self._color_scale = float(s.COLOR_SCALE if color_scale is None else color_scale)
        self._keyframe_duration = float(
            s.KEYFRAME_DURATION if keyframe_duration is None else keyframe_duration
        )
        if self._keyframe_duration <= 0.0:
            raise ValueError("keyframe_duration は正の値が必要")
        capacity = int(s.HISTORY_CAPACITY if history_capacity is None else history_capacity)
        if capacity < 1:
            raise ValueError("history_capacity は 1 以上が必要")

        self._motions: MotionArray = arr
        self.current_position: Vec3 = np.zeros(3, dtype=np.float64)
        self.target_position: Vec3 = self.current_position + self._offset(arr[0])
        self.current_index = 0
        self.progress = 0.0
        self.target_hue = self._hue(arr[0])
        self.current_hue = self.target_hue
        self.elapsed = 0.0
        self._history: Deque[tuple[float, float, float]] = deque(maxlen=capacity)
        self._phase = AnimationPhase.INITIALIZED

    # ---- 内部ユーティリティ -------------------------------------------
    def _offset(self, motion: np.ndarray) -> Vec3:
        return motion[1:4].astype(np.float64) / 100.0 * self._position_scale

    def _hue(self, motion: np.ndarray) -> float:
        return abs(float(motion[0]) * self._color_scale) % 1.0

    # ---- 参照 -----------------------------------------------------------
    @property
    def motions(self) -> MotionArray:
        return self._motions

    @property
    def phase(self) -> AnimationPhase:
        return self._phase

    @property
    def finished(self) -> bool:
        return self._phase is AnimationPhase.COMPLETED

    @property
    def keyframe_duration(self) -> float:
        return self._keyframe_duration

    @property
    def history(self) -> list[tuple[float, float, float]]:
        """訪問順（古い→新しい）の位置履歴のコピー。"""
        return list(self._history)

    @property
    def history_capacity(self) -> int:
        return int(self._history.maxlen or 0)

    # ---- 更新 -----------------------------------------------------------
    def advance(self, dt: float) -> AdvanceResult:
        """状態を `dt` 秒進める。境界を越えた場合は 1 キーフレームだけ遷移する。"""
        if dt < 0.0:
            raise ValueError(f"dt must be >= 0, got {dt}")
        if self._phase is AnimationPhase.COMPLETED:
            return AdvanceResult.STOP
        if dt > 0.0:
            self._phase = AnimationPhase.PLAYING

        self.elapsed += dt
        self.progress += dt / self._keyframe_duration
        if self.progress < 1.0:
            return AdvanceResult.CONTINUE

        self.progress = 0.0
        self.current_position = self.target_position.copy()
        self._history.append(
            (
                float(self.current_position[0]),
                float(self.current_position[1]),
                float(self.current_position[2]),
            )
        )
        self.current_index += 1

        if self.current_index >= len(self._motions):
            self._phase = AnimationPhase.COMPLETED
            logger.info("animation complete after %d keyframe(s)", len(self._motions))
            return AdvanceResult.STOP

        motion = self._motions[self.current_index]
        self.current_hue = self.target_hue
        self.target_hue = self._hue(motion)
        self.target_position = self.current_position + self._offset(motion)
        return AdvanceResult.CONTINUE

    # ---- 補間クエリ -----------------------------------------------------
    def interpolated_position(self) -> Vec3:
        """現在位置と目標位置を生の進捗で線形補間した座標（クランプなし）。"""
        return self.current_position + (self.target_position - self.current_position) * self.progress

    def interpolated_hue(self) -> float:
        """色相を円環上の短い方向で補間した値（[0, 1)）。"""
        diff = shortest_hue_diff(self.current_hue, self.target_hue)
        return _frac(self.current_hue + diff * self.progress)

    def interpolated_color(self) -> tuple[float, float, float]:
        """補間色相を彩度 1・明度 1 で RGB（0–1）へ変換して返す。"""
        return hsv_to_rgb(self.interpolated_hue(), 1.0, 1.0)

    def __repr__(self) -> str:
        return (
            f"MotionAnimation(index={self.current_index}/{len(self._motions)}, "
            f"progress={self.progress:.3f}, phase={self._phase.value})"
        )


__all__ = ["AdvanceResult", "AnimationPhase", "MotionAnimation", "shortest_hue_diff"]
