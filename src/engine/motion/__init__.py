"""
どこで: `engine.motion` サブパッケージ。
何を: Frame 列 → 運動ベクトル列の固定変換と、運動ベクトル列を時間駆動で補間するアニメーション状態。
なぜ: 描画技術に依存しない数値コアを分離し、レンダラ/CLI/テストから同一 API で使うため。
"""

from .animation import AdvanceResult, AnimationPhase, MotionAnimation
from .transform import MOTION_MATRIX, convert, total_shift, transform_pair

__all__ = [
    "AdvanceResult",
    "AnimationPhase",
    "MotionAnimation",
    "MOTION_MATRIX",
    "convert",
    "total_shift",
    "transform_pair",
]
