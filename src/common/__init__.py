"""
どこで: `common` パッケージ。
何を: 設定/環境変数/ロギング/型エイリアスなどの軽量共通基盤。
なぜ: io/motion/render/api の各層から再利用する基盤を分離し、依存の向きを単純化するため。
"""

from .types import VOICE_COUNT, FrameArray, MotionArray, Vec3

__all__ = [
    "VOICE_COUNT",
    "FrameArray",
    "MotionArray",
    "Vec3",
]
