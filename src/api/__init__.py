"""
どこで: `api` 入口（高レベル公開 API）。
何を: MIDI → Frame 抽出、運動ベクトル変換、アニメーション状態、ビューア/CLI を再輸出。
なぜ: 利用者が単一名前空間から抽出→変換→再生まで完結できるようにするため。

Usage:
    from api import load_frames, convert, MotionAnimation

    frames = load_frames("song.mid")
    motions = convert(frames)
    anim = MotionAnimation(motions)
    while anim.advance(1 / 60) is AdvanceResult.CONTINUE:
        pos, rgb = anim.interpolated_position(), anim.interpolated_color()
"""

from engine.io.errors import MidiError, ParseError, TimingUnsupported
from engine.io.timeline import extract_frames, load_frames
from engine.motion.animation import AdvanceResult, AnimationPhase, MotionAnimation
from engine.motion.transform import MOTION_MATRIX, convert, total_shift

from .viewer import run_viewer

__all__ = [
    "MidiError",
    "ParseError",
    "TimingUnsupported",
    "extract_frames",
    "load_frames",
    "AdvanceResult",
    "AnimationPhase",
    "MotionAnimation",
    "MOTION_MATRIX",
    "convert",
    "total_shift",
    "run_viewer",
]
