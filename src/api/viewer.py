"""
どこで: `api.viewer`
何を: 運動ベクトル列を pyglet ウィンドウで再生する（FrameClock → MotionPlayer → MotionScene）。
なぜ: 数値コア（`MotionAnimation`）を描画ループへ接続する唯一の入口を提供し、CLI を薄く保つため。

フレーム駆動:
- `pyglet.clock.schedule_interval(frame_clock.tick, 1 / fps)` が毎フレーム dt を渡す。
- `MotionPlayer.tick(dt)` は `advance(dt)` を 1 回だけ呼び、`STOP` を受けたら以降は呼ばない。
- `ESC` またはウィンドウを閉じると再生を打ち切る（コア側に取消機構は無い）。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping

import numpy as np
from numpy.typing import ArrayLike

from common.types import VOICE_COUNT
from engine.motion.animation import AdvanceResult, MotionAnimation
from util.color import normalize_color

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewerConfig:
    width: int = 1280
    height: int = 720
    fps: int = 60
    background_color: tuple[float, float, float, float] = (0.05, 0.05, 0.1, 1.0)
    grid_color: tuple[float, float, float, float] = (0.3, 0.3, 0.4, 1.0)
    trail_color: tuple[float, float, float, float] = (0.4, 0.5, 0.6, 1.0)


def _positive_int(value: Any, default: int) -> int:
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        return default


def _color(value: Any, default: tuple[float, float, float, float]) -> tuple[float, float, float, float]:
    if value is None:
        return default
    try:
        return normalize_color(value)
    except ValueError as e:
        logger.warning("invalid viewer color %r: %s", value, e)
        return default


def resolve_viewer_config(cfg: Mapping[str, Any] | None) -> ViewerConfig:
    """構成辞書の `viewer` セクションから ViewerConfig を解決する（不正値は既定値）。"""
    d = ViewerConfig()
    section = cfg.get("viewer", {}) if isinstance(cfg, Mapping) else {}
    if not isinstance(section, Mapping):
        section = {}
    return ViewerConfig(
        width=_positive_int(section.get("width", d.width), d.width),
        height=_positive_int(section.get("height", d.height), d.height),
        fps=_positive_int(section.get("fps", d.fps), d.fps),
        background_color=_color(section.get("background_color"), d.background_color),
        grid_color=_color(section.get("grid_color"), d.grid_color),
        trail_color=_color(section.get("trail_color"), d.trail_color),
    )


class MotionPlayer:
    """`MotionAnimation` を 1 フレームずつ進め、結果をシーンへ反映する Tickable。

    引数:
        animation: 再生対象。
        on_frame: 各フレームの更新後に呼ぶ関数（シーン同期など）。
        on_stop: `STOP` を受け取った時に 1 度だけ呼ぶ関数。
    """

    def __init__(
        self,
        animation: MotionAnimation,
        *,
        on_frame: Callable[[MotionAnimation], None] | None = None,
        on_stop: Callable[[], None] | None = None,
    ) -> None:
        self.animation = animation
        self._on_frame = on_frame
        self._on_stop = on_stop
        self.running = True

    def stop(self) -> None:
        self.running = False

    def tick(self, dt: float) -> None:
        if not self.running:
            return
        result = self.animation.advance(dt)
        if self._on_frame is not None:
            self._on_frame(self.animation)
        if result is AdvanceResult.STOP:
            self.running = False
            if self._on_stop is not None:
                self._on_stop()


def run_viewer(motions: ArrayLike, *, config: Mapping[str, Any] | None = None) -> bool:
    """運動ベクトル列をウィンドウで再生する。再生したら True、空列で描画しなかったら False。

    `config` が None の場合は `util.utils.load_config()` を用いる。
    """
    arr = np.asarray(motions, dtype=np.int64).reshape(-1, VOICE_COUNT)
    if len(arr) == 0:
        logger.warning("No transformation data to render")
        return False

    if config is None:
        from util.utils import load_config

        config = load_config()
    vc = resolve_viewer_config(config)
    animation = MotionAnimation(arr)

    # 遅延インポート（ヘッドレス環境では --no-window で回避できるように）
    import pyglet

    from engine.core.frame_clock import FrameClock
    from engine.core.render_window import RenderWindow
    from engine.render.scene import MotionScene

    window = RenderWindow(vc.width, vc.height, bg_color=vc.background_color)
    scene = MotionScene(
        vc.width, vc.height, grid_color=vc.grid_color, trail_color=vc.trail_color
    )
    scene.update(animation)
    window.add_draw_callback(scene.draw)

    def _finish() -> None:
        pyglet.clock.unschedule(frame_clock.tick)
        window.close()
        pyglet.app.exit()

    player = MotionPlayer(animation, on_frame=scene.update, on_stop=_finish)
    frame_clock = FrameClock([player])
    window.add_close_callback(player.stop)
    window.add_close_callback(lambda: pyglet.clock.unschedule(frame_clock.tick))

    pyglet.clock.schedule_interval(frame_clock.tick, 1 / vc.fps)
    logger.info("playing %d keyframe(s) at %d fps", len(animation.motions), vc.fps)
    pyglet.app.run()
    return True


__all__ = ["ViewerConfig", "resolve_viewer_config", "MotionPlayer", "run_viewer"]
