"""
どこで: `engine.render.scene`
何を: pyglet.shapes による球・参照グリッド・軌跡ドットの描画（毎フレーム `update` で同期）。
なぜ: アニメーション状態の補間位置/色/履歴を、投影済みの 2D 図形として最小コストで描くため。

注意:
- グリッドは固定カメラ前提で生成時に 1 度だけ投影する。
- 軌跡ドットは図形をプールして再利用し、余剰分は非表示にする。
"""

from __future__ import annotations

import logging
from typing import Any

import pyglet

from engine.motion.animation import MotionAnimation
from util.color import to_u8_rgba

from .projection import Camera, project_points, projected_radius
from .scene_geometry import GRID_CELLS, GRID_SIZE, grid_segments, trail_points

logger = logging.getLogger(__name__)

SPHERE_RADIUS = 30.0
TRAIL_DOT_RADIUS = 1.5


class MotionScene:
    """球/グリッド/軌跡を 1 つの Batch にまとめて保持する。"""

    def __init__(
        self,
        width: int,
        height: int,
        *,
        camera: Camera | None = None,
        grid_color: Any = (0.3, 0.3, 0.4),
        trail_color: Any = (0.4, 0.5, 0.6),
    ) -> None:
        self.width = int(width)
        self.height = int(height)
        self.camera = camera or Camera()
        self.batch = pyglet.graphics.Batch()
        self._trail_rgba = to_u8_rgba(trail_color)

        self._grid = self._build_grid(to_u8_rgba(grid_color))
        self._trail: list[pyglet.shapes.Circle] = []
        self._sphere = pyglet.shapes.Circle(
            self.width / 2, self.height / 2, SPHERE_RADIUS, color=(255, 0, 0, 255), batch=self.batch
        )

    def _build_grid(self, rgba: tuple[int, int, int, int]) -> list[pyglet.shapes.Line]:
        segments = grid_segments(GRID_CELLS, GRID_SIZE)
        screen, _, visible = project_points(
            segments.reshape(-1, 3), self.camera, self.width, self.height
        )
        lines = []
        for i in range(len(segments)):
            a, b = 2 * i, 2 * i + 1
            if not (visible[a] and visible[b]):
                continue
            lines.append(
                pyglet.shapes.Line(
                    screen[a, 0], screen[a, 1], screen[b, 0], screen[b, 1],
                    color=rgba, batch=self.batch,
                )
            )
        logger.debug("grid: %d/%d line(s) visible", len(lines), len(segments))
        return lines

    def _ensure_trail_capacity(self, count: int) -> None:
        while len(self._trail) < count:
            self._trail.append(
                pyglet.shapes.Circle(
                    0, 0, TRAIL_DOT_RADIUS, color=self._trail_rgba, batch=self.batch
                )
            )

    def update(self, animation: MotionAnimation) -> None:
        """アニメーションの現在のサンプルを図形へ反映する。"""
        position = animation.interpolated_position()
        r, g, b = animation.interpolated_color()

        screen, depth, visible = project_points(position, self.camera, self.width, self.height)
        self._sphere.visible = bool(visible[0])
        if visible[0]:
            self._sphere.x = float(screen[0, 0])
            self._sphere.y = float(screen[0, 1])
            self._sphere.radius = projected_radius(
                SPHERE_RADIUS, float(depth[0]), self.camera, self.height
            )
            self._sphere.color = to_u8_rgba((r, g, b, 1.0))

        dots = trail_points(animation.history, position)
        self._ensure_trail_capacity(len(dots))
        dot_screen, dot_depth, dot_visible = project_points(
            dots, self.camera, self.width, self.height
        )
        for i, shape in enumerate(self._trail):
            if i >= len(dots) or not dot_visible[i]:
                shape.visible = False
                continue
            shape.visible = True
            shape.x = float(dot_screen[i, 0])
            shape.y = float(dot_screen[i, 1])
            shape.radius = max(
                1.0, projected_radius(TRAIL_DOT_RADIUS, float(dot_depth[i]), self.camera, self.height)
            )

    def draw(self) -> None:
        self.batch.draw()


__all__ = ["MotionScene", "SPHERE_RADIUS", "TRAIL_DOT_RADIUS"]
