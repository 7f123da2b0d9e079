"""
どこで: `engine.render.projection`
何を: 固定カメラ（視点/注視点/上方向/画角）による 3D 点群の透視投影（numpy ベクトル化）。
なぜ: ウィンドウ座標系（左下原点）へ写像する計算を GUI から切り離して検証可能にするため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike


@dataclass(frozen=True)
class Camera:
    """固定カメラ。既定は (0, 200, 500) から原点を見下ろす。"""

    eye: tuple[float, float, float] = (0.0, 200.0, 500.0)
    target: tuple[float, float, float] = (0.0, 0.0, 0.0)
    up: tuple[float, float, float] = (0.0, 1.0, 0.0)
    fov_y: float = math.pi / 4.0
    near: float = 0.1

    def basis(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """(右, 上, 前) の正規直交基底を返す。"""
        eye = np.asarray(self.eye, dtype=np.float64)
        forward = np.asarray(self.target, dtype=np.float64) - eye
        norm = np.linalg.norm(forward)
        if norm == 0.0:
            raise ValueError("camera eye and target must differ")
        forward /= norm
        right = np.cross(forward, np.asarray(self.up, dtype=np.float64))
        rnorm = np.linalg.norm(right)
        if rnorm == 0.0:
            raise ValueError("camera up vector must not be parallel to the view direction")
        right /= rnorm
        up = np.cross(right, forward)
        return right, up, forward


def focal_length(camera: Camera, height: int) -> float:
    """画面高さ `height` [px] に対する焦点距離 [px]。"""
    return (height / 2.0) / math.tan(camera.fov_y / 2.0)


def project_points(
    points: ArrayLike, camera: Camera, width: int, height: int
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """ワールド座標 (N, 3) を画面座標へ投影する。

    Returns
    -------
    (screen, depth, visible)
        screen: (N, 2) float64 の画面座標（左下原点、pyglet 準拠）
        depth: (N,) カメラ前方方向の距離
        visible: (N,) bool。`depth > near` の点のみ True（それ以外の screen は未定義）
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    right, up, forward = camera.basis()
    rel = pts - np.asarray(camera.eye, dtype=np.float64)
    x = rel @ right
    y = rel @ up
    z = rel @ forward
    visible = z > camera.near
    safe_z = np.where(visible, z, 1.0)
    f = focal_length(camera, height)
    screen = np.empty((len(pts), 2), dtype=np.float64)
    screen[:, 0] = width / 2.0 + x * f / safe_z
    screen[:, 1] = height / 2.0 + y * f / safe_z
    return screen, z, visible


def projected_radius(radius: float, depth: float, camera: Camera, height: int) -> float:
    """深度 `depth` にある半径 `radius` の球の画面上の半径 [px]（不可視なら 0）。"""
    if depth <= camera.near:
        return 0.0
    return float(radius) * focal_length(camera, height) / float(depth)


__all__ = ["Camera", "focal_length", "project_points", "projected_radius"]
