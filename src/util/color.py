"""
どこで: `util.color`。
何を: HSV→RGB 変換と、設定値の色指定（Hex / RGB(A) 0–1 / 0–255）の正規化を一元化。
なぜ: アニメーションの補間色とビューア設定（背景/グリッド/軌跡色）で同一の受理仕様を使うため。
"""

from __future__ import annotations

import colorsys
from typing import Sequence


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else 1.0 if x > 1.0 else float(x)


def hsv_to_rgb(h: float, s: float, v: float) -> tuple[float, float, float]:
    """HSV を RGB(0–1) へ変換する。h は周期 1 として wrap、s/v は 0–1 に clamp。"""
    r, g, b = colorsys.hsv_to_rgb(float(h) % 1.0, _clamp01(s), _clamp01(v))
    return (float(r), float(g), float(b))


def parse_hex_color(s: str) -> tuple[float, float, float, float]:
    """"#RRGGBB" / "#RRGGBBAA"（"#" 省略可）から RGBA(0–1) を返す。"""
    t = s.strip().lstrip("#")
    if len(t) not in (6, 8):
        raise ValueError(f"invalid hex color length: '{s}' (expected RRGGBB or RRGGBBAA)")
    try:
        channels = [int(t[i : i + 2], 16) for i in range(0, len(t), 2)]
    except ValueError as e:
        raise ValueError(f"invalid hex color: '{s}'") from e
    if len(channels) == 3:
        channels.append(255)
    r, g, b, a = (c / 255.0 for c in channels)
    return (r, g, b, a)


def normalize_color(value: object) -> tuple[float, float, float, float]:
    """色を RGBA(0–1) へ正規化する。

    - 受理: Hex 文字列, (r,g,b[,a])。全要素が 0..1 なら 0–1 とみなし、それ以外は 0–255。
    - 返値: (r,g,b,a) （0–1）
    """
    if isinstance(value, str):
        return parse_hex_color(value)
    if not isinstance(value, (list, tuple)) or len(value) not in (3, 4):
        raise ValueError(f"unsupported color value: {value!r}")
    seq: Sequence[object] = value
    try:
        channels = [float(c) for c in seq]  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid color tuple/list: {value!r}") from e
    if len(channels) == 3:
        channels.append(1.0 if all(0.0 <= c <= 1.0 for c in channels) else 255.0)
    if not all(0.0 <= c <= 1.0 for c in channels):
        channels = [max(0, min(255, round(c))) / 255.0 for c in channels]
    r, g, b, a = (_clamp01(c) for c in channels)
    return (r, g, b, a)


def to_u8_rgba(value: object) -> tuple[int, int, int, int]:
    """色を RGBA(0–255) へ変換する。"""
    r, g, b, a = normalize_color(value)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)), int(round(a * 255)))


__all__ = [
    "hsv_to_rgb",
    "parse_hex_color",
    "normalize_color",
    "to_u8_rgba",
]
