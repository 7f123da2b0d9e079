"""
どこで: `api.report`
何を: 抽出 Frame・運動ベクトル・総シフトの診断リストを文字列行として整形する。
なぜ: CLI の標準出力とテストで同一の書式を共有するため（出力先は呼び出し側が決める）。
"""

from __future__ import annotations

from typing import Iterable, Sequence

from numpy.typing import ArrayLike

from engine.motion.transform import total_shift


def _format_row(row: Sequence[int]) -> str:
    return "[" + ", ".join(str(int(v)) for v in row) + "]"


def format_rows(rows: Iterable[Sequence[int]]) -> list[str]:
    """各行を `"000: [a, b, c, d]"` 形式で返す。"""
    return [f"{i:03}: {_format_row(row)}" for i, row in enumerate(rows)]


def format_frames(frames: Iterable[Sequence[int]]) -> list[str]:
    return ["Parsed Voice Leadings:", *format_rows(frames)]


def format_motions(motions: Iterable[Sequence[int]]) -> list[str]:
    return ["Transformed Voice Motion Vectors:", *format_rows(motions)]


def format_total_shift(motions: ArrayLike) -> str:
    return f"Total shift [total, x, y, z]: {_format_row(total_shift(motions))}"


def build_report(frames: ArrayLike, motions: ArrayLike) -> list[str]:
    """Frame 一覧・運動ベクトル一覧・総シフトを空行区切りで連結した行リスト。"""
    return [
        *format_frames(frames),  # type: ignore[arg-type]
        "",
        *format_motions(motions),  # type: ignore[arg-type]
        "",
        format_total_shift(motions),
    ]


__all__ = ["format_rows", "format_frames", "format_motions", "format_total_shift", "build_report"]
