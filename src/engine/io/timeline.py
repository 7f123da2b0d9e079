"""
どこで: `engine.io.timeline`
何を: 標準 MIDI ファイルのバイト列から、最大 4 声部の 16 分音符量子化ピッチ列（Frame 列）を抽出する。
なぜ: 以降の運動変換/アニメーションが扱う唯一の入力を、決定的かつ形状保証付き（(N, 4) int）で提供するため。

処理の流れ:
1) ヘッダの分解能 tpq から `ticks_per_16th = tpq // 4` を求める（SMPTE は拒否）。
2) 先頭 4 トラックについて、velocity > 0 の note_on を `絶対tick → ピッチ` として記録。
3) tick 0 から最終記録 tick まで 16 分刻みでサンプリング（直前のピッチを保持）。
4) 先頭の無音を最初の発音ピッチで埋める。
5) 最長の声部に合わせて末尾を 0 で揃える。
"""

from __future__ import annotations

import io
import logging
from bisect import bisect_right
from os import PathLike
from pathlib import Path
from typing import Mapping, Sequence

import mido
import numpy as np

from common.settings import get as get_settings
from common.types import VOICE_COUNT, FrameArray

from .errors import ParseError, TimingUnsupported

logger = logging.getLogger(__name__)

# ヘッダ division の最上位ビットが立っていれば SMPTE 形式
_SMPTE_FLAG = 0x8000

# 1 拍（4 分音符）あたりの 16 分音符数
_SIXTEENTHS_PER_QUARTER = 4


def _parse_midi(data: bytes) -> mido.MidiFile:
    try:
        return mido.MidiFile(file=io.BytesIO(data))
    except (OSError, EOFError, ValueError, KeyError, IndexError) as e:
        raise ParseError(f"malformed MIDI data: {e}") from e


def ticks_per_sixteenth(ticks_per_beat: int) -> int:
    """ヘッダ division から 16 分音符あたりの tick 数を返す。

    - SMPTE 形式（最上位ビット）と、グリッドを構成できない tpq < 4 は `TimingUnsupported`。
    """
    division = int(ticks_per_beat)
    if division & _SMPTE_FLAG or division <= 0:
        raise TimingUnsupported(division)
    step = division // _SIXTEENTHS_PER_QUARTER
    if step == 0:
        raise TimingUnsupported(
            division, f"ticks per quarter note too small for a 16th grid: {division}"
        )
    return step


def collect_note_onsets(track: Sequence[mido.Message]) -> dict[int, int]:
    """トラックの note_on（velocity > 0）を `絶対tick → ピッチ` に集約する。

    同一 tick の後続イベントは前のものを上書きする。velocity 0 の note_on は
    新しいピッチを持たないものとして無視する（無音扱いにはしない）。
    """
    notes_by_tick: dict[int, int] = {}
    abs_tick = 0
    for msg in track:
        abs_tick += int(msg.time)
        if msg.type == "note_on" and msg.velocity > 0:
            notes_by_tick[abs_tick] = int(msg.note)
    return notes_by_tick


def sample_timeline(notes_by_tick: Mapping[int, int], ticks_per_16th: int) -> list[int]:
    """疎な `tick → ピッチ` を 16 分グリッドでサンプリングする（サステイン保持）。

    tick 0 から最終記録 tick まで（含む）を `ticks_per_16th` 刻みで走査し、
    各サンプル点ではその時点以前で最後に記録されたピッチを保持する。最初の記録より前は 0。
    記録が 1 件も無いトラックは `[0]`（1 サンプルの無音）になる。
    """
    if ticks_per_16th <= 0:
        raise ValueError("ticks_per_16th は正の値が必要")
    ticks = sorted(notes_by_tick)
    max_tick = ticks[-1] if ticks else 0
    timeline: list[int] = []
    for tick in range(0, max_tick + 1, ticks_per_16th):
        i = bisect_right(ticks, tick)
        timeline.append(notes_by_tick[ticks[i - 1]] if i > 0 else 0)
    return timeline


def backfill_leading_silence(timeline: Sequence[int]) -> list[int]:
    """先頭の無音（0）を最初の非 0 ピッチで埋めた新しいリストを返す。

    最初の非 0 サンプル以降は変更しない。全て 0 の場合はそのまま。
    """
    out = list(timeline)
    first = next((p for p in out if p != 0), None)
    if first is None:
        return out
    for i, p in enumerate(out):
        if p != 0:
            break
        out[i] = first
    return out


def align_timelines(timelines: Sequence[Sequence[int]]) -> FrameArray:
    """声部ごとのタイムラインを (N, 4) の Frame 配列へ揃える。

    N は最長タイムライン長。短い声部の末尾と欠けた声部は 0 で埋める（保持はしない）。
    """
    if len(timelines) > VOICE_COUNT:
        raise ValueError(f"at most {VOICE_COUNT} voices are supported, got {len(timelines)}")
    length = max((len(t) for t in timelines), default=0)
    frames = np.zeros((length, VOICE_COUNT), dtype=np.int64)
    for voice, timeline in enumerate(timelines):
        if timeline:
            frames[: len(timeline), voice] = np.asarray(timeline, dtype=np.int64)
    return frames


def extract_frames(data: bytes) -> FrameArray:
    """MIDI バイト列から Frame 配列 (N, 4) を抽出する。

    Raises
    ------
    ParseError
        バイト列が MIDI として解釈できない。
    TimingUnsupported
        分解能がメトリカル（ticks-per-quarter-note）でない。
    """
    midi = _parse_midi(data)
    step = ticks_per_sixteenth(midi.ticks_per_beat)

    timelines: list[list[int]] = []
    for track in midi.tracks[:VOICE_COUNT]:
        sampled = sample_timeline(collect_note_onsets(track), step)
        timelines.append(backfill_leading_silence(sampled))

    frames = align_timelines(timelines)
    if len(midi.tracks) > VOICE_COUNT:
        logger.debug("ignoring %d extra track(s)", len(midi.tracks) - VOICE_COUNT)
    if get_settings().DEBUG_TIMELINE:
        for voice, timeline in enumerate(timelines):
            logger.debug("voice %d: %s", voice, timeline)
    logger.debug(
        "extracted %d frame(s) from %d track(s) at %d ticks per 16th",
        len(frames),
        min(len(midi.tracks), VOICE_COUNT),
        step,
    )
    return frames


def load_frames(path: str | PathLike[str]) -> FrameArray:
    """ファイルを読み込み `extract_frames` を適用する。読み込み失敗は `OSError` のまま伝搬。"""
    data = Path(path).read_bytes()
    return extract_frames(data)


__all__ = [
    "ticks_per_sixteenth",
    "collect_note_onsets",
    "sample_timeline",
    "backfill_leading_silence",
    "align_timelines",
    "extract_frames",
    "load_frames",
]
