"""共通フィクスチャ。

- mido でメモリ上に標準 MIDI ファイルを組み立てるビルダ
- 設定（環境変数）のリセット
"""

from __future__ import annotations

import io
from typing import Callable, Iterator, Sequence

import mido
import pytest

# (絶対tick, ピッチ, velocity)。velocity 0 は note_on(vel=0)、負値は note_off として扱う
NoteEvent = tuple[int, int, int]


def build_midi(tracks: Sequence[Sequence[NoteEvent]], *, ticks_per_beat: int = 480) -> bytes:
    """トラックごとのイベント列から SMF（format 1）のバイト列を作る。"""
    mid = mido.MidiFile(type=1, ticks_per_beat=ticks_per_beat)
    for events in tracks:
        track = mido.MidiTrack()
        prev = 0
        for tick, note, velocity in sorted(events, key=lambda e: e[0]):
            if velocity < 0:
                msg = mido.Message("note_off", note=note, velocity=0, time=tick - prev)
            else:
                msg = mido.Message("note_on", note=note, velocity=velocity, time=tick - prev)
            track.append(msg)
            prev = tick
        track.append(mido.MetaMessage("end_of_track", time=0))
        mid.tracks.append(track)
    buf = io.BytesIO()
    mid.save(file=buf)
    return buf.getvalue()


@pytest.fixture()
def midi_bytes() -> Callable[..., bytes]:
    return build_midi


@pytest.fixture()
def two_voice_midi() -> bytes:
    """2 トラック: 60 と 64 を tick 0 から 16 分 2 つぶん保持（2 つ目で打ち直し）。"""
    step = 480 // 4
    return build_midi(
        [
            [(0, 60, 90), (step, 60, 90), (2 * step, 60, -1)],
            [(0, 64, 90), (step, 64, 90), (2 * step, 64, -1)],
        ]
    )


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """VMV_* 環境変数を除去した状態で設定を読み直し、テスト後も既定へ戻す。"""
    from common import settings

    for name in (
        "VMV_POSITION_SCALE",
        "VMV_COLOR_SCALE",
        "VMV_KEYFRAME_DURATION",
        "VMV_HISTORY_CAPACITY",
        "VMV_LOG_LEVEL",
        "VMV_DEBUG_TIMELINE",
    ):
        monkeypatch.delenv(name, raising=False)
    settings.reload_from_env()
    yield
    monkeypatch.undo()
    settings.reload_from_env()
