"""
どこで: `engine.io.errors`
何を: MIDI 読み込み段階の致命的エラー（解析失敗/未対応タイミング）を定義。
なぜ: アニメーション状態を作る前に失敗を型で区別し、CLI が終了コードへ写像できるようにするため。
"""

from __future__ import annotations


class MidiError(Exception):
    """MIDI 入力に起因する致命的エラーの基底。"""


class ParseError(MidiError):
    """バイト列が標準 MIDI ファイルとして解釈できない場合に送出される。"""


class TimingUnsupported(MidiError):
    """ヘッダの時間分解能が ticks-per-quarter-note（メトリカル）でない場合に送出される。

    SMPTE 形式のほか、16 分音符グリッドを構成できない分解能（tpq < 4）も含む。
    """

    def __init__(self, division: int, reason: str | None = None) -> None:
        message = reason or f"unsupported MIDI timing (division=0x{division & 0xFFFF:04X})"
        super().__init__(message)
        self.division = division


__all__ = ["MidiError", "ParseError", "TimingUnsupported"]
