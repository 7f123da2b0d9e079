"""
どこで: `engine.core` の簡易フレームドライバ。
何を: `Tickable` の列を固定順序で呼び出す FrameClock（dt 測定とループ管理）。
なぜ: GUI/ループから呼び出すだけで、再生→描画更新の順序を統一するため。
"""

from __future__ import annotations

import time
from typing import Callable, Sequence

from .tickable import Tickable


class FrameClock:
    """登録された Tickable を固定順序で実行するだけの極小クラス。

    `clock` は dt 未指定時の計測に使う単調時計（テストでは差し替え可能）。
    """

    def __init__(
        self,
        tickables: Sequence[Tickable],
        *,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self._tickables = tuple(tickables)
        self._clock = clock
        self._last_time = clock()
        self.frame_count = 0

    # GUI フレームワークから schedule_interval で呼ばせる
    def tick(self, dt: float | None = None) -> None:
        now = self._clock()
        if dt is None:  # pyglet は dt を渡してくれる
            dt = now - self._last_time
        self._last_time = now
        dt = max(0.0, float(dt))

        self.frame_count += 1
        for t in self._tickables:
            t.tick(dt)
