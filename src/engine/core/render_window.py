"""
どこで: `engine.core` の描画ウィンドウ薄ラッパ。
何を: Pyglet Window（MSAA/背景クリア）と描画コールバック登録、Escape での終了を提供。
なぜ: シーン描画層から GUI 依存を切り離し、最小インターフェイスで統一するため。

使用例:
    win = RenderWindow(1280, 720, bg_color=(0.05, 0.05, 0.1, 1.0))

    def draw_scene():
        batch.draw()

    win.add_draw_callback(draw_scene)
    pyglet.app.run()
"""

from typing import Callable

import pyglet
from pyglet.gl import Config, glClearColor
from pyglet.window import key


class RenderWindow(pyglet.window.Window):
    def __init__(
        self,
        width: int,
        height: int,
        *,
        caption: str = "MIDI Visualization - Press ESC to exit",
        bg_color: tuple[float, float, float, float] = (0.05, 0.05, 0.1, 1.0),
    ):
        """ウィンドウを生成する。

        引数:
            width: ウィンドウ幅（ピクセル）。
            height: ウィンドウ高さ（ピクセル）。
            caption: タイトル。
            bg_color: 背景色 RGBA（0.0〜1.0）。
        """
        # 球と軌跡の縁を滑らかにするために MSAA を有効化
        config = Config(double_buffer=True, sample_buffers=1, samples=4)
        try:
            super().__init__(width=width, height=height, caption=caption, config=config)
        except pyglet.window.NoSuchConfigException:
            # MSAA 非対応環境
            super().__init__(width=width, height=height, caption=caption)
        self._bg_color = bg_color
        self._draw_callbacks: list[Callable[[], None]] = []
        self._close_callbacks: list[Callable[[], None]] = []

    def add_draw_callback(self, func: Callable[[], None]) -> None:
        """
        `on_draw` 中に呼び出す描画関数を登録する。

        - 関数は引数を取らず、副作用で描画を行うこと。
        - 登録順に呼び出される。
        """
        self._draw_callbacks.append(func)

    def add_close_callback(self, func: Callable[[], None]) -> None:
        """ウィンドウが閉じられる直前に呼び出す関数を登録する。"""
        self._close_callbacks.append(func)

    def on_draw(self):  # Pyglet 既定のイベント名
        """ウィンドウ描画イベントハンドラ。登録された描画コールバックを呼び出す。"""
        r, g, b, a = self._bg_color
        glClearColor(r, g, b, a)
        self.clear()
        for cb in self._draw_callbacks:
            cb()

    def on_key_release(self, symbol, modifiers):  # noqa: ANN001
        if symbol == key.ESCAPE:
            self.dispatch_event("on_close")

    def on_close(self):
        for cb in self._close_callbacks:
            cb()
        super().on_close()
