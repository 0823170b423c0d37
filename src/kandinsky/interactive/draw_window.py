# どこで: `src/kandinsky/interactive/draw_window.py`。
# 何を: 構図を表示する pyglet ウィンドウの生成を行う。
# なぜ: interactive 依存をこの層に閉じ込め、core をヘッドレスに保つため。

from __future__ import annotations

import pyglet
from pyglet.gl import Config
from pyglet.window import Window

from kandinsky.interactive.render_settings import RenderSettings


def create_draw_window(settings: RenderSettings) -> Window:
    """設定に基づき描画ウィンドウを生成する。

    Notes
    -----
    ウィンドウ（＝描画面）が作れない環境では例外がそのまま伝播する。描画面なしでは実行できないため。
    """
    samples = int(settings.msaa_samples)
    # 図形の縁を滑らかにするために MSAA を有効化
    if samples > 0:
        config = Config(double_buffer=True, sample_buffers=1, samples=samples)  # type: ignore[abstract]
    else:
        config = Config(double_buffer=True)  # type: ignore[abstract]
    if settings.fullscreen:
        return pyglet.window.Window(  # type: ignore[abstract]
            fullscreen=True,
            caption=settings.caption,
            config=config,
        )
    width, height = settings.window_size
    window = pyglet.window.Window(  # type: ignore[abstract]
        width=int(width),
        height=int(height),
        resizable=True,
        caption=settings.caption,
        config=config,
    )
    min_w, min_h = settings.min_size
    window.set_minimum_size(int(min_w), int(min_h))
    return window
