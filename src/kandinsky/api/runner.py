"""
どこで: `src/kandinsky/api/runner.py`。公開 API のランナー実装。
何を: pyglet + ModernGL のウィンドウを作り、アニメーションする抽象構図を表示し続ける。
なぜ: `main.py` を実行するだけで構図をプレビューできる経路を用意するため。
"""

from __future__ import annotations

import pyglet

from kandinsky.interactive.render_settings import RenderSettings
from kandinsky.interactive.runtime.draw_window_system import DrawWindowSystem


def run(
    *,
    fps: float = 60.0,
    fullscreen: bool = False,
    window_size: tuple[int, int] = (1280, 800),
    caption: str = "Kandinsky",
    msaa_samples: int = 4,
) -> None:
    """ウィンドウを生成し、構図のアニメーションをリアルタイム描画する。

    Parameters
    ----------
    fps : float
        フレーム予約の上限頻度。vsync 有効時は表示リフレッシュに同期する。
    fullscreen : bool
        True の場合、画面全体を描画面にする。
    window_size : tuple[int, int]
        ウィンドウ表示時の初期サイズ（論理ピクセル）。
    caption : str
        ウィンドウタイトル。
    msaa_samples : int
        MSAA のサンプル数。0 で無効。

    Returns
    -------
    None
        ウィンドウを閉じると制御を返す。

    Notes
    -----
    ウィンドウをクリックすると一時停止/再開を切り替える。
    """

    # pyglet の Window 作成前にオプションを設定する。
    pyglet.options["vsync"] = True

    settings = RenderSettings(
        fps=fps,
        fullscreen=fullscreen,
        window_size=window_size,
        caption=caption,
        msaa_samples=msaa_samples,
    )

    draw_window = DrawWindowSystem(settings=settings)
    try:
        pyglet.app.run(interval=None)
    finally:
        # 例外でも確実に後始末する（destroy は 2 回目以降 no-op）。
        draw_window.painter.destroy()
