# どこで: `src/kandinsky/interactive/runtime/draw_window_system.py`。
# 何を: ウィンドウ・GPU レンダラー・Painter を束ね、リサイズ/クリック/クローズを Painter の操作へ配線する。
# なぜ: `src/kandinsky/api/runner.py` の `run()` を「配線」に寄せ、表示側の責務を独立させるため。

from __future__ import annotations

import logging

import pyglet

from kandinsky.core.generators import Sampler
from kandinsky.interactive.draw_window import create_draw_window
from kandinsky.interactive.gl.draw_renderer import DrawRenderer
from kandinsky.interactive.mesh_surface import DrawBatch, MeshSurface
from kandinsky.interactive.render_settings import RenderSettings
from kandinsky.interactive.runtime.painter import Painter
from kandinsky.interactive.runtime.perf import PerfCollector
from kandinsky.interactive.runtime.pyglet_frame_source import PygletFrameSource

_logger = logging.getLogger(__name__)


class DrawWindowSystem:
    """構図を表示するメインウィンドウのサブシステム。"""

    def __init__(self, *, settings: RenderSettings, sampler: Sampler | None = None) -> None:
        """window/renderer/Painter を初期化する。Painter は生成と同時にループを開始する。"""

        self._settings = settings
        self._closed = False

        # 描画用の pyglet window を作成し、その window の OpenGL コンテキストに紐づく renderer を作る。
        self.window = create_draw_window(settings)
        self._renderer = DrawRenderer(self.window)
        self._surface = MeshSurface()
        self._perf = PerfCollector.from_env()
        # 一時停止中や expose 時の再描画用に、最後に描いたフレームを保持する。
        self._last_batches: list[DrawBatch] = []

        self._source = PygletFrameSource(fps=settings.fps, after_frame=self.present)
        width, height = settings.logical_size(self.window.width, self.window.height)
        self.painter = Painter(
            self._surface,
            (width, height),
            source=self._source,
            sampler=sampler,
            on_destroy=self.close,
        )

        self.window.push_handlers(
            on_draw=self.draw_frame,
            on_resize=self._on_resize,
            on_mouse_press=self._on_mouse_press,
            on_close=self._on_close,
        )

    @property
    def closed(self) -> bool:
        return self._closed

    def _on_resize(self, width: int, height: int) -> None:
        self.painter.resize(*self._settings.logical_size(width, height))

    def _on_mouse_press(self, _x: int, _y: int, _button: int, _modifiers: int) -> None:
        self.painter.toggle()

    def _on_close(self) -> bool:
        # ウィンドウの破棄は destroy → close() が行う。
        self.painter.destroy()
        return pyglet.event.EVENT_HANDLED

    def _framebuffer_size(self) -> tuple[int, int]:
        getter = getattr(self.window, "get_framebuffer_size", None)
        if callable(getter):
            w, h = getter()
            return int(w), int(h)
        return int(self.window.width), int(self.window.height)

    def present(self) -> None:
        """Painter が描いたフレームを三角形化して画面へ出す。

        一時停止中は新しい命令が無いため何もしない（直前のフレームが残る）。
        """

        if self._closed:
            return
        perf = self._perf
        with perf.frame():
            with perf.section("tessellate"):
                batches = self._surface.flush()
            if not batches:
                return
            self._last_batches = batches
            # Window.draw が switch_to → on_draw → flip をまとめて行う。
            with perf.section("draw"):
                self.window.draw(0.0)

    def draw_frame(self) -> None:
        """保持しているフレームを back buffer へ描く（`flip()` は呼ばない）。"""

        if self._closed:
            return
        fb_w, fb_h = self._framebuffer_size()
        self._renderer.viewport(fb_w, fb_h)
        # 投影は論理サイズ基準。device pixel ratio の差はビューポートが吸収する。
        viewport = self.painter.viewport
        self._renderer.set_logical_size(viewport.width, viewport.height)
        self._renderer.clear()
        self._renderer.render(self._last_batches)

    def close(self) -> None:
        """GPU / window 資源を解放し、イベントループを終える。"""

        if self._closed:
            return
        self._closed = True
        self._last_batches = []
        try:
            self.window.remove_handlers(
                on_draw=self.draw_frame,
                on_resize=self._on_resize,
                on_mouse_press=self._on_mouse_press,
                on_close=self._on_close,
            )
        except Exception:
            _logger.exception("Failed to detach window handlers")
        try:
            # renderer が保持している GPU リソースを破棄してから window を閉じる。
            self._renderer.release()
        except Exception:
            _logger.exception("Failed to release GPU resources")
        finally:
            self.window.close()
            pyglet.app.exit()
