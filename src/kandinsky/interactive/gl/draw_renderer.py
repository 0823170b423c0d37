# どこで: `src/kandinsky/interactive/gl/draw_renderer.py`。
# 何を: MeshSurface が生成した三角形バッチを ModernGL で描くレンダラーをカプセル化する。
# なぜ: コンテキスト生成・シェーダ設定・合成モード切替をウィンドウ管理から分離するため。

from __future__ import annotations

from collections.abc import Sequence

import moderngl
from pyglet.window import Window

from kandinsky.core.surface import CompositeOperation
from kandinsky.interactive.gl import utils as render_utils
from kandinsky.interactive.gl.shader import Shader
from kandinsky.interactive.gl.triangle_mesh import TriangleMesh
from kandinsky.interactive.mesh_surface import DrawBatch

# 非乗算アルファの頂点色を前提にした合成式（rgb, alpha を別々に指定する）。
_BLEND_FUNCS: dict[CompositeOperation, tuple[int, int, int, int]] = {
    "source-over": (moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA, moderngl.ONE, moderngl.ONE_MINUS_SRC_ALPHA),
    "lighter": (moderngl.SRC_ALPHA, moderngl.ONE, moderngl.ONE, moderngl.ONE),
    "copy": (moderngl.ONE, moderngl.ZERO, moderngl.ONE, moderngl.ZERO),
}


class DrawRenderer:
    """三角形バッチを順に描くだけのシンプルなレンダラー。"""

    def __init__(self, window: Window) -> None:
        window.switch_to()
        self.ctx = moderngl.create_context(require=330)
        self.program = Shader.create_shader(self.ctx)
        # 毎フレーム内容が変わるため、1 つを使い回して orphan で更新する。
        self._mesh = TriangleMesh(self.ctx, self.program)
        self._projection_size: tuple[float, float] | None = None
        self.ctx.enable(moderngl.BLEND)

    def viewport(self, width: int, height: int) -> None:
        """ビューポートをフレームバッファの実ピクセルに合わせて更新する。"""
        self.ctx.viewport = (0, 0, int(width), int(height))

    def set_logical_size(self, width: float, height: float) -> None:
        """投影行列を論理サイズに合わせる（変化したときだけ書き込む）。"""
        size = (float(width), float(height))
        if size == self._projection_size:
            return
        projection = render_utils.build_projection(*size)
        self.program["projection"].write(projection.tobytes())
        self._projection_size = size

    def clear(self, color: tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0)) -> None:
        self.ctx.clear(*color)

    def render(self, batches: Sequence[DrawBatch]) -> int:
        """バッチを描画順に描き、描いた頂点数を返す。"""
        total = 0
        for batch in batches:
            if batch.vertex_count == 0:
                continue
            self.ctx.blend_func = _BLEND_FUNCS[batch.blend]
            self._mesh.upload(batch.vertices)
            self._mesh.vao.render(mode=moderngl.TRIANGLES, vertices=self._mesh.vertex_count)
            total += batch.vertex_count
        return total

    def release(self) -> None:
        """GPU リソースを解放する。"""
        self._mesh.release()
        self.program.release()
        self.ctx.release()
