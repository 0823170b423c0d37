"""
どこで: `src/kandinsky/interactive/gl/triangle_mesh.py`。
何を: VBO/VAO の確保・更新・解放を担当し、頂点色付き三角形リストを描画可能な形で保持する。
なぜ: GPU 転送の詳細を Renderer から切り離し、再確保や VAO の張り直しを一元化するため。
"""

from __future__ import annotations

from typing import Any

import numpy as np

from kandinsky.interactive.mesh_surface import VERTEX_STRIDE


class TriangleMesh:
    """
    GPU に `[x, y, r, g, b, a]` の頂点列を送り込む作業を管理
    """

    VERTEX_FORMAT = "2f 4f"

    def __init__(
        self,
        ctx: Any,
        program: Any,
        # 初期GPUメモリ確保量（既定: 1MB）。必要に応じて自動拡張。
        initial_reserve: int = 1024 * 1024,
    ):
        self.ctx = ctx
        self.program = program
        self.initial_reserve = int(initial_reserve)

        self.vbo = ctx.buffer(reserve=self.initial_reserve, dynamic=True)
        self.vao = self._build_vao()
        self.vertex_count: int = 0

    def _build_vao(self) -> Any:
        return self.ctx.vertex_array(
            self.program,
            [(self.vbo, self.VERTEX_FORMAT, "in_vert", "in_color")],
        )

    def _ensure_capacity(self, vbo_size: int) -> None:
        """データが大きくなったらGPUのバッファを再確保"""
        if vbo_size <= self.vbo.size:
            return
        self.vbo.release()
        self.vbo = self.ctx.buffer(reserve=max(vbo_size, self.initial_reserve), dynamic=True)
        # VAO は VBO が差し替わるときだけ張り直す。
        self.vao.release()
        self.vao = self._build_vao()

    def upload(self, vertices: np.ndarray) -> None:
        """実際にデータをGPUへ送り込む"""
        vertices_f32 = np.ascontiguousarray(vertices, dtype=np.float32)
        if vertices_f32.ndim != 2 or vertices_f32.shape[1] != VERTEX_STRIDE:
            raise ValueError(f"vertices は shape (N, {VERTEX_STRIDE}) である必要がある")
        self._ensure_capacity(vertices_f32.nbytes)

        self.vbo.orphan()
        self.vbo.write(vertices_f32)
        self.vertex_count = int(vertices_f32.shape[0])

    def release(self) -> None:
        """GPUのメモリを解放する（終了時に使う）"""
        self.vbo.release()
        self.vao.release()
