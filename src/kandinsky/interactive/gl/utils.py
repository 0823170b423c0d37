from __future__ import annotations

# どこで: `src/kandinsky/interactive/gl/utils.py`。
# 何を: 描画で使う小さなユーティリティ（投影行列生成）を提供する。
# なぜ: renderer で共有し、論理ピクセル座標系（y 下向き）の定義を一箇所に集約するため。

import numpy as np


def build_projection(canvas_width: float, canvas_height: float) -> "np.ndarray":
    """論理ピクセルを基準とする正射影行列（ModernGL 用の転置済み）を返す。

    原点は左上、y は下向き。フレームバッファの実ピクセル数（device pixel ratio）には依存しない。
    """
    if canvas_width <= 0 or canvas_height <= 0:
        raise ValueError("canvas_width/canvas_height は正の値である必要がある")
    proj = np.array(
        [
            [2 / canvas_width, 0, 0, -1],
            [0, -2 / canvas_height, 0, 1],
            [0, 0, -1, 0],
            [0, 0, 0, 1],
        ],
        dtype="f4",
    ).T
    return proj
