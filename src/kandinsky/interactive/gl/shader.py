# どこで: `src/kandinsky/interactive/gl/shader.py`。
# 何を: 頂点色付き三角形を描く GLSL プログラムを生成する。
# なぜ: シェーダ文字列を renderer 本体から分離し、入出力名（in_vert/in_color/projection）を一箇所で管理するため。

from __future__ import annotations

from typing import Any

VERTEX_SHADER = """
#version 330
uniform mat4 projection;
in vec2 in_vert;
in vec4 in_color;
out vec4 v_color;
void main() {
    gl_Position = projection * vec4(in_vert, 0.0, 1.0);
    v_color = in_color;
}
"""

FRAGMENT_SHADER = """
#version 330
in vec4 v_color;
out vec4 f_color;
void main() {
    f_color = v_color;
}
"""


class Shader:
    @staticmethod
    def create_shader(ctx: Any) -> Any:
        """ModernGL コンテキスト上にプログラムを作って返す。"""
        return ctx.program(vertex_shader=VERTEX_SHADER, fragment_shader=FRAGMENT_SHADER)
