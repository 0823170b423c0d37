"""
どこで: `src/kandinsky/core/composition.py`。
何を: 1 フレームの合成順（背景 → ハッチ → リング → グループ → ストローク → 図形 → 装飾）で Scene 全体を描く。
なぜ: 重なり順を 1 箇所に固定し、描画ルーチン側は個々の要素の描き方だけに集中できるようにするため。
"""

from __future__ import annotations

import math

from kandinsky.core.records import Circle, Shape, Triangle
from kandinsky.core.renderer import (
    TAU,
    Viewport,
    draw_group,
    draw_shape,
    draw_stroke,
)
from kandinsky.core.scene import Scene
from kandinsky.core.surface import Surface

BACKGROUND_STOPS = ("#FFF9F2", "#F0F7FF")
HATCH_ALPHA = 0.04
RING_COLOR = "#FFC857"
RING_ALPHA = 0.12
ACCENT_POSITION = (0.85, 0.18)
SIGNATURE_POSITION = (0.06, 0.92)
SIGNATURE_COLOR = "#3A7CA5"
PARALLAX_STRENGTH = 0.08


def hatch_step(width: float, height: float) -> int:
    """斜線ハッチの間隔（20..60）を返す。"""

    return max(20, min(60, int(math.floor((width + height) / 60.0))))


def draw_background_texture(ctx: Surface, viewport: Viewport) -> None:
    """淡い対角グラデーションの地と、ごく薄い斜線ハッチを描く。"""

    w = viewport.width
    h = viewport.height
    grad = ctx.create_linear_gradient(0.0, 0.0, w, h)
    grad.add_color_stop(0.0, BACKGROUND_STOPS[0])
    grad.add_color_stop(1.0, BACKGROUND_STOPS[1])
    ctx.fill_style = grad
    ctx.fill_rect(0.0, 0.0, w, h)

    ctx.save()
    ctx.global_alpha = HATCH_ALPHA
    ctx.stroke_style = "#000"
    ctx.line_width = 1.0
    step = hatch_step(w, h)
    x = -h
    while x < w:
        ctx.begin_path()
        ctx.move_to(x, 0.0)
        ctx.line_to(x + h, h)
        ctx.stroke()
        x += step
    ctx.restore()


def draw_ring(ctx: Surface, t: float, viewport: Viewport) -> None:
    """奥に置く半透明の大きなリングを、ゆっくり揺らしながら描く。"""

    w = viewport.width
    h = viewport.height
    m = min(w, h)
    ctx.save()
    ctx.global_alpha = RING_ALPHA
    ctx.translate(w * 0.5, h * 0.45)
    ctx.rotate(math.sin(t * 0.1) * 0.4)
    ctx.begin_path()
    ctx.arc(0.0, 0.0, m * 0.28, 0.0, TAU)
    ctx.line_width = m * 0.1
    ctx.stroke_style = RING_COLOR
    ctx.stroke()
    ctx.restore()


def parallax_factor(y: float, height: float) -> float:
    """縦位置に応じた視差係数 `1 + (y/h - 0.5) * 0.08` を返す。"""

    return 1.0 + ((y / height) - 0.5) * PARALLAX_STRENGTH


def apply_parallax_drift(s: Shape, t: float, viewport: Viewport) -> None:
    """描画前に、視差係数を掛けた小さな揺れを図形の位置へ足す。

    Notes
    -----
    矩形は揺らさない。三角形は `phase`（生成時 0）を位相にして横方向だけ揺らす。
    """

    par = parallax_factor(s.y, viewport.height)
    if isinstance(s, Circle):
        s.x += math.sin(t * 0.2 + (s.x + s.y) * 0.001) * 0.02 * par
        s.y += math.cos(t * 0.14 + (s.x - s.y) * 0.001) * 0.02 * par
    elif isinstance(s, Triangle):
        s.x += math.sin(t * 0.18 + s.phase) * 0.01 * par


def draw_accent(ctx: Surface, t: float, viewport: Viewport) -> None:
    """右上の小さなアクセント（黒丸に白い点）を描く。"""

    ax, ay = ACCENT_POSITION
    ctx.save()
    ctx.global_alpha = 0.95
    ctx.translate(viewport.width * ax, viewport.height * ay)
    ctx.rotate(math.sin(t * 0.6) * 0.6)
    ctx.begin_path()
    ctx.fill_style = "#000"
    ctx.arc(0.0, 0.0, 22.0, 0.0, TAU)
    ctx.fill()
    ctx.begin_path()
    ctx.fill_style = "#fff"
    ctx.arc(-6.0, -6.0, 6.0, 0.0, TAU)
    ctx.fill()
    ctx.restore()


def draw_signature(ctx: Surface, t: float, viewport: Viewport) -> None:
    """左下にサイン風の抽象的な "K" を描く。"""

    sx, sy = SIGNATURE_POSITION
    ctx.save()
    ctx.translate(viewport.width * sx, viewport.height * sy)
    ctx.rotate(-0.12 + math.sin(t * 0.4) * 0.02)
    ctx.global_alpha = 0.9
    ctx.fill_style = SIGNATURE_COLOR
    ctx.fill_rect(0.0, 0.0, 10.0, 36.0)
    ctx.begin_path()
    ctx.move_to(8.0, 18.0)
    ctx.line_to(34.0, 0.0)
    ctx.line_to(34.0, 6.0)
    ctx.line_to(12.0, 22.0)
    ctx.line_to(34.0, 36.0)
    ctx.line_to(34.0, 42.0)
    ctx.close_path()
    ctx.fill()
    ctx.restore()


def render_frame(ctx: Surface, scene: Scene, t: float, viewport: Viewport) -> None:
    """時刻 t の Scene 全体を描く（レコードはこの中で更新される）。

    Parameters
    ----------
    ctx : Surface
        描画先。
    scene : Scene
        描画対象。`shapes` は y 昇順に並べ替えられる。
    t : float
        累積アニメーション時刻 [s]。
    viewport : Viewport
        描画面の論理サイズ。
    """

    ctx.clear_rect(0.0, 0.0, viewport.width, viewport.height)

    draw_background_texture(ctx, viewport)
    draw_ring(ctx, t, viewport)

    for g in scene.groups:
        draw_group(ctx, g, t, viewport)

    for st in scene.strokes:
        draw_stroke(ctx, st, t, viewport)

    # 画家のアルゴリズム: 上にあるもの（y が小さい）から描き、下のものを手前に重ねる。
    # 位置は毎フレーム変わるため、並べ替えを使い回さない。
    scene.shapes.sort(key=lambda s: s.y)
    for s in scene.shapes:
        apply_parallax_drift(s, t, viewport)
        draw_shape(ctx, s, t, viewport)

    draw_accent(ctx, t, viewport)
    draw_signature(ctx, t, viewport)


__all__ = [
    "apply_parallax_drift",
    "draw_accent",
    "draw_background_texture",
    "draw_ring",
    "draw_signature",
    "hatch_step",
    "parallax_factor",
    "render_frame",
]
