"""
どこで: `src/kandinsky/core/renderer.py`。
何を: 図形/ストローク/グループ種別ごとの描画ルーチンを提供する。
なぜ: 「運動の更新 → ローカル変換 → 塗り/線 → 変換の復元」を種別ごとに 1 関数へ閉じ込め、兄弟要素へ状態を漏らさないため。

各ルーチンは 1 フレームに 1 回 `(surface, record, t, viewport)` で呼ばれ、レコードの運動フィールドを直接更新する。
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from kandinsky.core.color import color_to_translucent
from kandinsky.core.records import (
    Circle,
    Group,
    GroupChild,
    GroupCircle,
    GroupRect,
    GroupTriangle,
    Rect,
    Shape,
    Stroke,
    Triangle,
)
from kandinsky.core.surface import Surface

TAU = 2.0 * math.pi

CIRCLE_PULSE = 0.06
CIRCLE_PULSE_RATE = 0.9
CIRCLE_GLOW_ALPHA = 0.05
CIRCLE_OUTLINE = color_to_translucent("#000000", 0.12)
POLYGON_FADE_ALPHA = 0.6
GROUP_CHILD_PULSE = 0.08
STROKE_DRIFT_AMPLITUDE = 6.0
STROKE_CONTROL_OFFSET = 10.0
STROKE_ALPHA = 0.9


@dataclass(frozen=True, slots=True)
class Viewport:
    """描画面の論理サイズ。"""

    width: float
    height: float


def pulse_radius(r: float, phase: float, t: float) -> float:
    """時刻 t の円の脈動半径 `r * (1 + 0.06 * sin(0.9 t + phase))` を返す。"""

    return r * (1.0 + CIRCLE_PULSE * math.sin(t * CIRCLE_PULSE_RATE + phase))


def wrap_circle(s: Circle, viewport: Viewport) -> None:
    """半径分を超えて画面外へ出た円を反対側の端へ移す（速度は保つ）。"""

    w = viewport.width
    h = viewport.height
    if s.x < -s.r:
        s.x = w + s.r
    if s.x > w + s.r:
        s.x = -s.r
    if s.y < -s.r:
        s.y = h + s.r
    if s.y > h + s.r:
        s.y = -s.r


def draw_circle(ctx: Surface, s: Circle, t: float, viewport: Viewport) -> None:
    """円を 1 フレーム分進めて描く。

    外側は加算合成の放射グラデーション（発光）、内側は単色の円で描き、
    `stroke_width > 0` なら内側の円に薄い黒の縁を付ける。
    """

    wobble = math.sin(s.phase + t * s.wobble) * 0.08
    s.x += s.vx
    s.y += s.vy
    wrap_circle(s, viewport)

    rad = pulse_radius(s.r, s.phase, t)
    ctx.save()
    ctx.translate(s.x, s.y)

    ctx.global_composite_operation = "lighter"
    grad = ctx.create_radial_gradient(0.0, 0.0, rad * 0.1, 0.0, 0.0, rad * 1.1)
    grad.add_color_stop(0.0, s.fill)
    grad.add_color_stop(1.0, color_to_translucent(s.fill, CIRCLE_GLOW_ALPHA))
    ctx.fill_style = grad
    ctx.begin_path()
    ctx.arc(0.0, 0.0, rad, 0.0, TAU)
    ctx.fill()
    ctx.global_composite_operation = "source-over"

    ctx.begin_path()
    ctx.fill_style = s.fill
    ctx.arc(0.0, 0.0, rad * 0.6 * (1.0 + wobble * 0.6), 0.0, TAU)
    ctx.fill()

    if s.stroke_width > 0:
        ctx.line_width = s.stroke_width
        ctx.stroke_style = CIRCLE_OUTLINE
        ctx.stroke()
    ctx.restore()


def _fill_fading(ctx: Surface, fill: str, x0: float, y0: float, x1: float, y1: float) -> None:
    # 単色 → 同色 60% の対角グラデーションで現在のパスを塗る。
    grad = ctx.create_linear_gradient(x0, y0, x1, y1)
    grad.add_color_stop(0.0, fill)
    grad.add_color_stop(1.0, color_to_translucent(fill, POLYGON_FADE_ALPHA))
    ctx.fill_style = grad
    ctx.fill()


def draw_triangle(ctx: Surface, s: Triangle, t: float, viewport: Viewport) -> None:
    """三角形を自転させて描く。`skew` で底辺を横にずらす。"""

    ctx.save()
    ctx.translate(s.x, s.y)
    s.rotation += s.rotation_speed
    ctx.rotate(s.rotation)

    size = s.size
    shift = s.skew * size
    ctx.begin_path()
    ctx.move_to(0.0, -size * 0.6)
    ctx.line_to(size * 0.6 + shift, size * 0.4)
    ctx.line_to(-size * 0.6 + shift, size * 0.4)
    ctx.close_path()
    _fill_fading(ctx, s.fill, -size, -size, size, size)

    if s.stroke:
        ctx.line_width = s.stroke_width
        ctx.stroke_style = s.stroke
        ctx.stroke()
    ctx.restore()


def draw_rect(ctx: Surface, s: Rect, t: float, viewport: Viewport) -> None:
    """矩形を中心まわりに自転させて描く。"""

    ctx.save()
    ctx.translate(s.x, s.y)
    s.rotation += s.rotation_speed
    ctx.rotate(s.rotation)

    hw = s.w / 2.0
    hh = s.h / 2.0
    ctx.begin_path()
    ctx.rect(-hw, -hh, s.w, s.h)
    _fill_fading(ctx, s.fill, -hw, -hh, hw, hh)

    if s.stroke:
        ctx.line_width = s.stroke_width
        ctx.stroke_style = s.stroke
        ctx.stroke()
    ctx.restore()


def stroke_offset(st: Stroke, t: float) -> tuple[float, float]:
    """時刻 t のストローク全体のずれ (dx, dy) を返す。"""

    a = t * st.drift + st.phase
    return math.sin(a) * STROKE_DRIFT_AMPLITUDE, math.cos(a) * STROKE_DRIFT_AMPLITUDE


def draw_stroke(ctx: Surface, st: Stroke, t: float, viewport: Viewport) -> None:
    """ストロークを二次曲線でつないで描く。頂点は動かさず全体オフセットだけ足す。"""

    ctx.save()
    ctx.line_join = "round"
    ctx.line_cap = "round"
    ctx.begin_path()

    dx, dy = stroke_offset(st, t)
    first = st.points[0]
    ctx.move_to(first.x + dx, first.y + dy)
    for p in st.points[1:]:
        ctx.quadratic_curve_to(
            p.x - STROKE_CONTROL_OFFSET + dx,
            p.y - STROKE_CONTROL_OFFSET + dy,
            p.x + dx,
            p.y + dy,
        )
    ctx.stroke_style = st.color
    ctx.line_width = st.width
    ctx.global_alpha = STROKE_ALPHA
    ctx.stroke()
    ctx.restore()


def _draw_group_child(ctx: Surface, c: GroupChild, t: float) -> None:
    if isinstance(c, GroupCircle):
        r = c.r * (1.0 + GROUP_CHILD_PULSE * math.sin(t * CIRCLE_PULSE_RATE + (c.x + c.y) * 0.01))
        ctx.begin_path()
        ctx.fill_style = c.fill
        ctx.arc(0.0, 0.0, r, 0.0, TAU)
        ctx.fill()
        if c.stroke:
            ctx.line_width = c.stroke_width
            ctx.stroke_style = c.stroke
            ctx.stroke()
        return

    if isinstance(c, GroupRect):
        ctx.fill_style = c.fill
        ctx.fill_rect(-c.w / 2.0, -c.h / 2.0, c.w, c.h)
        if c.stroke:
            ctx.line_width = c.stroke_width
            ctx.stroke_style = c.stroke
            ctx.stroke_rect(-c.w / 2.0, -c.h / 2.0, c.w, c.h)
        return

    if isinstance(c, GroupTriangle):
        ctx.begin_path()
        ctx.move_to(0.0, -c.r)
        ctx.line_to(c.r, c.r)
        ctx.line_to(-c.r, c.r)
        ctx.close_path()
        ctx.fill_style = c.fill
        ctx.fill()
        if c.stroke:
            ctx.line_width = c.stroke_width
            ctx.stroke_style = c.stroke
            ctx.stroke()
        return

    raise TypeError(f"未対応のグループ子要素: {type(c)!r}")


def draw_group(ctx: Surface, g: Group, t: float, viewport: Viewport) -> None:
    """グループを回転/拡縮させ、子を平行移動のみの入れ子変換で描く。"""

    g.rotation += g.speed
    ctx.save()
    ctx.translate(g.x, g.y)
    ctx.rotate(g.rotation + math.sin(t * 0.2) * 0.03)
    ctx.scale(g.scale, g.scale)
    for child in g.children:
        ctx.save()
        ctx.translate(child.x, child.y)
        _draw_group_child(ctx, child, t)
        ctx.restore()
    ctx.restore()


def draw_shape(ctx: Surface, s: Shape, t: float, viewport: Viewport) -> None:
    """Shape の種類に応じた描画ルーチンへ振り分ける。"""

    if isinstance(s, Circle):
        draw_circle(ctx, s, t, viewport)
    elif isinstance(s, Triangle):
        draw_triangle(ctx, s, t, viewport)
    elif isinstance(s, Rect):
        draw_rect(ctx, s, t, viewport)
    else:
        raise TypeError(f"未対応の Shape: {type(s)!r}")


__all__ = [
    "Viewport",
    "draw_circle",
    "draw_group",
    "draw_rect",
    "draw_shape",
    "draw_stroke",
    "draw_triangle",
    "pulse_radius",
    "stroke_offset",
    "wrap_circle",
]
