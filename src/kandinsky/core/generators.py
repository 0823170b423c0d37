"""
どこで: `src/kandinsky/core/generators.py`。
何を: 描画面サイズからランダムな初期値を持つ図形/ストローク/グループのレコードを生成する。
なぜ: 生成規則（値域・余白）をレコード定義や描画ルーチンから切り離し、単体で検証できるようにするため。
"""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Callable
from typing import Any, TypeVar

import numpy as np

from kandinsky.core.palette import PALETTE
from kandinsky.core.records import (
    Circle,
    Group,
    GroupChild,
    GroupCircle,
    GroupRect,
    GroupTriangle,
    Point,
    Rect,
    Stroke,
    Triangle,
)

TAU = 2.0 * math.pi

Sampler = Callable[[float, float], float]
"""`sampler(a, b)` が [a, b) の一様乱数を返す関数。"""

# 出現位置の余白（幅/高さに対する比率）。端ちょうどに生まれないようにする。
CIRCLE_INSET = (0.10, 0.12)
TRIANGLE_INSET = (0.12, 0.12)
RECT_INSET = (0.05, 0.05)
GROUP_INSET = (0.2, 0.2)
STROKE_MARGIN = 100.0

WAVY_SEGMENTS = (3, 8)
WAVY_JITTER = 40.0

_R = TypeVar("_R")


def uniform_sampler(rng: np.random.Generator | None = None) -> Sampler:
    """numpy の Generator を包んだ一様サンプラを返す。

    Notes
    -----
    `a > b` でも `a + (b - a) * u` として値を返す（`(b, a]` の一様分布になる）。
    """

    _rng = rng if rng is not None else np.random.default_rng()

    def sample(a: float, b: float) -> float:
        return float(a) + (float(b) - float(a)) * float(_rng.random())

    return sample


def pick_color(sampler: Sampler, palette: tuple[str, ...] = PALETTE) -> str:
    """パレットから 1 色を一様に選ぶ。"""

    index = int(math.floor(sampler(0.0, float(len(palette)))))
    # sampler が上端を返した場合に備えて index を収める。
    return palette[min(max(index, 0), len(palette) - 1)]


def _check_dimensions(width: float, height: float) -> None:
    if float(width) <= 0 or float(height) <= 0:
        raise ValueError(f"width/height は正の値である必要がある: {(width, height)!r}")


def _apply_overrides(record: _R, overrides: dict[str, Any]) -> _R:
    if not overrides:
        return record
    return dataclasses.replace(record, **overrides)  # type: ignore[type-var]


def make_circle(
    width: float,
    height: float,
    *,
    sampler: Sampler,
    palette: tuple[str, ...] = PALETTE,
    **overrides: Any,
) -> Circle:
    """ゆっくり漂う円を生成する。

    Raises
    ------
    ValueError
        width/height が正でない場合。
    TypeError
        overrides に Circle に無いフィールド名が含まれる場合。
    """

    _check_dimensions(width, height)
    ix, iy = CIRCLE_INSET
    circle = Circle(
        x=sampler(ix * width, (1.0 - ix) * width),
        y=sampler(iy * height, (1.0 - iy) * height),
        r=sampler(18.0, 120.0),
        fill=pick_color(sampler, palette),
        stroke_width=sampler(0.0, 6.0),
        vx=sampler(-6.0, 6.0) / 200.0,
        vy=sampler(-6.0, 6.0) / 200.0,
        wobble=sampler(0.2, 1.2),
        phase=sampler(0.0, TAU),
    )
    return _apply_overrides(circle, overrides)


def make_triangle(
    width: float,
    height: float,
    *,
    sampler: Sampler,
    palette: tuple[str, ...] = PALETTE,
    **overrides: Any,
) -> Triangle:
    """自転する三角形を生成する。"""

    _check_dimensions(width, height)
    ix, iy = TRIANGLE_INSET
    triangle = Triangle(
        x=sampler(ix * width, (1.0 - ix) * width),
        y=sampler(iy * height, (1.0 - iy) * height),
        size=sampler(40.0, 220.0),
        rotation=sampler(0.0, TAU),
        rotation_speed=sampler(-0.01, 0.01),
        fill=pick_color(sampler, palette),
        stroke="#000000",
        stroke_width=sampler(1.0, 4.0),
        skew=sampler(-0.3, 0.3),
    )
    return _apply_overrides(triangle, overrides)


def make_rect(
    width: float,
    height: float,
    *,
    sampler: Sampler,
    palette: tuple[str, ...] = PALETTE,
    **overrides: Any,
) -> Rect:
    """自転する矩形を生成する。"""

    _check_dimensions(width, height)
    ix, iy = RECT_INSET
    rect = Rect(
        x=sampler(ix * width, (1.0 - ix) * width),
        y=sampler(iy * height, (1.0 - iy) * height),
        w=sampler(30.0, 240.0),
        h=sampler(20.0, 160.0),
        rotation=sampler(0.0, TAU),
        rotation_speed=sampler(-0.008, 0.008),
        fill=pick_color(sampler, palette),
        stroke="#000000",
        stroke_width=sampler(1.0, 4.0),
    )
    return _apply_overrides(rect, overrides)


def build_wavy_line(
    cx: float,
    cy: float,
    scale: float,
    *,
    width: float,
    height: float,
    sampler: Sampler,
) -> tuple[Point, ...]:
    """中心 (cx, cy) を通る手描き風の折れ線の頂点列を返す。

    Parameters
    ----------
    cx, cy : float
        線分の中点。
    scale : float
        線の長さに掛ける倍率。
    width, height : float
        描画面サイズ。線の長さの上限 `0.8 * min(width, height)` に使う。
    sampler : Sampler
        一様乱数源。

    Returns
    -------
    tuple[Point, ...]
        `segs + 1` 個（segs は 3..8）の頂点。各頂点は ±40 の範囲で揺らす。
    """

    lo, hi = WAVY_SEGMENTS
    segs = min(int(sampler(float(lo), float(hi + 1))), hi)
    length = sampler(120.0, min(width, height) * 0.8) * scale
    angle = sampler(0.0, TAU)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)

    points: list[Point] = []
    for i in range(segs + 1):
        t = i / segs
        points.append(
            Point(
                x=cx + cos_a * (t - 0.5) * length + sampler(-WAVY_JITTER, WAVY_JITTER),
                y=cy + sin_a * (t - 0.5) * length + sampler(-WAVY_JITTER, WAVY_JITTER),
            )
        )
    return tuple(points)


def make_stroke(
    width: float,
    height: float,
    *,
    sampler: Sampler,
    palette: tuple[str, ...] = PALETTE,
    **overrides: Any,
) -> Stroke:
    """ゆっくり揺れる曲線ストロークを生成する。"""

    _check_dimensions(width, height)
    cx = sampler(STROKE_MARGIN, width - STROKE_MARGIN)
    cy = sampler(STROKE_MARGIN, height - STROKE_MARGIN)
    scale = sampler(0.3, 1.5)
    stroke = Stroke(
        points=build_wavy_line(cx, cy, scale, width=width, height=height, sampler=sampler),
        color=pick_color(sampler, palette),
        width=sampler(1.2, 6.0),
        drift=sampler(0.001, 0.006),
        phase=sampler(0.0, TAU),
    )
    return _apply_overrides(stroke, overrides)


def _make_group_child(
    ang: float, scale: float, *, sampler: Sampler, palette: tuple[str, ...]
) -> GroupChild:
    # 種類は circle が 1/2、rect/triangle が 1/4 ずつ。
    if sampler(0.0, 1.0) > 0.5:
        kind = "circle"
    elif sampler(0.0, 1.0) > 0.5:
        kind = "rect"
    else:
        kind = "triangle"

    dist = sampler(30.0, 140.0) * scale
    x = math.cos(ang) * dist
    y = math.sin(ang) * dist
    r = sampler(8.0, 48.0) * scale
    w = sampler(18.0, 80.0) * scale
    h = sampler(12.0, 60.0) * scale
    fill = pick_color(sampler, palette)
    stroke = "#000" if sampler(0.0, 1.0) > 0.6 else None
    stroke_width = sampler(0.5, 3.0)

    if kind == "circle":
        return GroupCircle(x=x, y=y, r=r, fill=fill, stroke=stroke, stroke_width=stroke_width)
    if kind == "rect":
        return GroupRect(x=x, y=y, w=w, h=h, fill=fill, stroke=stroke, stroke_width=stroke_width)
    return GroupTriangle(x=x, y=y, r=r, fill=fill, stroke=stroke, stroke_width=stroke_width)


def make_group(
    width: float,
    height: float,
    *,
    count: float = 6,
    cx: float | None = None,
    cy: float | None = None,
    sampler: Sampler,
    palette: tuple[str, ...] = PALETTE,
) -> Group:
    """中心まわりに子プリミティブを放射状に並べたグループを生成する。

    Parameters
    ----------
    count : float
        子の数。小数を許し、`ceil(count)` 個を生成する。角度の分割には小数のまま使う。
    cx, cy : float | None
        グループ中心。None の場合は描画面の 20%..80% からランダムに選ぶ。
    """

    _check_dimensions(width, height)
    n = float(count)
    if n <= 0:
        raise ValueError(f"count は正の値である必要がある: {count!r}")
    ix, iy = GROUP_INSET
    center_x = cx if cx is not None else sampler(width * ix, width * (1.0 - ix))
    center_y = cy if cy is not None else sampler(height * iy, height * (1.0 - iy))
    rotation = sampler(0.0, TAU)
    speed = sampler(-0.003, 0.003)
    scale = sampler(0.6, 1.4)

    children: list[GroupChild] = []
    for i in range(int(math.ceil(n))):
        ang = (i / n) * TAU + sampler(-0.2, 0.2)
        children.append(_make_group_child(ang, scale, sampler=sampler, palette=palette))

    return Group(
        x=center_x,
        y=center_y,
        rotation=rotation,
        speed=speed,
        scale=scale,
        children=tuple(children),
    )


__all__ = [
    "CIRCLE_INSET",
    "GROUP_INSET",
    "RECT_INSET",
    "TAU",
    "TRIANGLE_INSET",
    "Sampler",
    "build_wavy_line",
    "make_circle",
    "make_group",
    "make_rect",
    "make_stroke",
    "make_triangle",
    "pick_color",
    "uniform_sampler",
]
