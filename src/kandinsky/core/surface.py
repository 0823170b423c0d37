"""
どこで: `src/kandinsky/core/surface.py`。
何を: 描画ルーチンが命令を発行する描画面（2D コンテキスト風）の契約と、グラデーション/状態スタックの共通実装を定義する。
なぜ: 描画ルーチンを特定のバックエンド（GPU/記録用）から独立させ、ヘッドレスでも同じ命令列を検証できるようにするため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Literal, Protocol, TypeAlias

import numpy as np

from kandinsky.core.color import Color, Rgba, parse_color

CompositeOperation: TypeAlias = Literal["source-over", "lighter", "copy"]
LineJoin: TypeAlias = Literal["miter", "round", "bevel"]
LineCap: TypeAlias = Literal["butt", "round", "square"]

# miter 継ぎ目の長さの上限（線幅に対する比）。超える角はこの長さで切り落とす。
MITER_LIMIT = 10.0


@dataclass(frozen=True, slots=True)
class ColorStop:
    offset: float
    color: Rgba


@dataclass(slots=True)
class LinearGradient:
    """(x0, y0) → (x1, y1) の線形グラデーション（ユーザー座標）。"""

    x0: float
    y0: float
    x1: float
    y1: float
    stops: list[ColorStop] = field(default_factory=list)

    def add_color_stop(self, offset: float, color: Color) -> None:
        _add_stop(self.stops, offset, color)


@dataclass(slots=True)
class RadialGradient:
    """半径 r0 → r1 の放射グラデーション（ユーザー座標）。"""

    x0: float
    y0: float
    r0: float
    x1: float
    y1: float
    r1: float
    stops: list[ColorStop] = field(default_factory=list)

    def add_color_stop(self, offset: float, color: Color) -> None:
        _add_stop(self.stops, offset, color)


Gradient: TypeAlias = LinearGradient | RadialGradient
Paint: TypeAlias = Color | Gradient


def _add_stop(stops: list[ColorStop], offset: float, color: Color) -> None:
    o = float(offset)
    if not 0.0 <= o <= 1.0:
        raise ValueError(f"color stop の offset は 0..1 である必要がある: {offset!r}")
    stops.append(ColorStop(offset=o, color=parse_color(color)))
    # 同一 offset は追加順を保つ（安定ソート）。
    stops.sort(key=lambda s: s.offset)


class Surface(Protocol):
    """描画ルーチンが使う描画面の最小契約。

    Notes
    -----
    - 変換は save/restore でスタック管理する。パスの座標は発行時点の変換で解釈される。
    - 角度はラジアン、座標は論理ピクセル（y 下向き）。
    """

    fill_style: Paint
    stroke_style: Paint
    line_width: float
    global_alpha: float
    global_composite_operation: CompositeOperation
    line_join: LineJoin
    line_cap: LineCap

    def save(self) -> None: ...

    def restore(self) -> None: ...

    def translate(self, x: float, y: float) -> None: ...

    def rotate(self, angle: float) -> None: ...

    def scale(self, sx: float, sy: float) -> None: ...

    def begin_path(self) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None: ...

    def arc(self, x: float, y: float, radius: float, start: float, end: float) -> None: ...

    def rect(self, x: float, y: float, w: float, h: float) -> None: ...

    def close_path(self) -> None: ...

    def fill(self) -> None: ...

    def stroke(self) -> None: ...

    def fill_rect(self, x: float, y: float, w: float, h: float) -> None: ...

    def stroke_rect(self, x: float, y: float, w: float, h: float) -> None: ...

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None: ...

    def create_linear_gradient(
        self, x0: float, y0: float, x1: float, y1: float
    ) -> LinearGradient: ...

    def create_radial_gradient(
        self, x0: float, y0: float, r0: float, x1: float, y1: float, r1: float
    ) -> RadialGradient: ...


@dataclass(slots=True)
class SurfaceState:
    """save/restore の対象になる描画状態。"""

    transform: np.ndarray = field(default_factory=lambda: np.eye(3, dtype=np.float64))
    fill_style: Paint = "#000000"
    stroke_style: Paint = "#000000"
    line_width: float = 1.0
    global_alpha: float = 1.0
    global_composite_operation: CompositeOperation = "source-over"
    line_join: LineJoin = "miter"
    line_cap: LineCap = "butt"

    def copy(self) -> SurfaceState:
        return replace(self, transform=self.transform.copy())


class StatefulSurface:
    """状態スタックとアフィン変換を持つ描画面の共通基底。

    パス構築と塗り/線の実体はサブクラスが実装する。
    """

    def __init__(self) -> None:
        self._state = SurfaceState()
        self._stack: list[SurfaceState] = []

    # --- 状態（属性） ---
    @property
    def fill_style(self) -> Paint:
        return self._state.fill_style

    @fill_style.setter
    def fill_style(self, value: Paint) -> None:
        self._state.fill_style = value

    @property
    def stroke_style(self) -> Paint:
        return self._state.stroke_style

    @stroke_style.setter
    def stroke_style(self, value: Paint) -> None:
        self._state.stroke_style = value

    @property
    def line_width(self) -> float:
        return self._state.line_width

    @line_width.setter
    def line_width(self, value: float) -> None:
        self._state.line_width = float(value)

    @property
    def global_alpha(self) -> float:
        return self._state.global_alpha

    @global_alpha.setter
    def global_alpha(self, value: float) -> None:
        self._state.global_alpha = min(max(float(value), 0.0), 1.0)

    @property
    def global_composite_operation(self) -> CompositeOperation:
        return self._state.global_composite_operation

    @global_composite_operation.setter
    def global_composite_operation(self, value: CompositeOperation) -> None:
        self._state.global_composite_operation = value

    @property
    def line_join(self) -> LineJoin:
        return self._state.line_join

    @line_join.setter
    def line_join(self, value: LineJoin) -> None:
        self._state.line_join = value

    @property
    def line_cap(self) -> LineCap:
        return self._state.line_cap

    @line_cap.setter
    def line_cap(self, value: LineCap) -> None:
        self._state.line_cap = value

    # --- 状態スタック ---
    @property
    def depth(self) -> int:
        """未対応の save() の数を返す。"""

        return len(self._stack)

    @property
    def transform(self) -> np.ndarray:
        """現在の変換行列（3x3, コピー）を返す。"""

        return self._state.transform.copy()

    def save(self) -> None:
        self._stack.append(self._state.copy())

    def restore(self) -> None:
        # 対応する save() が無い restore() は無視する（2D canvas と同じ扱い）。
        if self._stack:
            self._state = self._stack.pop()

    def translate(self, x: float, y: float) -> None:
        m = np.array([[1.0, 0.0, float(x)], [0.0, 1.0, float(y)], [0.0, 0.0, 1.0]])
        self._state.transform = self._state.transform @ m

    def rotate(self, angle: float) -> None:
        c = math.cos(float(angle))
        s = math.sin(float(angle))
        m = np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])
        self._state.transform = self._state.transform @ m

    def scale(self, sx: float, sy: float) -> None:
        m = np.array([[float(sx), 0.0, 0.0], [0.0, float(sy), 0.0], [0.0, 0.0, 1.0]])
        self._state.transform = self._state.transform @ m

    def transform_point(self, x: float, y: float) -> tuple[float, float]:
        """ユーザー座標を現在の変換でデバイス座標へ写す。"""

        m = self._state.transform
        return (
            float(m[0, 0] * x + m[0, 1] * y + m[0, 2]),
            float(m[1, 0] * x + m[1, 1] * y + m[1, 2]),
        )

    def create_linear_gradient(
        self, x0: float, y0: float, x1: float, y1: float
    ) -> LinearGradient:
        return LinearGradient(float(x0), float(y0), float(x1), float(y1))

    def create_radial_gradient(
        self, x0: float, y0: float, r0: float, x1: float, y1: float, r1: float
    ) -> RadialGradient:
        return RadialGradient(float(x0), float(y0), float(r0), float(x1), float(y1), float(r1))


__all__ = [
    "ColorStop",
    "CompositeOperation",
    "Gradient",
    "LineCap",
    "LineJoin",
    "LinearGradient",
    "MITER_LIMIT",
    "Paint",
    "RadialGradient",
    "StatefulSurface",
    "Surface",
    "SurfaceState",
]
