"""
どこで: `src/kandinsky/interactive/mesh_surface.py`。
何を: 描画命令（パス/塗り/線/グラデーション）を頂点色付きの三角形列へ変換する描画面を提供する。
なぜ: core の描画ルーチンをそのまま使い、GPU 側は「色付き三角形を順に描く」だけの単純な実装に保つため。
"""

from __future__ import annotations

import functools
import math
from dataclasses import dataclass, field

import numpy as np
import shapely

from kandinsky.core.color import Color, parse_color
from kandinsky.core.surface import (
    MITER_LIMIT,
    CompositeOperation,
    LinearGradient,
    Paint,
    RadialGradient,
    StatefulSurface,
)

TAU = 2.0 * math.pi
VERTEX_STRIDE = 6  # x, y, r, g, b, a

_EMPTY_RGBA = np.zeros((0, 4), dtype=np.float64)
_EMPTY_POINTS = np.zeros((0, 2), dtype=np.float64)

# Surface の線端/継ぎ目の名前 → shapely buffer のスタイル名。
_CAP_STYLES = {"butt": "flat", "round": "round", "square": "square"}
_JOIN_STYLES = {"miter": "mitre", "round": "round", "bevel": "bevel"}


@dataclass(frozen=True, slots=True)
class DrawBatch:
    """同じ合成モードで描く三角形列。

    Parameters
    ----------
    vertices : np.ndarray
        float32 shape (N, 6) の `[x, y, r, g, b, a]`。N は 3 の倍数（三角形リスト）。
        色は 0..1 の非乗算アルファ。
    blend : CompositeOperation
        合成モード。
    """

    vertices: np.ndarray
    blend: CompositeOperation

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])


@dataclass(slots=True)
class _Subpath:
    # デバイス座標（発行時点の変換を適用済み）。
    points: list[tuple[float, float]] = field(default_factory=list)
    closed: bool = False


@functools.lru_cache(maxsize=256)
def _solid_rgba01(value: Color) -> tuple[float, float, float, float]:
    return parse_color(value).to_rgba01()


def _dedupe(points: np.ndarray, *, eps: float = 1e-9) -> np.ndarray:
    """連続する重複頂点を取り除く。"""

    if points.shape[0] < 2:
        return points
    step = np.linalg.norm(np.diff(points, axis=0), axis=1)
    keep = np.concatenate([[True], step > eps])
    return points[keep]


def _is_convex(poly: np.ndarray) -> bool:
    a = poly
    b = np.roll(poly, -1, axis=0)
    c = np.roll(poly, -2, axis=0)
    cross = (b[:, 0] - a[:, 0]) * (c[:, 1] - b[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - b[:, 0])
    nz = cross[np.abs(cross) > 1e-9]
    return bool(nz.size == 0 or np.all(nz > 0) or np.all(nz < 0))


def _ring_fan(poly: np.ndarray, rings: int) -> np.ndarray:
    """凸多角形を重心から同心状に分割した三角形列 (T*3, 2) を返す。

    放射グラデーションのように中心からの距離で色が変わる塗りを、頂点色の補間で近似するために使う。
    """

    c = poly.mean(axis=0)
    a = poly - c
    b = np.roll(poly, -1, axis=0) - c
    parts: list[np.ndarray] = []
    for j in range(1, int(rings) + 1):
        f_in = (j - 1) / rings
        f_out = j / rings
        a_out = c + a * f_out
        b_out = c + b * f_out
        if j == 1:
            center = np.broadcast_to(c, a_out.shape)
            parts.append(np.stack([center, a_out, b_out], axis=1))
            continue
        a_in = c + a * f_in
        b_in = c + b * f_in
        parts.append(np.stack([a_in, a_out, b_out], axis=1))
        parts.append(np.stack([a_in, b_out, b_in], axis=1))
    return np.concatenate(parts, axis=0).reshape(-1, 2)


def _point_in_triangle(p: np.ndarray, a: np.ndarray, b: np.ndarray, c: np.ndarray) -> np.ndarray:
    def _side(p1: np.ndarray, p2: np.ndarray, p3: np.ndarray) -> np.ndarray:
        return (p1[..., 0] - p3[0]) * (p2[1] - p3[1]) - (p2[0] - p3[0]) * (p1[..., 1] - p3[1])

    d1 = _side(p, a, b)
    d2 = _side(p, b, c)
    d3 = _side(p, c, a)
    has_neg = (d1 < 0) | (d2 < 0) | (d3 < 0)
    has_pos = (d1 > 0) | (d2 > 0) | (d3 > 0)
    return ~(has_neg & has_pos)


def _ear_clip(poly: np.ndarray) -> np.ndarray:
    """単純多角形を耳切り法で三角形列 (T*3, 2) にする。"""

    pts = poly
    # 反時計回り（y 下向き座標系での符号）に揃える。
    area = 0.5 * float(np.sum(pts[:, 0] * np.roll(pts[:, 1], -1) - np.roll(pts[:, 0], -1) * pts[:, 1]))
    idx = list(range(pts.shape[0]))
    if area < 0:
        idx.reverse()

    tris: list[np.ndarray] = []
    guard = 0
    while len(idx) > 3 and guard < 10 * pts.shape[0]:
        guard += 1
        n = len(idx)
        for k in range(n):
            i0, i1, i2 = idx[(k - 1) % n], idx[k], idx[(k + 1) % n]
            a, b, c = pts[i0], pts[i1], pts[i2]
            cross = (b[0] - a[0]) * (c[1] - b[1]) - (b[1] - a[1]) * (c[0] - b[0])
            if cross <= 0:
                continue
            others = [j for j in idx if j not in (i0, i1, i2)]
            if others and np.any(_point_in_triangle(pts[others], a, b, c)):
                continue
            tris.append(np.stack([a, b, c]))
            del idx[k]
            break
        else:
            # 自己交差などで耳が見つからない場合は残りを扇状に塗る。
            break
    rest = pts[idx]
    for k in range(1, len(idx) - 1):
        tris.append(np.stack([rest[0], rest[k], rest[k + 1]]))
    if not tris:
        return np.zeros((0, 2), dtype=np.float64)
    return np.concatenate(tris, axis=0)


def _triangulate_area(geom) -> np.ndarray:
    """面 geometry（穴あり可）を互いに重ならない三角形列 (T*3, 2) にする。"""

    if geom.is_empty:
        return _EMPTY_POINTS
    tris = shapely.get_parts(shapely.constrained_delaunay_triangles(geom))
    if tris.size == 0:
        return _EMPTY_POINTS
    # 三角形の外周は閉じた 4 点（始点 = 終点）。
    coords = shapely.get_coordinates(shapely.get_exterior_ring(tris))
    return coords.reshape(-1, 4, 2)[:, :3].reshape(-1, 2)


class MeshSurface(StatefulSurface):
    """三角形バッチを生成する描画面。

    Notes
    -----
    - 塗り: 凸多角形は重心からの扇（グラデーション時は同心リングで細分化）、非凸は耳切り法で三角形化する。
    - 線: サブパスごとの輪郭を shapely の buffer で作り（miter は `MITER_LIMIT` まで）、
      1 回の stroke 分を union してから制約付き Delaunay で三角形化する。
      同じ点を 2 度塗らないため、半透明の線でも継ぎ目や交差が濃くならない。
    - 放射グラデーションは終端円の中心まわりの同心円として評価する。
    """

    def __init__(
        self,
        *,
        curve_segments: int = 12,
        gradient_rings: int = 6,
        arc_segment_length: float = 6.0,
    ) -> None:
        super().__init__()
        self._curve_segments = max(2, int(curve_segments))
        self._gradient_rings = max(1, int(gradient_rings))
        self._arc_segment_length = max(0.5, float(arc_segment_length))
        self._subpaths: list[_Subpath] = []
        self._batches: list[DrawBatch] = []

    # --- 変換ヘルパ ---
    def _to_device(self, pts: np.ndarray) -> np.ndarray:
        m = self._state.transform
        return pts @ m[:2, :2].T + m[:2, 2]

    def _scale_factor(self) -> float:
        m = self._state.transform
        return math.sqrt(abs(float(np.linalg.det(m[:2, :2]))))

    def _current(self) -> _Subpath | None:
        if not self._subpaths:
            return None
        return self._subpaths[-1]

    # --- パス ---
    def begin_path(self) -> None:
        self._subpaths = []

    def move_to(self, x: float, y: float) -> None:
        self._subpaths.append(_Subpath(points=[self.transform_point(x, y)]))

    def line_to(self, x: float, y: float) -> None:
        sub = self._current()
        if sub is None or sub.closed:
            self.move_to(x, y)
            return
        sub.points.append(self.transform_point(x, y))

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None:
        sub = self._current()
        if sub is None or sub.closed:
            self.move_to(cpx, cpy)
            sub = self._subpaths[-1]
        p0 = np.asarray(sub.points[-1], dtype=np.float64)
        c = np.asarray(self.transform_point(cpx, cpy), dtype=np.float64)
        p1 = np.asarray(self.transform_point(x, y), dtype=np.float64)
        # アフィン変換でベジェは保たれるため、デバイス座標で平坦化する。
        t = np.linspace(0.0, 1.0, num=self._curve_segments + 1)[1:, None]
        pts = (1.0 - t) ** 2 * p0 + 2.0 * (1.0 - t) * t * c + t**2 * p1
        sub.points.extend((float(px), float(py)) for px, py in pts)

    def arc(self, x: float, y: float, radius: float, start: float, end: float) -> None:
        r = abs(float(radius))
        sweep = float(end) - float(start)
        sweep = TAU if sweep >= TAU else sweep % TAU
        arc_len = sweep * r * self._scale_factor()
        n = min(256, max(8, int(math.ceil(arc_len / self._arc_segment_length))))
        ang = float(start) + np.linspace(0.0, sweep, num=n + 1)
        local = np.stack([x + r * np.cos(ang), y + r * np.sin(ang)], axis=1)
        pts = [(float(px), float(py)) for px, py in self._to_device(local)]

        sub = self._current()
        if sub is None or sub.closed:
            self._subpaths.append(_Subpath(points=pts))
        else:
            sub.points.extend(pts)

    def rect(self, x: float, y: float, w: float, h: float) -> None:
        self._subpaths.append(_Subpath(points=self._rect_points(x, y, w, h), closed=True))

    def close_path(self) -> None:
        sub = self._current()
        if sub is not None:
            sub.closed = True

    def _rect_points(self, x: float, y: float, w: float, h: float) -> list[tuple[float, float]]:
        local = np.array([[x, y], [x + w, y], [x + w, y + h], [x, y + h]], dtype=np.float64)
        return [(float(px), float(py)) for px, py in self._to_device(local)]

    # --- 塗り/線 ---
    def fill(self) -> None:
        self._fill_subpaths(self._subpaths, self.fill_style)

    def stroke(self) -> None:
        self._stroke_subpaths(self._subpaths, self.stroke_style)

    def fill_rect(self, x: float, y: float, w: float, h: float) -> None:
        sub = _Subpath(points=self._rect_points(x, y, w, h), closed=True)
        self._fill_subpaths([sub], self.fill_style)

    def stroke_rect(self, x: float, y: float, w: float, h: float) -> None:
        sub = _Subpath(points=self._rect_points(x, y, w, h), closed=True)
        self._stroke_subpaths([sub], self.stroke_style)

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:
        poly = np.asarray(self._rect_points(x, y, w, h), dtype=np.float64)
        tris = _ring_fan(poly, 1)
        colors = np.zeros((tris.shape[0], 4), dtype=np.float64)
        self._emit(tris, colors, "copy")

    def _fill_subpaths(self, subpaths: list[_Subpath], paint: Paint) -> None:
        gradient = isinstance(paint, (LinearGradient, RadialGradient))
        parts: list[np.ndarray] = []
        for sub in subpaths:
            poly = _dedupe(np.asarray(sub.points, dtype=np.float64))
            if poly.shape[0] > 1 and np.allclose(poly[0], poly[-1]):
                poly = poly[:-1]
            if poly.shape[0] < 3:
                continue
            if _is_convex(poly):
                parts.append(_ring_fan(poly, self._gradient_rings if gradient else 1))
            else:
                parts.append(_ear_clip(poly))
        if not parts:
            return
        tris = np.concatenate(parts, axis=0)
        self._emit_painted(tris, paint)

    def _stroke_subpaths(self, subpaths: list[_Subpath], paint: Paint) -> None:
        hw = 0.5 * self.line_width * self._scale_factor()
        if hw <= 0:
            return
        outlines = []
        for sub in subpaths:
            pts = _dedupe(np.asarray(sub.points, dtype=np.float64))
            if sub.closed and pts.shape[0] > 2:
                pts = _dedupe(np.concatenate([pts, pts[:1]], axis=0))
            if pts.shape[0] < 2:
                continue
            outlines.append(self._stroke_outline(pts, hw, closed=sub.closed))
        if not outlines:
            return
        # 重なり（継ぎ目/交差/閉路の始終点）を 1 枚の面へまとめ、各点を 1 回だけ塗る。
        tris = _triangulate_area(shapely.union_all(outlines))
        if tris.shape[0] == 0:
            return
        self._emit_painted(tris, paint)

    def _stroke_outline(self, pts: np.ndarray, hw: float, *, closed: bool):
        """1 本のサブパスの線の輪郭（Polygon）を返す。閉路には線端を付けない。"""

        # 閉路の始終点も継ぎ目として扱う。2 点だけの閉路は線分として描く。
        if closed and pts.shape[0] >= 4:
            line = shapely.LinearRing(pts)
        else:
            line = shapely.LineString(pts)
        quad_segs = max(2, min(8, int(math.ceil(hw / 2.0))))
        return line.buffer(
            hw,
            quad_segs=quad_segs,
            cap_style=_CAP_STYLES[self.line_cap],
            join_style=_JOIN_STYLES[self.line_join],
            mitre_limit=MITER_LIMIT,
        )

    # --- 色 ---
    def _emit_painted(self, tris: np.ndarray, paint: Paint) -> None:
        if isinstance(paint, (LinearGradient, RadialGradient)):
            colors = self._gradient_colors(paint, tris)
        else:
            rgba = np.asarray(_solid_rgba01(paint), dtype=np.float64)
            colors = np.broadcast_to(rgba, (tris.shape[0], 4)).copy()
        if colors.shape[0] == 0:
            return
        colors[:, 3] *= self.global_alpha
        self._emit(tris, colors, self.global_composite_operation)

    def _gradient_colors(self, gradient: LinearGradient | RadialGradient, tris: np.ndarray) -> np.ndarray:
        if not gradient.stops:
            # stop の無いグラデーションは何も塗らない。
            return _EMPTY_RGBA
        m = self._state.transform[:2, :2]
        if abs(float(np.linalg.det(m))) < 1e-12:
            return _EMPTY_RGBA
        # グラデーションは塗り時点の変換のユーザー座標で評価する。
        user = (tris - self._state.transform[:2, 2]) @ np.linalg.inv(m).T

        if isinstance(gradient, LinearGradient):
            d = np.array([gradient.x1 - gradient.x0, gradient.y1 - gradient.y0])
            denom = float(d @ d)
            if denom <= 0:
                t = np.zeros(user.shape[0])
            else:
                t = ((user - np.array([gradient.x0, gradient.y0])) @ d) / denom
        else:
            dist = np.linalg.norm(user - np.array([gradient.x1, gradient.y1]), axis=1)
            span = gradient.r1 - gradient.r0
            t = np.zeros(user.shape[0]) if span == 0 else (dist - gradient.r0) / span
        t = np.clip(t, 0.0, 1.0)

        offsets = np.array([s.offset for s in gradient.stops])
        stop_colors = np.array([s.color.to_rgba01() for s in gradient.stops])
        return np.stack([np.interp(t, offsets, stop_colors[:, k]) for k in range(4)], axis=1)

    def _emit(self, tris: np.ndarray, colors: np.ndarray, blend: CompositeOperation) -> None:
        if tris.shape[0] == 0:
            return
        vertices = np.empty((tris.shape[0], VERTEX_STRIDE), dtype=np.float32)
        vertices[:, 0:2] = tris
        vertices[:, 2:6] = colors
        self._batches.append(DrawBatch(vertices=vertices, blend=blend))

    # --- 取り出し ---
    @property
    def pending_batches(self) -> int:
        return len(self._batches)

    def flush(self) -> list[DrawBatch]:
        """溜まった三角形を、連続する同一合成モードごとにまとめて返し、内部を空にする。"""

        merged: list[DrawBatch] = []
        run: list[np.ndarray] = []
        blend: CompositeOperation | None = None
        for batch in self._batches:
            if blend is not None and batch.blend != blend:
                merged.append(DrawBatch(vertices=np.concatenate(run, axis=0), blend=blend))
                run = []
            blend = batch.blend
            run.append(batch.vertices)
        if run and blend is not None:
            merged.append(DrawBatch(vertices=np.concatenate(run, axis=0), blend=blend))
        self._batches = []
        return merged


__all__ = ["VERTEX_STRIDE", "DrawBatch", "MeshSurface"]
