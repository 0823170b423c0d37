"""interactive.mesh_surface の三角形化（塗り/線/グラデーション/合成モード）のテスト。"""

from __future__ import annotations

import math

import numpy as np
import pytest

from kandinsky.core.color import Rgba
from kandinsky.core.composition import draw_ring
from kandinsky.core.renderer import Viewport
from kandinsky.interactive.mesh_surface import VERTEX_STRIDE, MeshSurface


def _area(vertices: np.ndarray) -> float:
    tris = vertices[:, :2].astype(np.float64).reshape(-1, 3, 2)
    a, b, c = tris[:, 0], tris[:, 1], tris[:, 2]
    cross = (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])
    return float(np.sum(np.abs(cross)) * 0.5)


def test_fill_rect_emits_solid_triangles() -> None:
    ctx = MeshSurface()
    ctx.fill_style = "#ff0000"
    ctx.fill_rect(0.0, 0.0, 10.0, 20.0)
    batches = ctx.flush()
    assert len(batches) == 1
    v = batches[0].vertices
    assert v.dtype == np.float32
    assert v.shape[1] == VERTEX_STRIDE
    assert batches[0].vertex_count % 3 == 0
    assert batches[0].blend == "source-over"
    np.testing.assert_allclose(v[:, 2:6], np.tile([1.0, 0.0, 0.0, 1.0], (v.shape[0], 1)))
    assert _area(v) == pytest.approx(200.0)


def test_global_alpha_scales_vertex_alpha() -> None:
    ctx = MeshSurface()
    ctx.fill_style = Rgba(0, 0, 255, 0.5)
    ctx.global_alpha = 0.5
    ctx.fill_rect(0.0, 0.0, 1.0, 1.0)
    v = ctx.flush()[0].vertices
    np.testing.assert_allclose(v[:, 5], 0.25)


def test_composite_operation_selects_blend_and_flush_merges_runs() -> None:
    ctx = MeshSurface()
    ctx.fill_rect(0.0, 0.0, 1.0, 1.0)
    ctx.fill_rect(2.0, 0.0, 1.0, 1.0)
    ctx.global_composite_operation = "lighter"
    ctx.fill_rect(4.0, 0.0, 1.0, 1.0)
    ctx.global_composite_operation = "source-over"
    ctx.fill_rect(6.0, 0.0, 1.0, 1.0)
    assert ctx.pending_batches == 4

    batches = ctx.flush()
    assert [b.blend for b in batches] == ["source-over", "lighter", "source-over"]
    assert batches[0].vertex_count == 2 * batches[1].vertex_count
    assert ctx.pending_batches == 0
    assert ctx.flush() == []


def test_clear_rect_emits_transparent_copy_batch() -> None:
    ctx = MeshSurface()
    ctx.clear_rect(0.0, 0.0, 300.0, 200.0)
    (batch,) = ctx.flush()
    assert batch.blend == "copy"
    np.testing.assert_allclose(batch.vertices[:, 2:6], 0.0)
    assert _area(batch.vertices) == pytest.approx(60000.0)


def test_path_uses_transform_at_issue_time_and_restore() -> None:
    ctx = MeshSurface()
    ctx.save()
    ctx.translate(100.0, 50.0)
    ctx.fill_rect(0.0, 0.0, 10.0, 10.0)
    ctx.restore()
    ctx.fill_rect(0.0, 0.0, 10.0, 10.0)
    v = ctx.flush()[0].vertices
    first, second = v[: v.shape[0] // 2], v[v.shape[0] // 2 :]
    assert first[:, 0].min() == pytest.approx(100.0)
    assert first[:, 1].max() == pytest.approx(60.0)
    assert second[:, 0].max() == pytest.approx(10.0)


def test_linear_gradient_colors_follow_user_space_position() -> None:
    ctx = MeshSurface()
    grad = ctx.create_linear_gradient(0.0, 0.0, 10.0, 0.0)
    grad.add_color_stop(0.0, "#000000")
    grad.add_color_stop(1.0, "#ffffff")
    ctx.fill_style = grad
    ctx.fill_rect(0.0, 0.0, 10.0, 10.0)
    v = ctx.flush()[0].vertices
    np.testing.assert_allclose(v[:, 2], v[:, 0] / 10.0, atol=1e-5)


def test_gradient_is_evaluated_before_transform() -> None:
    ctx = MeshSurface()
    ctx.translate(50.0, 0.0)
    grad = ctx.create_linear_gradient(0.0, 0.0, 10.0, 0.0)
    grad.add_color_stop(0.0, "#000000")
    grad.add_color_stop(1.0, "#ffffff")
    ctx.fill_style = grad
    ctx.fill_rect(0.0, 0.0, 10.0, 10.0)
    v = ctx.flush()[0].vertices
    np.testing.assert_allclose(v[:, 2], (v[:, 0] - 50.0) / 10.0, atol=1e-5)


def test_radial_gradient_fades_with_distance() -> None:
    ctx = MeshSurface()
    grad = ctx.create_radial_gradient(0.0, 0.0, 0.0, 0.0, 0.0, 10.0)
    grad.add_color_stop(0.0, "#ffffff")
    grad.add_color_stop(1.0, Rgba(255, 255, 255, 0.0))
    ctx.fill_style = grad
    ctx.begin_path()
    ctx.arc(0.0, 0.0, 10.0, 0.0, math.tau)
    ctx.fill()
    v = ctx.flush()[0].vertices
    dist = np.hypot(v[:, 0], v[:, 1])
    np.testing.assert_allclose(v[:, 5], np.clip(1.0 - dist / 10.0, 0.0, 1.0), atol=1e-4)
    assert v[:, 5].max() == pytest.approx(1.0, abs=1e-4)


def test_gradient_without_stops_draws_nothing() -> None:
    ctx = MeshSurface()
    ctx.fill_style = ctx.create_linear_gradient(0.0, 0.0, 1.0, 0.0)
    ctx.fill_rect(0.0, 0.0, 5.0, 5.0)
    assert ctx.flush() == []


def test_non_convex_fill_covers_polygon_area() -> None:
    ctx = MeshSurface()
    ctx.begin_path()
    for i, (x, y) in enumerate([(0, 0), (20, 0), (20, 10), (10, 10), (10, 20), (0, 20)]):
        if i == 0:
            ctx.move_to(x, y)
        else:
            ctx.line_to(x, y)
    ctx.close_path()
    ctx.fill()
    v = ctx.flush()[0].vertices
    assert _area(v) == pytest.approx(300.0)


def test_butt_stroke_covers_segment_times_line_width() -> None:
    ctx = MeshSurface()
    ctx.line_width = 2.0
    ctx.begin_path()
    ctx.move_to(0.0, 0.0)
    ctx.line_to(10.0, 0.0)
    ctx.stroke()
    v = ctx.flush()[0].vertices
    assert _area(v) == pytest.approx(20.0)
    assert v[:, 0].min() == pytest.approx(0.0, abs=1e-5)
    assert v[:, 0].max() == pytest.approx(10.0, abs=1e-5)
    assert v[:, 1].min() == pytest.approx(-1.0, abs=1e-5)
    assert v[:, 1].max() == pytest.approx(1.0, abs=1e-5)


def test_round_cap_extends_past_endpoints() -> None:
    ctx = MeshSurface()
    ctx.line_width = 4.0
    ctx.line_cap = "round"
    ctx.begin_path()
    ctx.move_to(0.0, 0.0)
    ctx.line_to(10.0, 0.0)
    ctx.stroke()
    v = ctx.flush()[0].vertices
    assert -2.0 - 1e-4 <= v[:, 0].min() <= -1.9
    assert 11.9 <= v[:, 0].max() <= 12.0 + 1e-4


def _coverage(vertices: np.ndarray, points: np.ndarray) -> np.ndarray:
    """各点を覆う三角形の数を返す。"""

    tris = vertices[:, :2].astype(np.float64).reshape(-1, 3, 2)
    a = tris[None, :, 0]
    b = tris[None, :, 1]
    c = tris[None, :, 2]
    p = points[:, None, :]

    def _side(p1, p2, p3):
        return (p1[..., 0] - p3[..., 0]) * (p2[..., 1] - p3[..., 1]) - (p2[..., 0] - p3[..., 0]) * (
            p1[..., 1] - p3[..., 1]
        )

    d1 = _side(p, a, b)
    d2 = _side(p, b, c)
    d3 = _side(p, c, a)
    eps = 1e-9
    inside = ~(((d1 < -eps) | (d2 < -eps) | (d3 < -eps)) & ((d1 > eps) | (d2 > eps) | (d3 > eps)))
    return inside.sum(axis=1)


def test_translucent_ring_covers_each_point_once() -> None:
    ctx = MeshSurface()
    draw_ring(ctx, 0.0, Viewport(1280.0, 800.0))
    v = ctx.flush()[0].vertices
    np.testing.assert_allclose(v[:, 5], 0.12, atol=1e-6)

    # リング: 中心 (640, 360)、半径 224、線幅 80。内外の縁から 2px 以上離れた点を調べる。
    rng = np.random.default_rng(3)
    ang = rng.uniform(0.0, 2.0 * math.pi, size=2000)
    rad = rng.uniform(224.0 - 38.0, 224.0 + 38.0, size=2000)
    pts = np.stack([640.0 + rad * np.cos(ang), 360.0 + rad * np.sin(ang)], axis=1)
    assert np.all(_coverage(v, pts) == 1)

    # 穴の中は塗らない。
    hole = np.stack([640.0 + 150.0 * np.cos(ang[:50]), 360.0 + 150.0 * np.sin(ang[:50])], axis=1)
    assert np.all(_coverage(v, hole) == 0)


def test_crossing_subpaths_are_stroked_once() -> None:
    ctx = MeshSurface()
    ctx.line_width = 2.0
    ctx.stroke_style = Rgba(0, 0, 0, 0.5)
    ctx.begin_path()
    ctx.move_to(0.0, 0.0)
    ctx.line_to(10.0, 10.0)
    ctx.move_to(0.0, 10.0)
    ctx.line_to(10.0, 0.0)
    ctx.stroke()
    v = ctx.flush()[0].vertices
    # 交差部と各線の上の点（三角形の辺に乗らないよう中心からずらす）。
    pts = np.array([[5.3, 5.1], [4.8, 5.25], [2.1, 1.9], [8.1, 2.05]])
    assert _coverage(v, pts).tolist() == [1, 1, 1, 1]


def _has_vertex(vertices: np.ndarray, x: float, y: float) -> bool:
    d = np.hypot(vertices[:, 0] - x, vertices[:, 1] - y)
    return bool(np.any(d < 1e-4))


def test_default_join_is_miter() -> None:
    ctx = MeshSurface()
    ctx.line_width = 2.0
    ctx.begin_path()
    ctx.move_to(0.0, 0.0)
    ctx.line_to(10.0, 0.0)
    ctx.line_to(10.0, 10.0)
    ctx.stroke()
    v = ctx.flush()[0].vertices
    # 直角の外側は (11, -1) の尖った角になる。
    assert _has_vertex(v, 11.0, -1.0)
    assert _area(v) == pytest.approx(40.0, abs=1e-3)

    ctx.line_join = "bevel"
    ctx.begin_path()
    ctx.move_to(0.0, 0.0)
    ctx.line_to(10.0, 0.0)
    ctx.line_to(10.0, 10.0)
    ctx.stroke()
    v = ctx.flush()[0].vertices
    assert not _has_vertex(v, 11.0, -1.0)
    assert _area(v) == pytest.approx(39.5, abs=1e-3)


def test_sharp_miter_is_limited() -> None:
    ctx = MeshSurface()
    ctx.line_width = 2.0
    ctx.begin_path()
    ctx.move_to(0.0, 0.0)
    ctx.line_to(100.0, 0.0)
    ctx.line_to(0.0, 1.0)
    ctx.stroke()
    v = ctx.flush()[0].vertices
    # 制限が無ければ角は x ≈ 300 まで伸びる。上限は頂点から 10 * 半線幅。
    assert v[:, 0].max() <= 100.0 + 10.0 + 1e-4
    assert v[:, 0].max() > 101.0


def test_stroke_width_scales_with_transform() -> None:
    ctx = MeshSurface()
    ctx.scale(3.0, 3.0)
    ctx.line_width = 2.0
    ctx.begin_path()
    ctx.move_to(0.0, 0.0)
    ctx.line_to(10.0, 0.0)
    ctx.stroke()
    v = ctx.flush()[0].vertices
    assert v[:, 1].max() == pytest.approx(3.0)


def test_zero_width_stroke_and_degenerate_paths_are_skipped() -> None:
    ctx = MeshSurface()
    ctx.line_width = 0.0
    ctx.begin_path()
    ctx.move_to(0.0, 0.0)
    ctx.line_to(10.0, 0.0)
    ctx.stroke()
    ctx.line_width = 1.0
    ctx.begin_path()
    ctx.move_to(5.0, 5.0)
    ctx.stroke()
    ctx.fill()
    assert ctx.flush() == []


def test_quadratic_curve_ends_at_target() -> None:
    ctx = MeshSurface(curve_segments=8)
    ctx.begin_path()
    ctx.move_to(0.0, 0.0)
    ctx.quadratic_curve_to(5.0, 10.0, 10.0, 0.0)
    ctx.line_to(0.0, 0.0)
    ctx.fill()
    v = ctx.flush()[0].vertices
    # 放物線 y = 2 * 10 * t (1 - t) の下側の面積は 2/3 * 10 * 5。
    assert _area(v) == pytest.approx(2.0 / 3.0 * 10.0 * 5.0, rel=0.05)
    assert v[:, 1].max() == pytest.approx(5.0, abs=1e-4)
