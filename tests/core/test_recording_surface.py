"""core.surface の状態スタック/変換と、RecordingSurface の記録内容のテスト。"""

from __future__ import annotations

import math

import numpy as np
import pytest

from kandinsky.core.color import Rgba
from kandinsky.core.recording_surface import RecordingSurface


def test_save_restore_restores_style_and_transform() -> None:
    ctx = RecordingSurface()
    ctx.fill_style = "#fff"
    ctx.save()
    ctx.translate(10.0, 20.0)
    ctx.fill_style = "#000"
    ctx.global_alpha = 0.5
    assert ctx.depth == 1
    ctx.restore()
    assert ctx.depth == 0
    assert ctx.fill_style == "#fff"
    assert ctx.global_alpha == 1.0
    np.testing.assert_allclose(ctx.transform, np.eye(3))


def test_restore_without_save_is_ignored() -> None:
    ctx = RecordingSurface()
    ctx.translate(1.0, 2.0)
    ctx.restore()
    assert ctx.transform_point(0.0, 0.0) == pytest.approx((1.0, 2.0))


def test_transforms_compose_in_call_order() -> None:
    ctx = RecordingSurface()
    ctx.translate(100.0, 0.0)
    ctx.rotate(math.pi / 2)
    ctx.scale(2.0, 2.0)
    x, y = ctx.transform_point(1.0, 0.0)
    assert (x, y) == pytest.approx((100.0, 2.0))


def test_global_alpha_is_clamped() -> None:
    ctx = RecordingSurface()
    ctx.global_alpha = 3.0
    assert ctx.global_alpha == 1.0
    ctx.global_alpha = -1.0
    assert ctx.global_alpha == 0.0


def test_fill_records_style_snapshot() -> None:
    ctx = RecordingSurface()
    ctx.save()
    ctx.fill_style = "#F23B5A"
    ctx.global_composite_operation = "lighter"
    ctx.fill_rect(0.0, 0.0, 10.0, 5.0)
    ctx.restore()

    cmd = ctx.commands[1]
    assert cmd.name == "fill_rect"
    assert cmd.args == (0.0, 0.0, 10.0, 5.0)
    assert cmd.style is not None
    assert cmd.style["paint"] == "#F23B5A"
    assert cmd.style["global_composite_operation"] == "lighter"
    assert cmd.style["depth"] == 1
    assert ctx.names() == ["save", "fill_rect", "restore"]


def test_gradient_stops_are_sorted_and_parsed() -> None:
    ctx = RecordingSurface()
    grad = ctx.create_linear_gradient(0.0, 0.0, 10.0, 0.0)
    grad.add_color_stop(1.0, "rgba(0,0,0,0.5)")
    grad.add_color_stop(0.0, "#fff")
    assert [s.offset for s in grad.stops] == [0.0, 1.0]
    assert grad.stops[0].color == Rgba(255, 255, 255, 1.0)
    assert grad.stops[1].color == Rgba(0, 0, 0, 0.5)


def test_gradient_rejects_out_of_range_offset() -> None:
    grad = RecordingSurface().create_radial_gradient(0.0, 0.0, 1.0, 0.0, 0.0, 2.0)
    with pytest.raises(ValueError):
        grad.add_color_stop(1.5, "#fff")
