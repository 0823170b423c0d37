"""core.color の 16 進カラー解釈と不透明度適用のテスト。"""

from __future__ import annotations

import pytest

from kandinsky.core.color import (
    Rgba,
    color_to_translucent,
    parse_color,
    parse_hex_color,
    validate_palette,
)


def test_color_to_translucent_full_opacity() -> None:
    c = color_to_translucent("#FFFFFF", 1.0)
    assert c == Rgba(255, 255, 255, 1.0)
    assert c.to_css() == "rgba(255,255,255,1)"


def test_color_to_translucent_expands_short_hex() -> None:
    assert color_to_translucent("#000", 0.5) == Rgba(0, 0, 0, 0.5)
    assert color_to_translucent("0af", 0.25) == Rgba(0, 170, 255, 0.25)


def test_color_to_translucent_default_opacity_is_one() -> None:
    assert color_to_translucent("#F23B5A").a == pytest.approx(1.0)


@pytest.mark.parametrize("token", ["", "#12", "#12345", "#GGGGGG", "red", "#1234567"])
def test_parse_hex_color_rejects_malformed(token: str) -> None:
    with pytest.raises(ValueError):
        parse_hex_color(token)


@pytest.mark.parametrize("opacity", [-0.1, 1.5])
def test_color_to_translucent_rejects_out_of_range_opacity(opacity: float) -> None:
    with pytest.raises(ValueError):
        color_to_translucent("#FFFFFF", opacity)


def test_parse_color_accepts_css_rgba_and_records() -> None:
    assert parse_color("rgba(10, 20, 30, 0.4)") == Rgba(10, 20, 30, 0.4)
    assert parse_color("rgb(1,2,3)") == Rgba(1, 2, 3, 1.0)
    rec = Rgba(4, 5, 6, 0.7)
    assert parse_color(rec) is rec
    assert parse_color("#8BD3DD") == Rgba(0x8B, 0xD3, 0xDD, 1.0)


def test_parse_color_rejects_out_of_range_components() -> None:
    with pytest.raises(ValueError):
        parse_color("rgb(256,0,0)")


def test_rgba_to_rgba01() -> None:
    r, g, b, a = Rgba(255, 0, 51, 0.5).to_rgba01()
    assert (r, g, b) == pytest.approx((1.0, 0.0, 0.2))
    assert a == pytest.approx(0.5)


def test_validate_palette() -> None:
    validate_palette(("#fff", "#000000"))
    with pytest.raises(ValueError):
        validate_palette(())
    with pytest.raises(ValueError):
        validate_palette(("#fff", "not-a-color"))
