"""
どこで: `src/kandinsky/core/color.py`。
何を: 16 進カラートークンの解釈と、不透明度付き色 `Rgba` への変換を提供する。
なぜ: グラデーション（単色 → 同色の半透明）を描画ルーチンから同じ規則で作れるようにするため。
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_HEX_DIGITS = re.compile(r"^[0-9a-fA-F]+$")
_RGBA_CSS = re.compile(
    r"^rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*([0-9]*\.?[0-9]+)\s*)?\)$"
)


@dataclass(frozen=True, slots=True)
class Rgba:
    """RGB255 + alpha（0..1）の色。"""

    r: int
    g: int
    b: int
    a: float = 1.0

    def to_css(self) -> str:
        """`"rgba(r,g,b,a)"` 形式の文字列を返す。"""

        return f"rgba({self.r},{self.g},{self.b},{self.a:g})"

    def to_rgba01(self) -> tuple[float, float, float, float]:
        """0..1 float の RGBA を返す。"""

        return (
            float(self.r) / 255.0,
            float(self.g) / 255.0,
            float(self.b) / 255.0,
            float(self.a),
        )

    def __str__(self) -> str:
        return self.to_css()


Color = str | Rgba


def parse_hex_color(token: str) -> tuple[int, int, int]:
    """`#RGB` / `#RRGGBB`（先頭 `#` は任意）を RGB255 に変換して返す。

    Parameters
    ----------
    token : str
        16 進カラートークン。3 桁は各桁を重ねて 6 桁に展開する（`#0af` → `#00aaff`）。

    Returns
    -------
    tuple[int, int, int]
        0..255 の RGB。

    Raises
    ------
    ValueError
        桁数が 3/6 以外、または 16 進数でない文字を含む場合。
    """

    h = str(token).strip()
    if h.startswith("#"):
        h = h[1:]
    if len(h) not in (3, 6) or not _HEX_DIGITS.match(h):
        raise ValueError(f"16 進カラーとして解釈できない: {token!r}")
    if len(h) == 3:
        h = "".join(ch * 2 for ch in h)
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def _check_opacity(opacity: float) -> float:
    a = float(opacity)
    if not 0.0 <= a <= 1.0:
        raise ValueError(f"opacity は 0..1 である必要がある: {opacity!r}")
    return a


def color_to_translucent(color: str, opacity: float = 1.0) -> Rgba:
    """16 進カラーに不透明度を適用した `Rgba` を返す。

    Notes
    -----
    不正入力は黙って黒にせず `ValueError` で即時に失敗させる。
    パレットは `populate_scene` で事前検証されるため、描画中に例外が出ることはない。
    """

    r, g, b = parse_hex_color(color)
    return Rgba(r, g, b, _check_opacity(opacity))


def parse_color(value: Color) -> Rgba:
    """描画面に渡される色指定（16 進 / `rgba(...)` / `Rgba`）を `Rgba` に正規化する。"""

    if isinstance(value, Rgba):
        return value
    text = str(value).strip()
    m = _RGBA_CSS.match(text)
    if m is not None:
        r, g, b = (int(m.group(i)) for i in (1, 2, 3))
        if max(r, g, b) > 255:
            raise ValueError(f"rgb 成分は 0..255 である必要がある: {value!r}")
        a = _check_opacity(float(m.group(4))) if m.group(4) is not None else 1.0
        return Rgba(r, g, b, a)
    r, g, b = parse_hex_color(text)
    return Rgba(r, g, b, 1.0)


def validate_palette(palette: tuple[str, ...]) -> None:
    """パレットの全色が解釈可能であることを検証する。

    Raises
    ------
    ValueError
        空、または解釈できない色を含む場合。
    """

    if not palette:
        raise ValueError("palette は 1 色以上である必要がある")
    for token in palette:
        parse_hex_color(token)


__all__ = [
    "Color",
    "Rgba",
    "color_to_translucent",
    "parse_color",
    "parse_hex_color",
    "validate_palette",
]
