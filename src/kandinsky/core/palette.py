# どこで: `src/kandinsky/core/palette.py`。
# 何を: 全ジェネレータが共有する固定パレットを定義する。
# なぜ: 色の出どころを 1 箇所に固定し、構図全体のトーンを揃えるため。

from __future__ import annotations

# 暖色/寒色/無彩色を強いコントラストで並べる。順序も意味を持つ（index で選ぶ）。
PALETTE: tuple[str, ...] = (
    "#F23B5A",  # warm red
    "#FFC857",  # golden yellow
    "#8BD3DD",  # pale teal
    "#3A7CA5",  # deep blue
    "#6F2DA8",  # violet
    "#FFFFFF",  # white
    "#000000",  # black
    "#FF7AB6",  # pink
)

__all__ = ["PALETTE"]
