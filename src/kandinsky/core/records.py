"""
どこで: `src/kandinsky/core/records.py`。
何を: シーンを構成するレコード（図形/ストローク/グループとその子）をデータクラスで定義する。
なぜ: 種類ごとにフィールドを明示したクラスとして扱い、描画ルーチンの分岐を isinstance で追えるようにするため。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(slots=True)
class Circle:
    """漂流しながら脈動する円。

    Notes
    -----
    - `x`, `y` は毎フレーム `vx`, `vy` だけ進み、半径分はみ出すと反対側へ回り込む。
    - 枠線色は固定（黒 12%）で、`stroke_width > 0` のときだけ描く。
    """

    x: float
    y: float
    r: float
    fill: str
    stroke_width: float
    vx: float
    vy: float
    wobble: float
    phase: float


@dataclass(slots=True)
class Triangle:
    """自転する歪んだ三角形。"""

    x: float
    y: float
    size: float
    rotation: float
    rotation_speed: float
    fill: str
    stroke: str | None
    stroke_width: float
    skew: float
    # 横ドリフトの位相。生成時は常に 0。
    phase: float = 0.0


@dataclass(slots=True)
class Rect:
    """自転する矩形（中心基準）。"""

    x: float
    y: float
    w: float
    h: float
    rotation: float
    rotation_speed: float
    fill: str
    stroke: str | None
    stroke_width: float


Shape: TypeAlias = Circle | Triangle | Rect


@dataclass(frozen=True, slots=True)
class Point:
    x: float
    y: float


@dataclass(slots=True)
class Stroke:
    """手描き風の折れ線（二次曲線でつなぐ）。

    `points` は生成後に変化しない。描画時に時間依存の全体オフセットだけを足す。
    """

    points: tuple[Point, ...]
    color: str
    width: float
    drift: float
    phase: float


@dataclass(frozen=True, slots=True)
class GroupCircle:
    x: float
    y: float
    r: float
    fill: str
    stroke: str | None
    stroke_width: float


@dataclass(frozen=True, slots=True)
class GroupRect:
    x: float
    y: float
    w: float
    h: float
    fill: str
    stroke: str | None
    stroke_width: float


@dataclass(frozen=True, slots=True)
class GroupTriangle:
    # 二等辺三角形 (0,-r), (r,r), (-r,r)。
    x: float
    y: float
    r: float
    fill: str
    stroke: str | None
    stroke_width: float


GroupChild: TypeAlias = GroupCircle | GroupRect | GroupTriangle


@dataclass(slots=True)
class Group:
    """共通の中心まわりで回転/拡縮する子プリミティブの集合。

    子の座標はグループのローカル座標系で、生成後に変化しない。
    """

    x: float
    y: float
    rotation: float
    speed: float
    scale: float
    children: tuple[GroupChild, ...]


__all__ = [
    "Circle",
    "Group",
    "GroupChild",
    "GroupCircle",
    "GroupRect",
    "GroupTriangle",
    "Point",
    "Rect",
    "Shape",
    "Stroke",
    "Triangle",
]
