"""
どこで: `src/kandinsky/core/scene.py`。
何を: 1 インスタンス分のアニメーション状態（図形/ストローク/グループ）を保持する Scene と、その初期生成を提供する。
なぜ: 生成は起動時に 1 度だけ行い、以後はフレーム処理だけがレコードを更新する、という所有関係を明確にするため。
"""

from __future__ import annotations

from dataclasses import dataclass, field

from kandinsky.core.color import validate_palette
from kandinsky.core.generators import (
    Sampler,
    make_circle,
    make_group,
    make_rect,
    make_stroke,
    make_triangle,
)
from kandinsky.core.palette import PALETTE
from kandinsky.core.records import Group, Shape, Stroke


@dataclass(frozen=True, slots=True)
class SceneCounts:
    """起動時に生成する各レコードの個数。"""

    circles: int = 9
    triangles: int = 8
    rects: int = 6
    strokes: int = 5
    groups: int = 3
    # グループの子の数は ceil(U(lo, hi))。
    group_children: tuple[float, float] = (5.0, 10.0)


@dataclass(slots=True)
class Scene:
    """生存中の全レコード。

    Notes
    -----
    レコードの追加/削除は起動後に行わない。`shapes` の並び順だけは毎フレーム y で並べ替える。
    """

    shapes: list[Shape] = field(default_factory=list)
    strokes: list[Stroke] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)


def populate_scene(
    width: float,
    height: float,
    *,
    sampler: Sampler,
    palette: tuple[str, ...] = PALETTE,
    counts: SceneCounts = SceneCounts(),
) -> Scene:
    """描画面サイズに合わせて Scene を生成する。

    Raises
    ------
    ValueError
        palette に解釈できない色が含まれる場合、または width/height が正でない場合。
    """

    # 描画中に色変換で落ちないよう、生成前にパレットを検証しておく。
    validate_palette(palette)

    scene = Scene()
    for _ in range(int(counts.circles)):
        scene.shapes.append(make_circle(width, height, sampler=sampler, palette=palette))
    for _ in range(int(counts.triangles)):
        scene.shapes.append(make_triangle(width, height, sampler=sampler, palette=palette))
    for _ in range(int(counts.rects)):
        scene.shapes.append(make_rect(width, height, sampler=sampler, palette=palette))
    for _ in range(int(counts.strokes)):
        scene.strokes.append(make_stroke(width, height, sampler=sampler, palette=palette))

    lo, hi = counts.group_children
    for _ in range(int(counts.groups)):
        count = sampler(float(lo), float(hi))
        scene.groups.append(
            make_group(width, height, count=count, sampler=sampler, palette=palette)
        )
    return scene


__all__ = ["Scene", "SceneCounts", "populate_scene"]
