"""core.scene の Scene 初期生成のテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from kandinsky.core.generators import uniform_sampler
from kandinsky.core.records import Circle, Rect, Triangle
from kandinsky.core.scene import SceneCounts, populate_scene


def test_populate_scene_default_counts() -> None:
    scene = populate_scene(1280.0, 800.0, sampler=uniform_sampler(np.random.default_rng(0)))
    kinds = [type(s) for s in scene.shapes]
    assert kinds.count(Circle) == 9
    assert kinds.count(Triangle) == 8
    assert kinds.count(Rect) == 6
    assert len(scene.shapes) == 23
    assert len(scene.strokes) == 5
    assert len(scene.groups) == 3
    for g in scene.groups:
        assert 5 <= len(g.children) <= 10


def test_populate_scene_respects_custom_counts() -> None:
    counts = SceneCounts(circles=1, triangles=0, rects=2, strokes=0, groups=1, group_children=(2.0, 2.0))
    scene = populate_scene(400.0, 300.0, sampler=uniform_sampler(np.random.default_rng(1)), counts=counts)
    assert len(scene.shapes) == 3
    assert scene.strokes == []
    assert len(scene.groups) == 1
    assert len(scene.groups[0].children) == 2


def test_populate_scene_rejects_invalid_palette() -> None:
    with pytest.raises(ValueError):
        populate_scene(400.0, 300.0, sampler=uniform_sampler(), palette=("#fff", "oops"))


def test_populate_scene_uses_palette_colors() -> None:
    palette = ("#123456",)
    scene = populate_scene(400.0, 300.0, sampler=uniform_sampler(np.random.default_rng(2)), palette=palette)
    assert {s.fill for s in scene.shapes} == {"#123456"}
    assert {st.color for st in scene.strokes} == {"#123456"}
