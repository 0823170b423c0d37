"""interactive.runtime.painter のフレーム処理とライフサイクル（pause/resume/toggle/destroy）のテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from kandinsky.core.generators import uniform_sampler
from kandinsky.core.recording_surface import RecordingSurface
from kandinsky.interactive.runtime.frame_loop import ManualFrameSource
from kandinsky.interactive.runtime.painter import Painter, PainterState


class _FakeNow:
    def __init__(self, t: float = 0.0) -> None:
        self.t = t

    def __call__(self) -> float:
        return self.t


def _painter(**kw):
    source = ManualFrameSource()
    now = _FakeNow()
    surface = RecordingSurface()
    painter = Painter(
        surface,
        (800.0, 600.0),
        source=source,
        sampler=uniform_sampler(np.random.default_rng(0)),
        now=now,
        **kw,
    )
    return painter, source, surface, now


def test_painter_starts_running_and_armed() -> None:
    painter, source, _surface, _now = _painter()
    assert painter.state is PainterState.RUNNING
    assert painter.loop_running
    assert source.armed
    assert painter.scene is not None
    assert len(painter.scene.shapes) == 23


def test_autostart_false_waits_for_start() -> None:
    painter, source, _surface, _now = _painter(autostart=False)
    assert not source.armed
    painter.start()
    assert source.armed


def test_frames_advance_time_with_capped_dt() -> None:
    painter, source, surface, _now = _painter()
    source.fire(16.0)
    source.fire(32.0)
    assert painter.time == pytest.approx(0.032)
    # 長い空白でも 40 ms までしか進まない。
    source.fire(10_000.0)
    assert painter.time == pytest.approx(0.072)
    assert painter.frames_drawn == 3
    assert surface.names().count("clear_rect") == 3


def test_pause_stops_drawing_but_keeps_loop_armed() -> None:
    painter, source, surface, _now = _painter()
    source.fire(16.0)
    painter.pause()
    surface.clear_commands()
    source.fire(32.0)
    source.fire(48.0)
    assert painter.state is PainterState.PAUSED
    assert painter.time == pytest.approx(0.016)
    assert surface.commands == []
    assert source.armed


def test_pause_twice_is_same_as_once() -> None:
    painter, _source, _surface, _now = _painter()
    painter.pause()
    painter.pause()
    assert painter.state is PainterState.PAUSED
    painter.resume()
    assert painter.state is PainterState.RUNNING


def test_resume_excludes_paused_duration() -> None:
    painter, source, _surface, now = _painter()
    source.fire(16.0)
    painter.pause()
    now.t = 5_000.0
    painter.resume()
    source.fire(5_010.0)
    assert painter.time == pytest.approx(0.026)


def test_toggle_twice_returns_to_running() -> None:
    painter, source, _surface, now = _painter()
    painter.toggle()
    assert painter.state is PainterState.PAUSED
    now.t = 100.0
    painter.toggle()
    assert painter.state is PainterState.RUNNING
    source.fire(110.0)
    assert painter.time == pytest.approx(0.010)


def test_destroy_disarms_and_releases_scene() -> None:
    calls: list[str] = []
    painter, source, _surface, _now = _painter(on_destroy=lambda: calls.append("closed"))
    painter.destroy()
    assert painter.state is PainterState.DESTROYED
    assert not painter.loop_running
    assert not source.armed
    assert painter.scene is None
    assert calls == ["closed"]

    painter.destroy()
    painter.pause()
    painter.resume()
    painter.toggle()
    painter.resize(100.0, 100.0)
    painter.frame(1_000.0)
    assert painter.state is PainterState.DESTROYED
    assert calls == ["closed"]
    assert painter.frames_drawn == 0


def test_destroy_after_frame_stops_rearming() -> None:
    painter, source, _surface, _now = _painter()
    requests = source.requests
    source.fire(16.0)
    assert source.requests == requests + 1
    painter.destroy()
    assert source.fire(32.0) is False
    assert source.requests == requests + 1


def test_resize_updates_viewport_without_moving_records() -> None:
    painter, source, surface, _now = _painter()
    assert painter.scene is not None
    before = [(s.x, s.y) for s in painter.scene.groups]
    painter.resize(400.0, 300.0)
    assert (painter.viewport.width, painter.viewport.height) == (400.0, 300.0)
    assert [(s.x, s.y) for s in painter.scene.groups] == before
    source.fire(16.0)
    assert surface.commands[0].args == (0.0, 0.0, 400.0, 300.0)


def test_painter_requires_surface() -> None:
    with pytest.raises(ValueError):
        Painter(None, (800.0, 600.0), source=ManualFrameSource())


@pytest.mark.parametrize("size", [(0.0, 600.0), (800.0, -1.0), (800.0,)])
def test_painter_rejects_bad_size(size) -> None:
    with pytest.raises(ValueError):
        Painter(RecordingSurface(), size, source=ManualFrameSource())
